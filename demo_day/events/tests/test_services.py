from unittest import mock

import pytest
from django.db import DatabaseError
from django.db import OperationalError
from django.db import connection

from demo_day.events import services
from demo_day.events.exceptions import StoreError
from demo_day.events.models import Booking
from demo_day.events.models import Room
from demo_day.events.models import Startup
from tests.factories import create_booking
from tests.factories import create_event

pytestmark = pytest.mark.django_db


def spots(startup_id):
    return Startup.objects.get(pk=startup_id).spots


def test_record_booking_stores_row_and_takes_one_spot_each():
    event = create_event(spots=4)

    booking = services.record_booking(
        name="Aisha",
        phone="+97333123456",
        startup_ids=["1", "4"],
        room_id=event.room.id,
    )

    booking.refresh_from_db()
    assert booking.name == "Aisha"
    assert booking.phone == "+97333123456"
    assert booking.startups == ["1", "4"]
    assert booking.room_id == "room1"
    assert spots("1") == 3  # noqa: PLR2004
    assert spots("4") == 3  # noqa: PLR2004
    assert spots("3") == 4  # noqa: PLR2004


def test_take_spots_never_goes_below_zero():
    create_event(spots=0)
    assert services.take_spots(["1"]) == {"1": 0}
    assert spots("1") == 0


def test_get_startup_spots_unknown_id_is_a_store_error():
    create_event()
    with pytest.raises(StoreError):
        services.get_startup_spots("missing")


def test_set_startup_spots_rejects_negative():
    create_event()
    with pytest.raises(ValueError, match="negative"):
        services.set_startup_spots("1", -1)


def test_record_booking_rolls_back_when_spot_update_fails():
    event = create_event(spots=4)
    with (
        mock.patch.object(
            services, "set_startup_spots", side_effect=StoreError("updating")
        ),
        pytest.raises(StoreError),
    ):
        services.record_booking(
            name="Aisha",
            phone="+97333123456",
            startup_ids=["1"],
            room_id=event.room.id,
        )
    assert not Booking.objects.exists()
    assert spots("1") == 4  # noqa: PLR2004


def test_database_error_becomes_store_error():
    with (
        mock.patch.object(
            Booking.objects, "select_related", side_effect=DatabaseError("boom")
        ),
        pytest.raises(StoreError) as excinfo,
    ):
        services.list_bookings()
    assert excinfo.value.operation == "fetching bookings"


def test_reset_event_restores_spots_and_deletes_bookings(settings):
    settings.EVENT_DEFAULT_SPOTS = 4
    event = create_event(spots=1)
    create_booking(event.room, ["1"])
    create_booking(event.room, ["3", "4"], name="Omar", phone="+96650000000")

    services.reset_event()

    assert not Booking.objects.exists()
    assert set(Startup.objects.values_list("spots", flat=True)) == {4}


def test_reset_event_attempts_both_writes_and_raises_first_failure():
    event = create_event(spots=1)
    create_booking(event.room, ["1"])
    with (
        mock.patch.object(
            services, "reset_all_spots", side_effect=StoreError("resetting")
        ),
        pytest.raises(StoreError) as excinfo,
    ):
        services.reset_event()
    assert excinfo.value.operation == "resetting"
    # Bookings were still deleted.
    assert not Booking.objects.exists()


def test_ensure_seed_data_is_idempotent(settings):
    settings.EVENT_DEFAULT_SPOTS = 4
    assert services.ensure_seed_data() is True
    assert services.ensure_seed_data() is False
    assert Room.objects.count() == 1
    assert list(Startup.objects.values_list("id", "name")) == [
        ("1", "Tamam"),
        ("3", "TellSaleem"),
        ("4", "Soor"),
        ("5", "Rentat"),
    ]


def test_ensure_seed_data_leaves_existing_rooms_alone():
    create_event(room_id="hall", room_name="Hall", startups={"7": "Seven"})
    assert services.ensure_seed_data() is False
    assert list(Startup.objects.values_list("id", flat=True)) == ["7"]


def test_load_event_rooms_seeds_when_enabled(settings):
    settings.EVENT_AUTO_SEED = True
    rooms = services.load_event_rooms()
    assert [room.id for room in rooms] == ["room1"]
    assert [s.id for s in rooms[0].startups.all()] == ["1", "3", "4", "5"]


def test_load_event_rooms_without_seeding(settings):
    settings.EVENT_AUTO_SEED = False
    assert services.load_event_rooms() == []


def test_bulk_writes_notify_feed():
    event = create_event()
    create_booking(event.room, ["1"])
    with mock.patch("demo_day.events.services.notify_on_commit") as notify:
        services.reset_event()
    notify.assert_any_call("startups", "UPDATE")
    notify.assert_any_call("bookings", "DELETE")


@pytest.mark.django_db(transaction=True)
def test_record_booking_commit_failure_is_store_error():
    event = create_event(spots=4)
    with (
        mock.patch.object(
            connection, "commit", side_effect=OperationalError("commit lost")
        ),
        pytest.raises(StoreError) as excinfo,
    ):
        services.record_booking(
            name="Aisha",
            phone="+97333123456",
            startup_ids=["1"],
            room_id=event.room.id,
        )
    assert excinfo.value.operation == "recording booking"
    assert not Booking.objects.exists()
    assert spots("1") == 4  # noqa: PLR2004
