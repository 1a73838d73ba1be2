from unittest import mock

import pytest

from demo_day.events import services
from demo_day.events.models import Startup
from demo_day.realtime import feed
from tests.factories import create_booking
from tests.factories import create_event

pytestmark = pytest.mark.django_db


@pytest.fixture
def received():
    events = []
    handles = [
        feed.subscribe(table, lambda t, e: events.append((t, e)))
        for table in feed.WATCHED_TABLES
    ]
    with mock.patch("demo_day.realtime.events.tables.emit_table_change"):
        yield events
    for unsubscribe in handles:
        unsubscribe()


def test_booking_insert_is_announced_after_commit(
    received, django_capture_on_commit_callbacks
):
    event = create_event()
    received.clear()
    with django_capture_on_commit_callbacks(execute=True):
        create_booking(event.room, ["1"])
    assert received == [("bookings", "INSERT")]


def test_nothing_announced_before_commit(received, django_capture_on_commit_callbacks):
    event = create_event()
    received.clear()
    with django_capture_on_commit_callbacks(execute=False) as callbacks:
        create_booking(event.room, ["1"])
    assert received == []
    assert len(callbacks) == 1


def test_startup_save_and_delete_are_announced(
    received, django_capture_on_commit_callbacks
):
    event = create_event()
    received.clear()
    with django_capture_on_commit_callbacks(execute=True):
        startup = event.startups["1"]
        startup.spots = 2
        startup.save()
        Startup.objects.get(pk="3").delete()
    assert received == [("startups", "UPDATE"), ("startups", "DELETE")]


def test_record_booking_announces_both_tables(
    received, django_capture_on_commit_callbacks
):
    event = create_event()
    received.clear()
    with django_capture_on_commit_callbacks(execute=True):
        services.record_booking(
            name="Aisha",
            phone="+97333123456",
            startup_ids=["1", "4"],
            room_id=event.room.id,
        )
    assert ("bookings", "INSERT") in received
    assert received.count(("startups", "UPDATE")) == 2  # noqa: PLR2004
