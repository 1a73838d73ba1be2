import pytest

from demo_day.events.models import Booking
from demo_day.events.models import Room
from demo_day.selection import screens
from demo_day.selection import state as transitions
from demo_day.selection.state import SelectionState
from tests.factories import create_booking
from tests.factories import create_event

pytestmark = pytest.mark.django_db


def rooms():
    return list(Room.objects.prefetch_related("startups"))


def test_room_list_when_no_room_chosen():
    create_event()
    screen = screens.build_screen(SelectionState.initial(), rooms())
    assert screen["screen"] == screens.PICKER
    assert screen["room"] is None
    assert screen["rooms"][0]["startups"] == ["Tamam", "TellSaleem", "Soor", "Rentat"]


def test_picker_cards_reflect_selection_and_capacity():
    event = create_event(spots=4)
    event.startups["5"].spots = 0
    event.startups["5"].save()
    state = transitions.choose_room(SelectionState.initial(), "room1")
    state = transitions.toggle(state, "1", 4)

    screen = screens.build_screen(state, rooms())

    cards = {card["id"]: card for card in screen["startups"]}
    assert cards["1"]["selected"]
    assert cards["1"]["spots_left"] == 3  # noqa: PLR2004
    assert cards["5"]["full"]
    assert not cards["5"]["selectable"]
    assert screen["selected"] == ["Tamam"]
    assert screen["selected_count"] == 1
    assert screen["can_confirm"]
    assert screen["max_selections"] == 2  # noqa: PLR2004


def test_booking_form_screen():
    create_event()
    state = transitions.choose_room(SelectionState.initial(), "room1")
    state = transitions.open_form(transitions.toggle(state, "4", 4))

    screen = screens.build_screen(state, rooms())

    assert screen["screen"] == screens.BOOKING_FORM
    assert screen["selected"] == ["Soor"]
    assert screen["country_code"] == "973"
    assert {"code": "973", "label": "Bahrain"} in screen["country_codes"]
    assert not screen["can_submit"]


def test_success_screen():
    create_event()
    state = transitions.submission_succeeded(
        transitions.open_form(
            transitions.toggle(
                transitions.choose_room(SelectionState.initial(), "room1"), "1", 4
            )
        ),
        now=1.0,
    )
    screen = screens.build_screen(state, rooms())
    assert screen["screen"] == screens.SUCCESS
    assert screen["title"] == "Thank you for your booking!"


def test_admin_screens_take_priority():
    create_event()
    state = transitions.open_admin_login(SelectionState.initial())
    assert screens.current_screen(state) == screens.ADMIN_LOGIN

    admin = transitions.admin_login(state, "0000", secret="0000")
    event_rooms = rooms()
    create_booking(Room.objects.get(), ["1", "4"])
    screen = screens.build_screen(admin, event_rooms, list(Booking.objects.all()))
    assert screen["screen"] == screens.ADMIN_DASHBOARD
    assert screen["total"] == 1
    assert screen["bookings"][0]["startups"] == ["Tamam", "Soor"]
    assert list(screen["by_startup"]) == ["Tamam", "Soor"]
    assert not screen["confirming_reset"]
