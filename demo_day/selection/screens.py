"""Screen view-models built from a :class:`SelectionState`.

``build_screen`` is a pure function of the state and the data it is given. It
picks exactly one of the five screens and returns everything a client needs to
draw it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING
from typing import Any

from django.conf import settings

from demo_day.events.reports import attendees_by_startup
from demo_day.events.reports import booking_rows
from demo_day.selection import state as transitions

if TYPE_CHECKING:  # import for type checking only
    from collections.abc import Sequence

    from demo_day.events.models import Booking
    from demo_day.events.models import Room
    from demo_day.events.models import Startup
    from demo_day.selection.state import SelectionState

PICKER = "picker"
BOOKING_FORM = "booking_form"
SUCCESS = "success"
ADMIN_LOGIN = "admin_login"
ADMIN_DASHBOARD = "admin_dashboard"

SUCCESS_TITLE = "Thank you for your booking!"
SUCCESS_MESSAGE = "Your selection has been submitted. Enjoy the rest of the event!"


def current_screen(state: SelectionState) -> str:
    if state.is_admin:
        return ADMIN_DASHBOARD
    if state.show_admin_login:
        return ADMIN_LOGIN
    if state.show_form:
        return SUCCESS if state.show_success else BOOKING_FORM
    return PICKER


def find_room(rooms: Sequence[Room], room_id: str | None) -> Room | None:
    if room_id is None:
        return None
    return next((room for room in rooms if room.id == room_id), None)


def startup_card(state: SelectionState, startup: Startup) -> dict[str, Any]:
    return {
        "id": startup.id,
        "name": startup.name,
        "selected": transitions.is_selected(state, startup.id),
        "spots_left": transitions.spots_left(state, startup.id, startup.spots),
        "full": transitions.is_full(state, startup.id, startup.spots),
        "selectable": transitions.is_selectable(state, startup.id, startup.spots),
    }


def _selected_names(state: SelectionState, room: Room | None) -> list[str]:
    if room is None:
        return list(state.selected)
    names = {startup.id: startup.name for startup in room.startups.all()}
    return [names.get(sid, sid) for sid in state.selected]


def _picker(state: SelectionState, rooms: Sequence[Room]) -> dict[str, Any]:
    room = find_room(rooms, state.room_id)
    if room is None:
        return {
            "room": None,
            "rooms": [
                {
                    "id": r.id,
                    "name": r.name,
                    "startups": [s.name for s in r.startups.all()],
                }
                for r in rooms
            ],
        }
    return {
        "room": {"id": room.id, "name": room.name},
        "startups": [startup_card(state, s) for s in room.startups.all()],
        "selected": _selected_names(state, room),
        "selected_count": len(state.selected),
        "can_select_more": transitions.can_select_more(state),
        "can_confirm": bool(state.selected),
    }


def _booking_form(state: SelectionState, rooms: Sequence[Room]) -> dict[str, Any]:
    room = find_room(rooms, state.room_id)
    return {
        "room": {"id": room.id, "name": room.name} if room else None,
        "selected": _selected_names(state, room),
        "name": state.name,
        "phone": state.phone,
        "country_code": state.country_code,
        "country_codes": [
            {"code": code, "label": label}
            for code, label in settings.EVENT_COUNTRY_CODES
        ],
        "can_submit": transitions.can_submit(state),
    }


def _admin_dashboard(
    state: SelectionState, rooms: Sequence[Room], bookings: Sequence[Booking]
) -> dict[str, Any]:
    return {
        "confirming_reset": state.confirming_reset,
        "bookings": booking_rows(bookings, rooms),
        "by_startup": attendees_by_startup(bookings, rooms),
        "total": len(bookings),
    }


def build_screen(
    state: SelectionState,
    rooms: Sequence[Room],
    bookings: Sequence[Booking] = (),
) -> dict[str, Any]:
    screen = current_screen(state)
    if screen == ADMIN_DASHBOARD:
        body = _admin_dashboard(state, rooms, bookings)
    elif screen == ADMIN_LOGIN:
        body = {}
    elif screen == SUCCESS:
        body = {
            "title": SUCCESS_TITLE,
            "message": SUCCESS_MESSAGE,
            "display_seconds": settings.EVENT_SUCCESS_DISPLAY_SECONDS,
        }
    elif screen == BOOKING_FORM:
        body = _booking_form(state, rooms)
    else:
        body = _picker(state, rooms)
    return {
        "screen": screen,
        "max_selections": transitions.max_selections(),
        "is_admin": state.is_admin,
        **body,
    }
