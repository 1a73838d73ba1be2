"""Attendee selection state and its transitions.

The whole UI state lives in one immutable :class:`SelectionState`. Each user
action is a pure function taking the current state (plus whatever inputs the
action needs) and returning the next one; nothing here touches the store. An
action that is not possible right now (selection full, nothing selected, ...)
returns the state unchanged, and callers compare identity to tell whether it
applied.

Store-backed actions (submitting a booking, checking the admin passcode,
resetting the event) live in :mod:`demo_day.selection.workflow`, which uses the
``*_succeeded``/``*_completed`` transitions defined here.
"""

from __future__ import annotations

import re
import secrets
from dataclasses import asdict
from dataclasses import dataclass
from dataclasses import fields
from dataclasses import replace
from typing import Any

from django.conf import settings

_NON_DIGITS = re.compile(r"\D")


@dataclass(frozen=True)
class SelectionState:
    room_id: str | None = None
    selected: tuple[str, ...] = ()
    name: str = ""
    phone: str = ""
    country_code: str = ""
    is_admin: bool = False
    show_admin_login: bool = False
    show_form: bool = False
    show_success: bool = False
    success_shown_at: float | None = None
    confirming_reset: bool = False

    @classmethod
    def initial(cls) -> SelectionState:
        return cls(country_code=settings.EVENT_DEFAULT_COUNTRY_CODE)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SelectionState:
        """Rebuild a state from :meth:`to_dict` output, ignoring unknown keys."""

        known = {f.name for f in fields(cls)}
        values = {key: value for key, value in data.items() if key in known}
        if "selected" in values:
            values["selected"] = tuple(values["selected"] or ())
        state = cls(**values)
        if not state.country_code:
            state = replace(state, country_code=settings.EVENT_DEFAULT_COUNTRY_CODE)
        return state

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["selected"] = list(self.selected)
        return data


# Derived values ---------------------------------------------------------------


def max_selections() -> int:
    return settings.EVENT_MAX_SELECTIONS


def is_selected(state: SelectionState, startup_id: str) -> bool:
    return startup_id in state.selected


def can_select_more(state: SelectionState) -> bool:
    return len(state.selected) < max_selections()


def spots_left(state: SelectionState, startup_id: str, spots: int) -> int:
    """Spots shown to the attendee, counting their own pending pick."""

    return max(0, spots - (1 if is_selected(state, startup_id) else 0))


def is_full(state: SelectionState, startup_id: str, spots: int) -> bool:
    return spots <= 0 and not is_selected(state, startup_id)


def is_selectable(state: SelectionState, startup_id: str, spots: int) -> bool:
    if is_selected(state, startup_id):
        return True
    return can_select_more(state) and not is_full(state, startup_id, spots)


def normalize_phone(raw: str) -> str:
    return _NON_DIGITS.sub("", raw or "")


def international_phone(state: SelectionState) -> str:
    return f"+{state.country_code}{state.phone}"


def submission_problems(state: SelectionState) -> list[str]:
    problems = []
    if not state.room_id:
        problems.append("Choose a room first.")
    if not state.selected:
        problems.append("Select at least one startup.")
    if len(state.selected) > max_selections():
        problems.append(f"Select at most {max_selections()} startups.")
    if not state.name.strip():
        problems.append("Name is required.")
    if not state.phone:
        problems.append("Phone number is required.")
    return problems


def can_submit(state: SelectionState) -> bool:
    return not submission_problems(state)


# Picker -----------------------------------------------------------------------


def choose_room(state: SelectionState, room_id: str) -> SelectionState:
    if state.room_id == room_id:
        return state
    return replace(state, room_id=room_id, selected=(), show_form=False)


def back_to_rooms(state: SelectionState) -> SelectionState:
    return replace(state, room_id=None, selected=(), show_form=False)


def toggle(state: SelectionState, startup_id: str, spots: int) -> SelectionState:
    """Select or unselect ``startup_id``.

    Removing is always allowed while picking. Adding needs a free selection
    slot and at least one spot left. Nothing changes once the booking form is
    open.
    """

    if state.show_form:
        return state
    if is_selected(state, startup_id):
        return replace(
            state, selected=tuple(s for s in state.selected if s != startup_id)
        )
    if not is_selectable(state, startup_id, spots):
        return state
    return replace(state, selected=(*state.selected, startup_id))


# Booking form -----------------------------------------------------------------


def open_form(state: SelectionState) -> SelectionState:
    if not state.selected or state.show_form:
        return state
    return replace(state, show_form=True)


def back_from_form(state: SelectionState) -> SelectionState:
    return replace(state, show_form=False, selected=())


def set_contact(
    state: SelectionState,
    *,
    name: str | None = None,
    phone: str | None = None,
    country_code: str | None = None,
) -> SelectionState:
    changes: dict[str, Any] = {}
    if name is not None:
        changes["name"] = name
    if phone is not None:
        changes["phone"] = normalize_phone(phone)
    if country_code is not None:
        changes["country_code"] = country_code
    return replace(state, **changes) if changes else state


def submission_succeeded(state: SelectionState, *, now: float) -> SelectionState:
    return replace(state, selected=(), show_success=True, success_shown_at=now)


def expire_success(state: SelectionState, *, now: float) -> SelectionState:
    """Leave the success notice once it has been shown long enough."""

    if not state.show_success or state.success_shown_at is None:
        return state
    if now - state.success_shown_at < settings.EVENT_SUCCESS_DISPLAY_SECONDS:
        return state
    return replace(
        state,
        show_success=False,
        success_shown_at=None,
        show_form=False,
        selected=(),
        name="",
        phone="",
    )


# Admin ------------------------------------------------------------------------


def open_admin_login(state: SelectionState) -> SelectionState:
    return replace(state, show_admin_login=True)


def cancel_admin_login(state: SelectionState) -> SelectionState:
    return replace(state, show_admin_login=False)


def passcode_matches(passcode: str, secret: str) -> bool:
    return secrets.compare_digest(passcode.encode(), secret.encode())


def admin_login(state: SelectionState, passcode: str, *, secret: str) -> SelectionState:
    """Grant the admin view when ``passcode`` matches; otherwise no change."""

    if not passcode_matches(passcode, secret):
        return state
    return replace(state, is_admin=True, show_admin_login=False)


def leave_admin(state: SelectionState) -> SelectionState:
    return replace(state, is_admin=False, confirming_reset=False)


def request_reset(state: SelectionState) -> SelectionState:
    if not state.is_admin:
        return state
    return replace(state, confirming_reset=True)


def cancel_reset(state: SelectionState) -> SelectionState:
    return replace(state, confirming_reset=False)


def reset_completed(state: SelectionState) -> SelectionState:
    return replace(state, confirming_reset=False, selected=())


def clear(state: SelectionState) -> SelectionState:
    """Start the session over."""

    return SelectionState.initial()
