"""Selection actions that talk to the store.

These wrap the pure transitions in :mod:`demo_day.selection.state` with the
store calls they need. Store failures propagate as ``StoreError`` and leave the
caller's state untouched, so the attendee can simply try again.
"""

from __future__ import annotations

import logging

from django.conf import settings
from django.utils import timezone

from demo_day.events import services
from demo_day.selection import state as transitions
from demo_day.selection.exceptions import IncorrectPasscode
from demo_day.selection.exceptions import SubmissionRejected
from demo_day.selection.state import SelectionState

logger = logging.getLogger(__name__)


def submit(state: SelectionState, *, now: float | None = None) -> SelectionState:
    """Record the attendee's booking and move to the success notice."""

    problems = transitions.submission_problems(state)
    if problems:
        raise SubmissionRejected(problems)

    services.record_booking(
        name=state.name.strip(),
        phone=transitions.international_phone(state),
        startup_ids=state.selected,
        room_id=state.room_id,
    )
    if now is None:
        now = timezone.now().timestamp()
    return transitions.submission_succeeded(state, now=now)


def log_in_admin(state: SelectionState, passcode: str) -> SelectionState:
    new_state = transitions.admin_login(
        state, passcode, secret=settings.EVENT_ADMIN_PASSCODE
    )
    if new_state is state:
        logger.warning("Rejected admin passcode attempt")
        raise IncorrectPasscode
    logger.info("Admin view unlocked")
    return new_state


def reset_all(state: SelectionState) -> SelectionState:
    """Run the admin reset and close the confirmation prompt."""

    services.reset_event()
    return transitions.reset_completed(state)
