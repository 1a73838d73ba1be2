"""Session persistence for :class:`SelectionState`.

The state is stored as one JSON-serialisable dict under a single session key,
so it survives reloads on the same device and nothing is shared between
devices.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from demo_day.selection.state import SelectionState

if TYPE_CHECKING:  # import for type checking only
    from django.contrib.sessions.backends.base import SessionBase

logger = logging.getLogger(__name__)

SESSION_KEY = "demo_day.selection"


def load_state(session: SessionBase) -> SelectionState:
    data = session.get(SESSION_KEY)
    if not isinstance(data, dict):
        return SelectionState.initial()
    try:
        return SelectionState.from_dict(data)
    except (TypeError, ValueError):
        logger.warning("Discarding unreadable selection state in session")
        return SelectionState.initial()


def save_state(session: SessionBase, state: SelectionState) -> None:
    session[SESSION_KEY] = state.to_dict()
