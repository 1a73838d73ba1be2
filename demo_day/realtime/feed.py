"""In-process change feed for the watched tables.

Listeners registered with :func:`subscribe` are called once the transaction that
changed the table commits. The Socket.IO publisher is one such listener; tests
and management code can register their own.

Listeners receive ``(table, event)`` and are expected to reload whatever they
need. The feed carries no row data and performs no merging.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from contextlib import suppress

from django.db import transaction

logger = logging.getLogger(__name__)

BOOKINGS = "bookings"
STARTUPS = "startups"
WATCHED_TABLES = (BOOKINGS, STARTUPS)

INSERT = "INSERT"
UPDATE = "UPDATE"
DELETE = "DELETE"

ChangeListener = Callable[[str, str], None]

_listeners: dict[str, list[ChangeListener]] = {table: [] for table in WATCHED_TABLES}
_lock = threading.Lock()


def subscribe(table: str, on_change: ChangeListener) -> Callable[[], None]:
    """Register ``on_change`` for ``table`` and return its unsubscribe handle."""

    if table not in WATCHED_TABLES:
        msg = f"Unknown table: {table}"
        raise ValueError(msg)

    with _lock:
        _listeners[table].append(on_change)

    def unsubscribe() -> None:
        with _lock, suppress(ValueError):
            _listeners[table].remove(on_change)

    return unsubscribe


def notify(table: str, event: str) -> None:
    with _lock:
        listeners = list(_listeners.get(table, ()))
    for listener in listeners:
        try:
            listener(table, event)
        except Exception:  # noqa: BLE001 - a broken listener must not fail the write
            logger.exception("Change listener failed for %s %s", table, event)


def notify_on_commit(table: str, event: str) -> None:
    """Schedule :func:`notify` for after the current transaction commits."""

    transaction.on_commit(lambda: notify(table, event))
