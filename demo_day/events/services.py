"""Data-access functions for rooms, startups and bookings.

Every function here is a thin wrapper around one store round trip. Database
failures are logged and re-raised as :class:`StoreError`; nothing is retried.
Writes that bypass model signals (bulk updates and deletes) announce themselves
on the change feed once the surrounding transaction commits.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from collections.abc import Iterator
from contextlib import contextmanager

from django.conf import settings
from django.db import DatabaseError
from django.db import transaction

from demo_day.events.exceptions import StoreError
from demo_day.events.models import Booking
from demo_day.events.models import Room
from demo_day.events.models import Startup
from demo_day.realtime.feed import BOOKINGS
from demo_day.realtime.feed import DELETE
from demo_day.realtime.feed import INSERT
from demo_day.realtime.feed import STARTUPS
from demo_day.realtime.feed import UPDATE
from demo_day.realtime.feed import notify_on_commit

logger = logging.getLogger(__name__)

DEFAULT_ROOMS = [
    {"id": "room1", "name": "Product Demo Day Startups"},
]

DEFAULT_STARTUPS = [
    {"id": "1", "name": "Tamam", "room_id": "room1"},
    {"id": "3", "name": "TellSaleem", "room_id": "room1"},
    {"id": "4", "name": "Soor", "room_id": "room1"},
    {"id": "5", "name": "Rentat", "room_id": "room1"},
]


@contextmanager
def store_call(operation: str) -> Iterator[None]:
    try:
        yield
    except DatabaseError as exc:
        logger.exception("Error %s", operation)
        raise StoreError(operation) from exc


# Bookings ---------------------------------------------------------------------


def list_bookings() -> list[Booking]:
    """All bookings, newest first."""

    with store_call("fetching bookings"):
        return list(Booking.objects.select_related("room"))


def create_booking(
    *, name: str, phone: str, startups: Iterable[str], room_id: str
) -> Booking:
    with store_call("creating booking"):
        return Booking.objects.create(
            name=name,
            phone=phone,
            startups=list(startups),
            room_id=room_id,
        )


def delete_all_bookings() -> int:
    with store_call("deleting bookings"):
        deleted, _ = Booking.objects.all().delete()
    notify_on_commit(BOOKINGS, DELETE)
    return deleted


# Rooms and startups -----------------------------------------------------------


def list_rooms_with_startups() -> list[Room]:
    with store_call("fetching rooms"):
        return list(Room.objects.prefetch_related("startups").order_by("id"))


def load_event_rooms() -> list[Room]:
    """Rooms for display, seeding the defaults first when enabled."""

    if settings.EVENT_AUTO_SEED:
        ensure_seed_data()
    return list_rooms_with_startups()


def get_startup_spots(startup_id: str) -> int:
    with store_call(f"reading spots for startup {startup_id}"):
        spots = (
            Startup.objects.filter(pk=startup_id)
            .values_list("spots", flat=True)
            .first()
        )
    if spots is None:
        raise StoreError(f"reading spots for unknown startup {startup_id}")
    return spots


def set_startup_spots(startup_id: str, spots: int) -> None:
    if spots < 0:
        msg = "Spot count cannot be negative"
        raise ValueError(msg)
    with store_call("updating startup spots"):
        Startup.objects.filter(pk=startup_id).update(spots=spots)
    notify_on_commit(STARTUPS, UPDATE)


def reset_all_spots(spots: int | None = None) -> int:
    if spots is None:
        spots = settings.EVENT_DEFAULT_SPOTS
    with store_call("resetting startup spots"):
        updated = Startup.objects.update(spots=spots)
    notify_on_commit(STARTUPS, UPDATE)
    return updated


def take_spots(startup_ids: Iterable[str]) -> dict[str, int]:
    """Give up one spot at each startup, never going below zero.

    Each startup is a separate read followed by a write. Two concurrent callers
    can read the same count and both write the same result; that lost update is
    an accepted limitation at this event's scale.
    """

    remaining: dict[str, int] = {}
    for startup_id in startup_ids:
        current = get_startup_spots(startup_id)
        remaining[startup_id] = max(0, current - 1)
        set_startup_spots(startup_id, remaining[startup_id])
    return remaining


# Composite operations ---------------------------------------------------------


def record_booking(
    *, name: str, phone: str, startup_ids: Iterable[str], room_id: str
) -> Booking:
    """Persist a booking and take a spot at every selected startup.

    The insert and the spot updates share one transaction, so a failure part
    way through, or at commit, leaves neither behind.
    """

    startup_ids = list(startup_ids)
    with store_call("recording booking"), transaction.atomic():
        booking = create_booking(
            name=name, phone=phone, startups=startup_ids, room_id=room_id
        )
        take_spots(startup_ids)
    logger.info(
        "Booking %s recorded for %s (%s)", booking.pk, room_id, ", ".join(startup_ids)
    )
    return booking


def reset_event() -> None:
    """Restore every startup to the default spot count and drop all bookings.

    The two bulk writes are independent: both are attempted, and the first
    failure (if any) is raised afterwards.
    """

    failures: list[StoreError] = []
    for operation in (reset_all_spots, delete_all_bookings):
        try:
            operation()
        except StoreError as exc:
            failures.append(exc)
    if failures:
        raise failures[0]
    logger.info("Event reset: spots restored and bookings cleared")


def ensure_seed_data() -> bool:
    """Insert the default room and startups when the store has no rooms yet.

    Returns True when rows were inserted.
    """

    with store_call("seeding default event data"), transaction.atomic():
        if Room.objects.exists():
            return False
        Room.objects.bulk_create([Room(**row) for row in DEFAULT_ROOMS])
        Startup.objects.bulk_create(
            [
                Startup(spots=settings.EVENT_DEFAULT_SPOTS, **row)
                for row in DEFAULT_STARTUPS
            ]
        )
    notify_on_commit(STARTUPS, INSERT)
    logger.info("Seeded %s default startups", len(DEFAULT_STARTUPS))
    return True
