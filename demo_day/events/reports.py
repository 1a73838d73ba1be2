"""Admin dashboard aggregation over bookings and rooms.

Pure functions: callers pass already-fetched bookings and rooms (with their
startups prefetched), so the same data can back the HTTP dashboard and the
realtime snapshots.
"""

from __future__ import annotations

from typing import TYPE_CHECKING
from typing import Any

if TYPE_CHECKING:  # import for type checking only
    from collections.abc import Iterable

    from demo_day.events.models import Booking
    from demo_day.events.models import Room


def _startup_index(rooms: Iterable[Room]) -> dict[str, tuple[str, str]]:
    """Map startup id to ``(startup name, room name)``."""

    index: dict[str, tuple[str, str]] = {}
    for room in rooms:
        for startup in room.startups.all():
            index[startup.id] = (startup.name, room.name)
    return index


def booking_rows(
    bookings: Iterable[Booking], rooms: Iterable[Room]
) -> list[dict[str, Any]]:
    """One row per booking, numbered from 1, in the order given.

    The room shown is the room of the booking's first startup; unknown startup
    ids are shown as-is with an empty room.
    """

    index = _startup_index(rooms)
    rows = []
    for position, booking in enumerate(bookings, start=1):
        names = [index.get(sid, (sid, ""))[0] for sid in booking.startups]
        first = booking.startups[0] if booking.startups else None
        room_name = index.get(first, ("", ""))[1] if first else ""
        rows.append(
            {
                "index": position,
                "id": booking.pk,
                "name": booking.name,
                "phone": booking.phone,
                "startups": names,
                "room": room_name,
            }
        )
    return rows


def attendees_by_startup(
    bookings: Iterable[Booking], rooms: Iterable[Room]
) -> dict[str, list[dict[str, str]]]:
    """Group attendees under each booked startup's name.

    Startups appear in the order they are first booked; attendees keep booking
    order. Startups nobody booked are left out.
    """

    index = _startup_index(rooms)
    groups: dict[str, list[dict[str, str]]] = {}
    for booking in bookings:
        for sid in booking.startups:
            startup_name, room_name = index.get(sid, (sid, ""))
            groups.setdefault(startup_name, []).append(
                {"name": booking.name, "phone": booking.phone, "room": room_name}
            )
    return groups
