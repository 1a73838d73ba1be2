from __future__ import annotations

from typing import Any

from demo_day.events import services
from demo_day.events.api.serializers import BookingSerializer
from demo_day.events.api.serializers import RoomSerializer
from demo_day.realtime.feed import BOOKINGS
from demo_day.realtime.feed import STARTUPS
from demo_day.realtime.socketio import emit_table_change


def build_table_rows(table: str) -> list[dict[str, Any]]:
    """Reload the full contents clients keep for ``table``.

    ``startups`` is sent as rooms with their startups nested, which is how
    clients display them.
    """

    if table == BOOKINGS:
        return list(BookingSerializer(services.list_bookings(), many=True).data)
    if table == STARTUPS:
        rooms = services.list_rooms_with_startups()
        return list(RoomSerializer(rooms, many=True).data)
    msg = f"Unknown table: {table}"
    raise ValueError(msg)


def build_change_payload(table: str, event: str) -> dict[str, Any]:
    return {"table": table, "event": event, "rows": build_table_rows(table)}


def publish_table_change(table: str, event: str) -> None:
    """Push the refreshed table to every client subscribed to it."""

    emit_table_change(table, build_change_payload(table, event))
