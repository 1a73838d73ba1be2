"""Readiness probe: database, event data and the optional Socket.IO broker.

The database is required; without it the service is ``down``. Any other
failing component only makes it ``degraded``.
"""

from __future__ import annotations

from typing import Any

import redis
from django.conf import settings
from django.db import DatabaseError
from django.db import connection
from django.http import JsonResponse

from demo_day.events.models import Room
from demo_day.events.models import Startup

REDIS_TIMEOUT_SECONDS = 0.5


def database_component() -> dict[str, Any]:
    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
    except Exception as exc:  # noqa: BLE001 - report, never raise
        return {"ok": False, "error": str(exc)}
    return {"ok": True}


def event_component() -> dict[str, Any]:
    """Counts of seeded rooms and startups.

    An empty store is still healthy when rooms are seeded on first read.
    """

    try:
        rooms = Room.objects.count()
        startups = Startup.objects.count()
    except DatabaseError as exc:
        return {"ok": False, "error": str(exc)}
    seeded = rooms > 0 and startups > 0
    return {
        "ok": seeded or settings.EVENT_AUTO_SEED,
        "seeded": seeded,
        "rooms": rooms,
        "startups": startups,
    }


def broker_component() -> dict[str, Any]:
    if not settings.REDIS_URL:
        # Single-process deployments fan out in memory.
        return {"ok": True, "skipped": True}
    client = redis.Redis.from_url(
        settings.REDIS_URL,
        socket_timeout=REDIS_TIMEOUT_SECONDS,
        socket_connect_timeout=REDIS_TIMEOUT_SECONDS,
    )
    try:
        client.ping()
    except redis.RedisError as exc:
        return {"ok": False, "error": str(exc)}
    return {"ok": True}


def health(request):
    database = database_component()
    components = {
        "db": database,
        "event": event_component() if database["ok"] else {"ok": False},
        "redis": broker_component(),
    }
    if not database["ok"]:
        status = "down"
    elif all(component["ok"] for component in components.values()):
        status = "ok"
    else:
        status = "degraded"
    return JsonResponse(
        {"status": status, "components": components},
        status=200 if status == "ok" else 503,
    )
