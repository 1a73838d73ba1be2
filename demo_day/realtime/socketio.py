"""Socket.IO server for live table updates.

Clients subscribe to one channel per watched table and receive a
``table_change`` event whenever that table changes. Every event carries a
freshly fetched copy of the whole table, so clients replace their local copy
instead of merging.

Frontend convention:
- Socket.IO path: /ws/events/
- ``subscribe`` / ``unsubscribe`` with ``{"table": "startups" | "bookings"}``
- ``bookings`` requires a session that unlocked the admin view. The Django
  session cookie is captured on connect and the admin flag is re-read from
  the session on every ``subscribe``. A socket that already joined
  ``bookings`` keeps receiving it until it unsubscribes or disconnects.
"""

from __future__ import annotations

import logging
from http.cookies import SimpleCookie
from importlib import import_module
from typing import Any

import socketio
from asgiref.sync import async_to_sync
from channels.db import database_sync_to_async
from django.conf import settings

from demo_day.realtime.feed import BOOKINGS
from demo_day.realtime.feed import WATCHED_TABLES
from demo_day.selection.store import load_state

logger = logging.getLogger(__name__)

TABLE_CHANGE_EVENT = "table_change"
SNAPSHOT = "SNAPSHOT"


def _client_manager() -> socketio.AsyncManager | None:
    # Redis lets every worker process reach every connected client.
    url = getattr(settings, "REDIS_URL", "")
    if url:
        return socketio.AsyncRedisManager(url)
    return None


sio = socketio.AsyncServer(
    async_mode="asgi",
    client_manager=_client_manager(),
    cors_allowed_origins=getattr(settings, "SOCKETIO_CORS_ALLOWED_ORIGINS", "*"),
    logger=False,
    engineio_logger=False,
)


def room_for_table(table: str) -> str:
    return f"table_{table}"


def _extract_session_key(environ: dict[str, Any]) -> str | None:
    """Pull the Django session key out of the handshake cookies."""

    raw_cookie = ""
    if isinstance(environ, dict):
        raw_cookie = environ.get("HTTP_COOKIE", "") or ""
        scope = environ.get("asgi.scope")
        if not raw_cookie and isinstance(scope, dict):
            for name, value in scope.get("headers", []):
                if name == b"cookie":
                    raw_cookie = value.decode(errors="ignore")
                    break
    if not raw_cookie:
        return None

    cookie = SimpleCookie()
    cookie.load(raw_cookie)
    morsel = cookie.get(settings.SESSION_COOKIE_NAME)
    return morsel.value if morsel else None


@database_sync_to_async
def _session_is_admin(session_key: str) -> bool:
    engine = import_module(settings.SESSION_ENGINE)
    session = engine.SessionStore(session_key)
    return load_state(session).is_admin


@database_sync_to_async
def _load_rows(table: str) -> list[dict[str, Any]]:
    from demo_day.realtime.events.tables import build_table_rows  # noqa: PLC0415

    return build_table_rows(table)


def _table_from(data: Any) -> str | None:
    table = data.get("table") if isinstance(data, dict) else data
    if isinstance(table, str) and table in WATCHED_TABLES:
        return table
    return None


@sio.event
async def connect(sid: str, environ: dict[str, Any], auth: Any | None = None):
    await sio.save_session(sid, {"session_key": _extract_session_key(environ)})


@sio.event
async def disconnect(sid: str):
    _ = sid


@sio.event
async def subscribe(sid: str, data: Any):
    """Join a table channel and receive its current rows straight away."""

    table = _table_from(data)
    if table is None:
        return {"ok": False, "error": "unknown_table"}

    if table == BOOKINGS:
        session = await sio.get_session(sid)
        session_key = session.get("session_key")
        try:
            is_admin = bool(session_key) and await _session_is_admin(session_key)
        except Exception:
            logger.exception("Socket.IO session lookup failed")
            return {"ok": False, "error": "server_error"}
        if not is_admin:
            return {"ok": False, "error": "forbidden"}

    await sio.enter_room(sid, room_for_table(table))
    rows = await _load_rows(table)
    await sio.emit(
        TABLE_CHANGE_EVENT,
        {"table": table, "event": SNAPSHOT, "rows": rows},
        to=sid,
    )
    return {"ok": True, "table": table}


@sio.event
async def unsubscribe(sid: str, data: Any):
    table = _table_from(data)
    if table is None:
        return {"ok": False, "error": "unknown_table"}
    await sio.leave_room(sid, room_for_table(table))
    return {"ok": True, "table": table}


def emit_event_to_room(room: str, event: str, payload: dict[str, Any]) -> None:
    """Emit an event to a room from sync Django code."""

    async_to_sync(sio.emit)(event, payload, room=room)


def emit_table_change(table: str, payload: dict[str, Any]) -> None:
    emit_event_to_room(room_for_table(table), TABLE_CHANGE_EVENT, payload)
