"""Global Socket.IO server for the frontend.

One server instance carries every realtime concern: chat, presence, provider
positions, emergency dispatch and notifications.

Frontend convention:
- Socket.IO path: /ws/socket.io/ (``settings.SOCKETIO_PATH``)
- Auth: JWT access token in ``query.token`` or ``auth.token`` on connect, or
  later through the ``authenticate`` event.

The acting user of every event is the identity stored on the connection when
it authenticated. User ids inside payloads are never trusted for that.
"""

from __future__ import annotations

import logging
import math
from typing import Any
from urllib.parse import parse_qs

import socketio
from asgiref.sync import async_to_sync
from channels.db import database_sync_to_async
from rest_framework.exceptions import AuthenticationFailed
from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.exceptions import InvalidToken
from rest_framework_simplejwt.exceptions import TokenError

from .relay import EventRelay

logger = logging.getLogger(__name__)


sio = socketio.AsyncServer(
    async_mode="asgi",
    cors_allowed_origins="*",
    logger=False,
    engineio_logger=False,
)

relay = EventRelay(sio)


class SocketAuthError(Exception):
    """Token rejected; ``str(exc)`` is the reason sent to the client."""


@database_sync_to_async
def _get_user_id_from_access_token(token: str) -> int:
    jwt_auth = JWTAuthentication()
    validated = jwt_auth.get_validated_token(token)
    user = jwt_auth.get_user(validated)
    if getattr(user, "is_banned", False):
        msg = "User is banned"
        raise AuthenticationFailed(msg)
    return int(user.id)


async def _resolve_user_id(token: str) -> int:
    try:
        return await _get_user_id_from_access_token(token)
    except (TokenError, InvalidToken) as exc:
        if "token is expired" in str(exc).lower():
            msg = "jwt_expired"
            raise SocketAuthError(msg) from exc
        msg = "unauthorized"
        raise SocketAuthError(msg) from exc
    except AuthenticationFailed as exc:  # user not found / inactive / banned
        msg = "unauthorized"
        raise SocketAuthError(msg) from exc
    except Exception as exc:
        logger.exception("Socket.IO token validation error")
        msg = "server_error"
        raise SocketAuthError(msg) from exc


def _extract_token(environ: dict[str, Any], auth: Any | None) -> str | None:
    """Extract JWT token from Socket.IO environ/auth.

    Handles python-socketio environ shapes across ASGI/WSGI servers.
    """

    scope: Any = environ
    if isinstance(environ, dict) and "asgi.scope" in environ:
        inner = environ.get("asgi.scope")
        if isinstance(inner, dict):
            scope = inner

    query_string: str | bytes = ""
    if isinstance(scope, dict) and "query_string" in scope:
        query_string = scope.get("query_string", b"")
    elif isinstance(scope, dict) and "QUERY_STRING" in scope:
        query_string = scope.get("QUERY_STRING", "")

    if isinstance(query_string, (bytes, bytearray)):
        query_string = query_string.decode(errors="ignore")

    token = parse_qs(str(query_string)).get("token", [None])[0]
    if isinstance(token, str) and token:
        return token

    # Allow `auth: { token }` as fallback.
    if isinstance(auth, dict):
        auth_token = auth.get("token")
        if isinstance(auth_token, str) and auth_token:
            return auth_token

    return None


def _as_int(value: Any) -> int | None:
    if isinstance(value, bool) or value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _as_float(value: Any) -> float | None:
    if isinstance(value, bool) or value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _position(data: Any) -> tuple[float, float] | None:
    if not isinstance(data, dict):
        return None
    lat = _as_float(data.get("latitude"))
    lon = _as_float(data.get("longitude"))
    if lat is None or lon is None:
        return None
    if not (math.isfinite(lat) and math.isfinite(lon)):
        return None
    if not (-90 <= lat <= 90 and -180 <= lon <= 180):
        return None
    return lat, lon


def _acting_user(sid: str, event: str) -> int | None:
    user_id = relay.registry.user_for(sid)
    if user_id is None:
        logger.warning("Ignoring %s from unauthenticated connection %s", event, sid)
    return user_id


@sio.event
async def connect(sid: str, environ: dict[str, Any], auth: Any | None = None):
    token = _extract_token(environ, auth)
    if not token:
        relay.connect(sid)
        return

    try:
        user_id = await _resolve_user_id(token)
    except SocketAuthError as exc:
        raise ConnectionRefusedError(str(exc)) from exc

    relay.connect(sid)
    await relay.authenticate(sid, user_id)


@sio.event
async def authenticate(sid: str, data: Any):
    token = data.get("token") if isinstance(data, dict) else data
    if not isinstance(token, str) or not token:
        logger.warning("authenticate from %s without a token", sid)
        return {"success": False, "message": "unauthorized"}
    try:
        user_id = await _resolve_user_id(token)
    except SocketAuthError as exc:
        logger.warning("authenticate from %s rejected: %s", sid, exc)
        return {"success": False, "message": str(exc)}
    ok = await relay.authenticate(sid, user_id)
    return {"success": ok, "userId": user_id}


@sio.event
async def private_message(sid: str, data: Any):
    sender_id = _acting_user(sid, "private_message")
    if sender_id is None or not isinstance(data, dict):
        return
    receiver_id = _as_int(data.get("receiverId"))
    message = data.get("message")
    if receiver_id is None or not isinstance(message, str):
        logger.warning("Malformed private_message from %s", sid)
        return
    await relay.send_chat(sender_id, receiver_id, message)


@sio.event
async def location_update(sid: str, data: Any):
    user_id = _acting_user(sid, "location_update")
    if user_id is None:
        return
    position = _position(data)
    if position is None:
        logger.warning("Malformed location_update from %s", sid)
        return
    await relay.broadcast_location(user_id, *position, skip_sid=sid)


@sio.event
async def emergency_request(sid: str, data: Any):
    if _acting_user(sid, "emergency_request") is None or not isinstance(data, dict):
        return
    request_id = _as_int(data.get("requestId"))
    position = _position(data.get("location"))
    if request_id is None or position is None:
        logger.warning("Malformed emergency_request from %s", sid)
        return
    await relay.dispatch_emergency(request_id, *position)


@sio.event
async def emergency_accepted(sid: str, data: Any):
    provider_id = _acting_user(sid, "emergency_accepted")
    if provider_id is None or not isinstance(data, dict):
        return
    request_id = _as_int(data.get("requestId"))
    if request_id is None:
        logger.warning("Malformed emergency_accepted from %s", sid)
        return
    await relay.accept_emergency(request_id, provider_id, data.get("providerLocation"))


@sio.event
async def emergency_provider_location(sid: str, data: Any):
    provider_id = _acting_user(sid, "emergency_provider_location")
    if provider_id is None or not isinstance(data, dict):
        return
    request_id = _as_int(data.get("requestId"))
    if request_id is None:
        logger.warning("Malformed emergency_provider_location from %s", sid)
        return
    await relay.provider_location(request_id, provider_id, data.get("location"))


@sio.event
async def typing(sid: str, data: Any):
    sender_id = _acting_user(sid, "typing")
    if sender_id is None or not isinstance(data, dict):
        return
    receiver_id = _as_int(data.get("receiverId"))
    if receiver_id is None:
        return
    await relay.typing(sender_id, receiver_id)


@sio.event
async def mark_read(sid: str, data: Any):
    reader_id = _acting_user(sid, "mark_read")
    if reader_id is None or not isinstance(data, dict):
        return
    raw_ids = data.get("messageIds")
    if not isinstance(raw_ids, list):
        logger.warning("Malformed mark_read from %s", sid)
        return
    ids = [i for i in (_as_int(v) for v in raw_ids) if i is not None]
    await relay.mark_read(ids, reader_id)


@sio.event
async def disconnect(sid: str, reason: Any = None):
    await relay.disconnect(sid)


def emit_event_to_user(user_id: int, event: str, payload: dict[str, Any]) -> int:
    """Emit an event to every connection of a user from sync Django code."""

    return async_to_sync(relay.relay)(user_id, event, payload)
