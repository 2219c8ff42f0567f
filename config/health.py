"""Liveness probe: database, Redis, and the size of the realtime registry."""

from __future__ import annotations

from typing import TYPE_CHECKING
from typing import Any

import redis
from django.conf import settings
from django.db import connection
from django.db import transaction
from django.http import JsonResponse

from roadside.realtime.socketio import relay

if TYPE_CHECKING:  # import for type checking only
    from collections.abc import Callable

PROBE_TIMEOUT_SECONDS = 0.5


def _probe(check: Callable[[], None]) -> dict[str, Any]:
    try:
        check()
    except Exception as exc:  # noqa: BLE001 - a failing probe degrades, never crashes
        return {"ok": False, "error": str(exc)}
    return {"ok": True}


def _ping_db() -> None:
    with connection.cursor() as cursor:
        cursor.execute("SELECT 1")
        cursor.fetchone()


def _ping_redis() -> None:
    url = getattr(settings, "REDIS_URL", None)
    if not url:
        msg = "REDIS_URL not configured"
        raise RuntimeError(msg)
    redis.Redis.from_url(
        url,
        socket_timeout=PROBE_TIMEOUT_SECONDS,
        socket_connect_timeout=PROBE_TIMEOUT_SECONDS,
    ).ping()


def check_db() -> dict[str, Any]:
    return _probe(_ping_db)


def check_redis() -> dict[str, Any]:
    return _probe(_ping_redis)


@transaction.non_atomic_requests
def health(request):
    components = {"db": check_db(), "redis": check_redis()}
    healthy = [c["ok"] for c in components.values()]
    if all(healthy):
        status, http_status = "ok", 200
    elif any(healthy):
        status, http_status = "degraded", 503
    else:
        status, http_status = "down", 503
    return JsonResponse(
        {
            "status": status,
            "components": components,
            # connections held by this process; informational only
            "realtime": {"connections": len(relay.registry)},
        },
        status=http_status,
    )
