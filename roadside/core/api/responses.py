from __future__ import annotations

from typing import Any

from rest_framework import status as http_status
from rest_framework.response import Response


def success(
    message: str | None = None,
    *,
    status: int = http_status.HTTP_200_OK,
    **payload: Any,
) -> Response:
    """Build the ``{"success": true, "message"?: ..., **payload}`` envelope."""
    body: dict[str, Any] = {"success": True}
    if message:
        body["message"] = message
    body.update(payload)
    return Response(body, status=status)
