from __future__ import annotations

from typing import TYPE_CHECKING

from roadside.realtime.socketio import emit_event_to_user

if TYPE_CHECKING:  # import for type checking only
    from roadside.emergency.models import EmergencyRequest


def publish_provider_assigned(emergency: EmergencyRequest) -> None:
    """Tell the requester which provider took their request."""

    provider = emergency.provider
    location = None
    if provider is not None and provider.latitude is not None:
        location = {"latitude": provider.latitude, "longitude": provider.longitude}
    emit_event_to_user(
        emergency.user_id,
        "emergency_provider_assigned",
        {
            "requestId": emergency.pk,
            "providerId": emergency.provider_id,
            "providerLocation": location,
        },
    )
