"""Emergency request lifecycle.

Status transitions are conditional updates (``UPDATE ... WHERE status = X``),
so of two callers that both saw a request as PENDING only one can move it to
INPROGRESS; the other gets :class:`InvalidStatusTransition`.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from django.conf import settings
from django.core.exceptions import PermissionDenied
from django.db import transaction
from django.utils import timezone

from roadside.chat.services import send_message
from roadside.emergency.exceptions import EmergencyRequestNotFound
from roadside.emergency.exceptions import InvalidStatusTransition
from roadside.emergency.models import EmergencyRequest
from roadside.emergency.tasks import notify_nearby_providers
from roadside.geo.proximity import box_for_radius
from roadside.geo.proximity import filter_in_box
from roadside.geo.proximity import with_distances
from roadside.location.services import dispatch_candidates
from roadside.notifications.models import Notification
from roadside.notifications.services import create_notification

if TYPE_CHECKING:  # import for type checking only
    from django.db.models import QuerySet

    from roadside.users.models import User
    from roadside.vehicles.models import Vehicle

logger = logging.getLogger(__name__)

Status = EmergencyRequest.Status

ACCEPTED_CHAT_MESSAGE = (
    "I've accepted your emergency request and I'm on my way to help you."
)
ACCEPTED_NOTIFICATION = (
    "A service provider has accepted your emergency assistance request "
    "and is on their way!"
)
COMPLETED_CHAT_MESSAGE = (
    "I've completed your emergency request. Thank you for choosing me for your "
    "support."
)
COMPLETED_NOTIFICATION = (
    "A service provider has completed your emergency assistance request."
)


def get_request(request_id: int) -> EmergencyRequest:
    try:
        return EmergencyRequest.objects.select_related("user", "vehicle").get(
            pk=request_id,
        )
    except EmergencyRequest.DoesNotExist as exc:
        raise EmergencyRequestNotFound(request_id) from exc


def _transition(
    request_id: int,
    expected: str,
    new: str,
    **changes,
) -> EmergencyRequest:
    updated = EmergencyRequest.objects.filter(pk=request_id, status=expected).update(
        status=new,
        updated_at=timezone.now(),
        **changes,
    )
    if not updated:
        raise InvalidStatusTransition(request_id, expected)
    return get_request(request_id)


def request_assistance(
    user: User,
    vehicle: Vehicle,
    *,
    assistance_type: str,
    latitude: float,
    longitude: float,
    description: str = "",
) -> tuple[EmergencyRequest, int]:
    """Create a PENDING request and schedule the fan-out to nearby providers.

    Returns the request and the number of providers inside the dispatch box.
    """
    emergency = EmergencyRequest.objects.create(
        user=user,
        vehicle=vehicle,
        assistance_type=assistance_type,
        description=description,
        latitude=latitude,
        longitude=longitude,
    )
    nearby = dispatch_candidates(
        latitude,
        longitude,
        online_only=False,
        exclude_user_id=user.pk,
    ).count()
    transaction.on_commit(lambda: notify_nearby_providers.delay(emergency.pk))
    logger.info(
        "Emergency request %s created by user %s, %d provider(s) in range",
        emergency.pk,
        user.pk,
        nearby,
    )
    return emergency, nearby


def nearby_requests(
    latitude: float,
    longitude: float,
    radius_km: float | None = None,
) -> list[tuple[EmergencyRequest, float]]:
    """PENDING requests inside the radius box, newest first, with distances."""

    if radius_km is None:
        radius_km = settings.ROADSIDE_DEFAULT_SEARCH_RADIUS_KM
    box = box_for_radius(latitude, longitude, radius_km)
    qs = filter_in_box(
        EmergencyRequest.objects.filter(status=Status.PENDING),
        box,
    ).select_related("user", "vehicle")
    return with_distances(qs, latitude, longitude)


def requests_for_user(user: User) -> QuerySet[EmergencyRequest]:
    return EmergencyRequest.objects.filter(user=user).select_related(
        "vehicle",
        "provider",
    )


def requests_for_provider(provider: User) -> QuerySet[EmergencyRequest]:
    return EmergencyRequest.objects.filter(provider=provider).select_related(
        "user",
        "vehicle",
    )


def accept(request_id: int, provider: User) -> EmergencyRequest:
    """PENDING -> INPROGRESS, assigning ``provider``."""

    emergency = get_request(request_id)
    if emergency.status != Status.PENDING:
        raise InvalidStatusTransition(
            request_id,
            Status.PENDING,
            "This request has already been accepted",
        )
    try:
        emergency = _transition(
            request_id,
            Status.PENDING,
            Status.INPROGRESS,
            provider=provider,
        )
    except InvalidStatusTransition as exc:
        logger.info(
            "Provider %s lost the race for emergency request %s",
            provider.pk,
            request_id,
        )
        raise InvalidStatusTransition(
            request_id,
            Status.PENDING,
            "This request has already been accepted",
        ) from exc

    send_message(provider.pk, emergency.user_id, ACCEPTED_CHAT_MESSAGE)
    create_notification(
        emergency.user_id,
        ACCEPTED_NOTIFICATION,
        title="Emergency request accepted",
        notification_type=Notification.Type.EMERGENCY,
    )
    return emergency


def complete(request_id: int, provider: User) -> EmergencyRequest:
    """INPROGRESS -> COMPLETED. Only the assigned provider may complete."""

    emergency = get_request(request_id)
    if emergency.provider_id != provider.pk:
        msg = "Only the assigned provider can complete this request."
        raise PermissionDenied(msg)
    if emergency.status != Status.INPROGRESS:
        raise InvalidStatusTransition(
            request_id,
            Status.INPROGRESS,
            "Only in-progress requests can be completed",
        )
    emergency = _transition(request_id, Status.INPROGRESS, Status.COMPLETED)

    send_message(provider.pk, emergency.user_id, COMPLETED_CHAT_MESSAGE)
    create_notification(
        emergency.user_id,
        COMPLETED_NOTIFICATION,
        title="Emergency request completed",
        notification_type=Notification.Type.EMERGENCY,
    )
    return emergency
