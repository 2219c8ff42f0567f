import logging

from celery import shared_task

from roadside.chat.services import send_message
from roadside.emergency.models import EmergencyRequest
from roadside.location.services import dispatch_candidates
from roadside.notifications.models import Notification
from roadside.notifications.services import create_notification

logger = logging.getLogger(__name__)


@shared_task(name="emergency.notify_nearby_providers")
def notify_nearby_providers(request_id: int) -> int:
    """Seed a chat with, and notify, every provider near a new request.

    Each provider in the dispatch box gets the requester's opening message,
    an automatic acknowledgement back to the requester, and a notification.
    The requester is then told how many providers were reached.

    Returns:
        Number of providers contacted.
    """
    try:
        emergency = EmergencyRequest.objects.select_related("user", "vehicle").get(
            pk=request_id,
        )
    except EmergencyRequest.DoesNotExist:
        logger.warning("Emergency request %s vanished before fan-out", request_id)
        return 0

    vehicle = emergency.vehicle
    vehicle_label = f"{vehicle.year} {vehicle.brand} {vehicle.model}"
    requester = emergency.user
    kind = emergency.assistance_type
    position = f"{emergency.latitude},{emergency.longitude}"
    details = f" Details: {emergency.description}" if emergency.description else ""

    providers = list(
        dispatch_candidates(
            emergency.latitude,
            emergency.longitude,
            online_only=False,
            exclude_user_id=requester.pk,
        ),
    )
    for provider in providers:
        send_message(
            requester.pk,
            provider.pk,
            f"Emergency {kind} assistance needed for my {vehicle_label}. "
            f"Location: {position}.{details}",
        )
        send_message(
            provider.pk,
            requester.pk,
            f"I've received your emergency request for {kind} assistance. "
            "I'll check your location and respond shortly.",
        )
        create_notification(
            provider,
            f"Emergency assistance needed! {requester.name or requester.email} "
            f"needs {kind} assistance for their {vehicle_label}.",
            title="New emergency request",
            notification_type=Notification.Type.EMERGENCY,
        )

    create_notification(
        requester,
        f"Your emergency request has been sent to {len(providers)} nearby "
        "service providers. They will contact you shortly.",
        title="Emergency request sent",
        notification_type=Notification.Type.EMERGENCY,
    )
    logger.info(
        "Emergency request %s fanned out to %d provider(s)",
        request_id,
        len(providers),
    )
    return len(providers)
