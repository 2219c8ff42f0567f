import pytest

from roadside.chat.models import ChatMessage
from roadside.emergency.tasks import notify_nearby_providers
from roadside.notifications.models import Notification
from tests.factories import create_emergency
from tests.factories import create_provider

pytestmark = pytest.mark.django_db


def test_fan_out_seeds_chats_and_notifications(user, vehicle, provider):
    offline = create_provider(latitude=27.72, longitude=85.31, online=False)
    far = create_provider(latitude=28.90, longitude=85.32)
    emergency = create_emergency(
        user,
        vehicle=vehicle,
        assistance_type="BATTERY",
        description="Car will not start",
    )

    reached = notify_nearby_providers(emergency.pk)

    assert reached == 2
    for contacted in (provider, offline):
        opening = ChatMessage.objects.get(sender=user, receiver=contacted)
        assert "BATTERY" in opening.message
        assert "2018 Toyota Corolla" in opening.message
        assert "Car will not start" in opening.message
        assert ChatMessage.objects.filter(sender=contacted, receiver=user).count() == 1
        note = Notification.objects.get(recipient=contacted)
        assert note.notification_type == Notification.Type.EMERGENCY
    assert not ChatMessage.objects.filter(receiver=far).exists()
    assert not Notification.objects.filter(recipient=far).exists()

    summary = Notification.objects.get(recipient=user)
    assert "sent to 2 nearby" in summary.message


def test_fan_out_without_providers_still_informs_requester(user):
    emergency = create_emergency(user, latitude=-33.86, longitude=151.21)

    assert notify_nearby_providers(emergency.pk) == 0
    assert "sent to 0 nearby" in Notification.objects.get(recipient=user).message


def test_fan_out_for_missing_request():
    assert notify_nearby_providers(987654) == 0
