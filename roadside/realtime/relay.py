"""Real-time event relay on top of a Socket.IO style server.

Every handler persists first and only then emits. When persistence fails the
error is logged and nothing is relayed; nothing is ever raised back to the
emitting client.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from typing import Any
from typing import Protocol

from channels.db import database_sync_to_async
from django.contrib.auth import get_user_model
from django.utils import timezone

from roadside.chat import services as chat_services
from roadside.emergency import services as emergency_services
from roadside.emergency.exceptions import EmergencyRequestError
from roadside.emergency.models import EmergencyRequest
from roadside.location import services as location_services

from .registry import ConnectionRegistry

if TYPE_CHECKING:  # import for type checking only
    from collections.abc import Iterable

    from roadside.chat.models import ChatMessage

logger = logging.getLogger(__name__)

User = get_user_model()


class EmitServer(Protocol):
    async def emit(self, event: str, data: Any = None, to: str | None = None): ...


@database_sync_to_async
def _set_online(user_id: int) -> None:
    if not User.objects.filter(pk=user_id).update(is_online=True):
        msg = f"User {user_id} does not exist"
        raise User.DoesNotExist(msg)


@database_sync_to_async
def _set_offline(user_id: int) -> None:
    User.objects.filter(pk=user_id).update(is_online=False, last_seen=timezone.now())


@database_sync_to_async
def _save_message(
    sender_id: int,
    receiver_id: int,
    message: str,
) -> tuple[ChatMessage, dict[str, Any]]:
    chat = chat_services.send_message(sender_id, receiver_id, message)
    return chat, chat_services.serialize_message(chat)


@database_sync_to_async
def _save_position(user_id: int, latitude: float, longitude: float) -> None:
    location_services.update_position(user_id, latitude, longitude)


@database_sync_to_async
def _online_providers_near(latitude: float, longitude: float) -> list[int]:
    qs = location_services.dispatch_candidates(latitude, longitude, online_only=True)
    return list(qs.values_list("id", flat=True))


@database_sync_to_async
def _accept(request_id: int, provider_id: int) -> EmergencyRequest | None:
    provider = User.objects.get(pk=provider_id)
    if not provider.is_service_provider:
        logger.warning(
            "User %s is not a service provider, cannot accept request %s",
            provider_id,
            request_id,
        )
        return None
    return emergency_services.accept(request_id, provider)


@database_sync_to_async
def _requester_of(request_id: int) -> int | None:
    return (
        EmergencyRequest.objects.filter(pk=request_id)
        .values_list("user_id", flat=True)
        .first()
    )


@database_sync_to_async
def _mark_read(message_ids: list[int], reader_id: int) -> dict[int, list[int]]:
    return chat_services.mark_read(message_ids, reader_id)


class EventRelay:
    def __init__(
        self,
        server: EmitServer,
        registry: ConnectionRegistry | None = None,
    ) -> None:
        self.server = server
        self.registry = registry if registry is not None else ConnectionRegistry()

    # Connection lifecycle

    def connect(self, sid: str) -> None:
        self.registry.connect(sid)

    async def authenticate(self, sid: str, user_id: int) -> bool:
        try:
            await _set_online(user_id)
        except Exception:
            logger.exception("Failed to mark user %s online", user_id)
            return False
        previous = self.registry.user_for(sid)
        self.registry.authenticate(sid, user_id)
        logger.info("Connection %s authenticated as user %s", sid, user_id)
        if previous is not None and previous != user_id:
            await self._mark_offline(previous)
        return True

    async def disconnect(self, sid: str) -> int | None:
        user_id = self.registry.disconnect(sid)
        if user_id is None:
            return None
        await self._mark_offline(user_id)
        return user_id

    async def _mark_offline(self, user_id: int) -> None:
        try:
            await _set_offline(user_id)
        except Exception:
            logger.exception("Failed to mark user %s offline", user_id)

    # Delivery primitives

    async def relay(self, user_id: int, event: str, payload: Any) -> int:
        """Emit to every connection of ``user_id``; returns how many got it."""
        delivered = 0
        for sid in sorted(self.registry.connections_for(user_id)):
            try:
                await self.server.emit(event, payload, to=sid)
            except Exception:
                logger.exception("Emitting %s to %s failed", event, sid)
                continue
            delivered += 1
        return delivered

    async def broadcast(
        self,
        event: str,
        payload: Any,
        skip_sid: str | None = None,
    ) -> int:
        delivered = 0
        for sid in self.registry.all_connections():
            if sid == skip_sid:
                continue
            try:
                await self.server.emit(event, payload, to=sid)
            except Exception:
                logger.exception("Broadcasting %s to %s failed", event, sid)
                continue
            delivered += 1
        return delivered

    # Domain events

    async def send_chat(
        self,
        sender_id: int,
        receiver_id: int,
        message: str,
    ) -> ChatMessage | None:
        try:
            chat, payload = await _save_message(sender_id, receiver_id, message)
        except Exception:
            logger.exception(
                "Error saving chat from %s to %s",
                sender_id,
                receiver_id,
            )
            return None
        await self.relay(receiver_id, "new_message", payload)
        await self.relay(
            sender_id,
            "message_sent",
            {"messageId": chat.id, "status": "delivered"},
        )
        return chat

    async def broadcast_location(
        self,
        user_id: int,
        latitude: float,
        longitude: float,
        skip_sid: str | None = None,
    ) -> bool:
        try:
            await _save_position(user_id, latitude, longitude)
        except Exception:
            logger.exception("Error updating location of user %s", user_id)
            return False
        await self.broadcast(
            "provider_location_update",
            {"userId": user_id, "latitude": latitude, "longitude": longitude},
            skip_sid=skip_sid,
        )
        return True

    async def dispatch_emergency(
        self,
        request_id: int,
        latitude: float,
        longitude: float,
    ) -> list[int]:
        """Tell online providers inside the dispatch box about a request."""
        try:
            provider_ids = await _online_providers_near(latitude, longitude)
        except Exception:
            logger.exception("Error finding providers for request %s", request_id)
            return []
        payload = {
            "requestId": request_id,
            "location": {"latitude": latitude, "longitude": longitude},
        }
        for provider_id in provider_ids:
            await self.relay(provider_id, "new_emergency_request", payload)
        return provider_ids

    async def accept_emergency(
        self,
        request_id: int,
        provider_id: int,
        provider_location: Any = None,
    ) -> bool:
        try:
            emergency = await _accept(request_id, provider_id)
        except EmergencyRequestError as exc:
            logger.warning(
                "Provider %s could not accept request %s: %s",
                provider_id,
                request_id,
                exc,
            )
            return False
        except Exception:
            logger.exception("Error accepting emergency request %s", request_id)
            return False
        if emergency is None:
            return False
        await self.relay(
            emergency.user_id,
            "emergency_provider_assigned",
            {
                "requestId": request_id,
                "providerId": provider_id,
                "providerLocation": provider_location,
            },
        )
        return True

    async def provider_location(
        self,
        request_id: int,
        provider_id: int,
        location: Any,
    ) -> bool:
        try:
            requester_id = await _requester_of(request_id)
        except Exception:
            logger.exception("Error loading emergency request %s", request_id)
            return False
        if requester_id is None:
            return False
        await self.relay(
            requester_id,
            "emergency_provider_location_update",
            {"requestId": request_id, "providerId": provider_id, "location": location},
        )
        return True

    async def typing(self, sender_id: int, receiver_id: int) -> int:
        return await self.relay(receiver_id, "user_typing", {"userId": sender_id})

    async def mark_read(
        self,
        message_ids: Iterable[int],
        reader_id: int,
    ) -> dict[int, list[int]]:
        try:
            by_sender = await _mark_read(list(message_ids), reader_id)
        except Exception:
            logger.exception("Error marking messages read for user %s", reader_id)
            return {}
        for sender_id, ids in by_sender.items():
            await self.relay(
                sender_id,
                "messages_read",
                {"messageIds": ids, "readerId": reader_id},
            )
        return by_sender
