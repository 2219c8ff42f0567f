from __future__ import annotations

import itertools
from typing import TYPE_CHECKING

from django.contrib.auth import get_user_model

from roadside.chat.models import ChatMessage
from roadside.emergency.models import EmergencyRequest
from roadside.vehicles.models import Vehicle

if TYPE_CHECKING:
    from roadside.users.models import User as UserType

User = get_user_model()

DEFAULT_PASSWORD = "Roadside-Pass-2024!"  # noqa: S105

_seq = itertools.count(1)


def create_user(
    email: str | None = None,
    *,
    role: str = User.Role.USER,
    password: str = DEFAULT_PASSWORD,
    **extra,
) -> UserType:
    n = next(_seq)
    email = email or f"user{n}@example.com"
    extra.setdefault("name", email.split("@")[0].title())
    return User.objects.create_user(
        username=email,
        email=email,
        password=password,
        role=role,
        **extra,
    )


def create_provider(
    email: str | None = None,
    *,
    latitude: float | None = None,
    longitude: float | None = None,
    online: bool = True,
    **extra,
) -> UserType:
    return create_user(
        email,
        role=User.Role.SERVICE_PROVIDER,
        latitude=latitude,
        longitude=longitude,
        is_online=online,
        **extra,
    )


def create_admin(email: str | None = None, **extra) -> UserType:
    return create_user(email, role=User.Role.ADMIN, **extra)


def create_vehicle(owner: UserType, **extra) -> Vehicle:
    n = next(_seq)
    extra.setdefault("brand", "Toyota")
    extra.setdefault("model", "Corolla")
    extra.setdefault("year", 2018)
    extra.setdefault("vin", f"VIN{n:014d}")
    return Vehicle.objects.create(owner=owner, **extra)


def create_emergency(
    user: UserType,
    *,
    latitude: float = 27.705,
    longitude: float = 85.325,
    vehicle: Vehicle | None = None,
    **extra,
) -> EmergencyRequest:
    extra.setdefault("assistance_type", "TOWING")
    return EmergencyRequest.objects.create(
        user=user,
        vehicle=vehicle or create_vehicle(user),
        latitude=latitude,
        longitude=longitude,
        **extra,
    )


def create_message(
    sender: UserType,
    receiver: UserType,
    message: str = "hello",
    **extra,
) -> ChatMessage:
    return ChatMessage.objects.create(
        sender=sender,
        receiver=receiver,
        message=message,
        **extra,
    )
