"""Provider positions: overwrite on update, box search on read."""

from __future__ import annotations

from typing import TYPE_CHECKING

from django.conf import settings
from django.contrib.auth import get_user_model
from django.utils import timezone

from roadside.geo.proximity import box_for_degrees
from roadside.geo.proximity import box_for_radius
from roadside.geo.proximity import filter_in_box
from roadside.geo.proximity import with_distances

if TYPE_CHECKING:  # import for type checking only
    from django.db.models import QuerySet

    from roadside.users.models import User as UserType

User = get_user_model()


def update_position(
    user_id: int,
    latitude: float,
    longitude: float,
    *,
    is_available: bool | None = None,
) -> None:
    """Overwrite the user's current position. No history is kept.

    ``is_available`` is only written when given.
    """

    fields = {
        "latitude": latitude,
        "longitude": longitude,
        "location_updated_at": timezone.now(),
    }
    if is_available is not None:
        fields["is_available"] = is_available
    updated = User.objects.filter(pk=user_id).update(**fields)
    if not updated:
        msg = f"User {user_id} does not exist"
        raise User.DoesNotExist(msg)


def service_providers(*, online_only: bool = True) -> QuerySet[UserType]:
    qs = User.objects.filter(
        role=User.Role.SERVICE_PROVIDER,
        is_banned=False,
        latitude__isnull=False,
        longitude__isnull=False,
    )
    if online_only:
        qs = qs.filter(is_online=True)
    return qs


def nearby_providers(
    latitude: float,
    longitude: float,
    radius_km: float | None = None,
) -> list[tuple[UserType, float]]:
    """Online service providers inside the radius box, with their distance."""

    if radius_km is None:
        radius_km = settings.ROADSIDE_DEFAULT_SEARCH_RADIUS_KM
    box = box_for_radius(latitude, longitude, radius_km)
    candidates = filter_in_box(service_providers(online_only=True), box).order_by("id")
    return with_distances(candidates, latitude, longitude)


def dispatch_candidates(
    latitude: float,
    longitude: float,
    *,
    online_only: bool,
    exclude_user_id: int | None = None,
) -> QuerySet[UserType]:
    """Service providers inside the fixed-degree dispatch box."""

    box = box_for_degrees(latitude, longitude, settings.ROADSIDE_DISPATCH_BOX_DEGREES)
    qs = filter_in_box(service_providers(online_only=online_only), box)
    if exclude_user_id is not None:
        qs = qs.exclude(pk=exclude_user_id)
    return qs.order_by("id")
