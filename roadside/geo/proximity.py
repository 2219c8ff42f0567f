"""Proximity matching: bounding-box prefilter plus great-circle distance.

A search is a two-step process. First a latitude/longitude box is built around
the query point and used as a cheap, index-friendly range filter on the
database. Then each surviving candidate gets its Haversine distance attached.
The box is the only cutoff: candidates sitting in the corners of the box are
returned even if their true distance is larger than the search radius.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING
from typing import Any
from typing import TypeVar

if TYPE_CHECKING:  # import for type checking only
    from collections.abc import Iterable

    from django.db.models import QuerySet

EARTH_RADIUS_KM = 6371.0
KM_PER_DEGREE = 111.32
DEFAULT_RADIUS_KM = 10.0
DEFAULT_BOX_DEGREES = 0.1
# Below this cos(lat) the longitude span is treated as the whole globe.
POLE_EPSILON = 1e-9

T = TypeVar("T")


@dataclass(frozen=True)
class BoundingBox:
    min_lat: float
    max_lat: float
    min_lon: float
    max_lon: float

    def contains(self, latitude: float, longitude: float) -> bool:
        return (
            self.min_lat <= latitude <= self.max_lat
            and self.min_lon <= longitude <= self.max_lon
        )


def box_for_radius(
    latitude: float,
    longitude: float,
    radius_km: float = DEFAULT_RADIUS_KM,
) -> BoundingBox:
    """Box whose half-widths approximate ``radius_km`` at this latitude.

    A negative radius yields an inverted box that matches nothing.
    """
    d_lat = radius_km / KM_PER_DEGREE
    cos_lat = math.cos(math.radians(latitude))
    if abs(cos_lat) < POLE_EPSILON:
        return BoundingBox(latitude - d_lat, latitude + d_lat, -180.0, 180.0)
    d_lon = radius_km / (KM_PER_DEGREE * cos_lat)
    return BoundingBox(
        latitude - d_lat,
        latitude + d_lat,
        longitude - d_lon,
        longitude + d_lon,
    )


def box_for_degrees(
    latitude: float,
    longitude: float,
    delta: float = DEFAULT_BOX_DEGREES,
) -> BoundingBox:
    """Square box of ``delta`` degrees on each side of the point."""
    return BoundingBox(
        latitude - delta,
        latitude + delta,
        longitude - delta,
        longitude + delta,
    )


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)
    a = (
        math.sin(d_phi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    )
    # Floating point can push ``a`` a hair outside [0, 1] for antipodal points.
    a = min(1.0, max(0.0, a))
    return 2 * EARTH_RADIUS_KM * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def filter_in_box(
    queryset: QuerySet,
    box: BoundingBox,
    *,
    lat_field: str = "latitude",
    lon_field: str = "longitude",
) -> QuerySet:
    """Inclusive range filter on both axes."""
    return queryset.filter(
        **{
            f"{lat_field}__gte": box.min_lat,
            f"{lat_field}__lte": box.max_lat,
            f"{lon_field}__gte": box.min_lon,
            f"{lon_field}__lte": box.max_lon,
        }
    )


def with_distances(
    candidates: Iterable[T],
    latitude: float,
    longitude: float,
    *,
    lat_attr: str = "latitude",
    lon_attr: str = "longitude",
) -> list[tuple[T, float]]:
    """Pair every candidate with its distance (km) from the query point."""
    out: list[tuple[T, float]] = []
    for candidate in candidates:
        c_lat: Any = getattr(candidate, lat_attr)
        c_lon: Any = getattr(candidate, lon_attr)
        out.append(
            (candidate, haversine_km(latitude, longitude, float(c_lat), float(c_lon)))
        )
    return out
