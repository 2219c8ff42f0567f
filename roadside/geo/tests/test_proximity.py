import math

import pytest

from roadside.geo.proximity import EARTH_RADIUS_KM
from roadside.geo.proximity import KM_PER_DEGREE
from roadside.geo.proximity import BoundingBox
from roadside.geo.proximity import box_for_degrees
from roadside.geo.proximity import box_for_radius
from roadside.geo.proximity import haversine_km
from roadside.geo.proximity import with_distances


class _Point:
    def __init__(self, latitude, longitude):
        self.latitude = latitude
        self.longitude = longitude


class TestBoxForRadius:
    def test_equator_box_is_square(self):
        box = box_for_radius(0.0, 0.0, 11.132)
        assert box.max_lat == pytest.approx(0.1)
        assert box.min_lat == pytest.approx(-0.1)
        assert box.max_lon == pytest.approx(0.1)
        assert box.min_lon == pytest.approx(-0.1)

    def test_longitude_span_widens_with_latitude(self):
        box = box_for_radius(60.0, 10.0, 10)
        d_lat = box.max_lat - 60.0
        d_lon = box.max_lon - 10.0
        assert d_lat == pytest.approx(10 / KM_PER_DEGREE)
        assert d_lon == pytest.approx(d_lat / math.cos(math.radians(60.0)))

    def test_zero_radius_is_a_point(self):
        box = box_for_radius(27.7, 85.32, 0)
        assert box.contains(27.7, 85.32)
        assert not box.contains(27.7001, 85.32)

    def test_negative_radius_matches_nothing(self):
        box = box_for_radius(27.7, 85.32, -5)
        assert box.min_lat > box.max_lat
        assert not box.contains(27.7, 85.32)

    @pytest.mark.parametrize("pole", [90.0, -90.0])
    def test_pole_spans_all_longitudes(self, pole):
        box = box_for_radius(pole, 42.0, 10)
        assert box.min_lon == -180.0
        assert box.max_lon == 180.0
        assert box.contains(pole, -170.0)


class TestBoxForDegrees:
    def test_dispatch_box_includes_close_provider(self):
        box = box_for_degrees(27.705, 85.325)
        assert box.contains(27.70, 85.32)

    def test_dispatch_box_excludes_far_provider(self):
        box = box_for_degrees(27.705, 85.325)
        assert not box.contains(28.90, 85.32)

    def test_edges_are_inclusive(self):
        box = BoundingBox(0.0, 1.0, 0.0, 1.0)
        assert box.contains(0.0, 0.0)
        assert box.contains(1.0, 1.0)


class TestHaversine:
    def test_same_point_is_zero(self):
        assert haversine_km(27.7, 85.32, 27.7, 85.32) == 0

    def test_antipodal_points(self):
        assert haversine_km(0.0, 0.0, 0.0, 180.0) == pytest.approx(
            math.pi * EARTH_RADIUS_KM
        )

    def test_one_degree_of_latitude(self):
        assert haversine_km(0.0, 0.0, 1.0, 0.0) == pytest.approx(111.19, abs=0.01)

    def test_symmetric(self):
        a = haversine_km(27.70, 85.32, 28.90, 84.10)
        b = haversine_km(28.90, 84.10, 27.70, 85.32)
        assert a == pytest.approx(b)


def test_with_distances_keeps_box_corners():
    # Corner of a 10km box is ~14km away but is still returned.
    box = box_for_radius(0.0, 0.0, 10)
    corner = _Point(box.max_lat, box.max_lon)
    center = _Point(0.0, 0.0)
    pairs = with_distances([center, corner], 0.0, 0.0)
    assert [p for p, _ in pairs] == [center, corner]
    assert pairs[0][1] == 0
    assert pairs[1][1] > 10
