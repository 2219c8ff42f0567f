import pytest

from roadside.geo.proximity import box_for_radius
from roadside.geo.proximity import filter_in_box
from roadside.location import services
from roadside.users.models import User
from tests.factories import create_provider
from tests.factories import create_user

pytestmark = pytest.mark.django_db


def test_update_position_overwrites(user):
    services.update_position(user.pk, 27.7, 85.3)
    services.update_position(user.pk, 27.8, 85.4, is_available=False)
    user.refresh_from_db()
    assert (user.latitude, user.longitude) == (27.8, 85.4)
    assert user.is_available is False
    assert user.location_updated_at is not None


def test_update_position_keeps_availability_when_not_given(user):
    services.update_position(user.pk, 27.7, 85.3, is_available=False)
    services.update_position(user.pk, 27.71, 85.31)
    user.refresh_from_db()
    assert user.latitude == 27.71
    assert user.is_available is False


def test_update_position_unknown_user():
    with pytest.raises(User.DoesNotExist):
        services.update_position(999999, 1.0, 1.0)


def test_filter_in_box_on_database():
    inside = create_provider(latitude=27.70, longitude=85.32)
    create_provider(latitude=28.90, longitude=85.32)
    box = box_for_radius(27.70, 85.32, 10)
    found = filter_in_box(services.service_providers(), box)
    assert list(found) == [inside]


def test_nearby_providers_excludes_offline_banned_and_customers():
    near = create_provider(latitude=27.701, longitude=85.321)
    create_provider(latitude=27.702, longitude=85.322, online=False)
    create_provider(latitude=27.703, longitude=85.323, is_banned=True)
    create_user(latitude=27.70, longitude=85.32, is_online=True)
    create_provider(latitude=None, longitude=None)

    results = services.nearby_providers(27.70, 85.32, 5)
    assert [p for p, _ in results] == [near]
    assert results[0][1] < 1


def test_dispatch_candidates_uses_fixed_box():
    included = create_provider(latitude=27.79, longitude=85.32, online=False)
    create_provider(latitude=27.81, longitude=85.32)
    ids = list(
        services.dispatch_candidates(27.70, 85.32, online_only=False).values_list(
            "id",
            flat=True,
        ),
    )
    assert ids == [included.pk]
    assert not services.dispatch_candidates(27.70, 85.32, online_only=True).exists()


def test_dispatch_candidates_excludes_requester():
    requester = create_provider(latitude=27.70, longitude=85.32)
    other = create_provider(latitude=27.70, longitude=85.33)
    qs = services.dispatch_candidates(
        27.70,
        85.32,
        online_only=False,
        exclude_user_id=requester.pk,
    )
    assert list(qs) == [other]
