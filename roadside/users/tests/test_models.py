import pytest

from roadside.users.models import User
from tests.factories import create_user

pytestmark = pytest.mark.django_db


def test_username_mirrors_email_when_missing():
    user = User(email="plain@example.com")
    user.set_password("x")
    user.save()
    assert user.username == "plain@example.com"


def test_blank_phone_is_stored_as_null():
    a = create_user("a@example.com", phone="")
    b = create_user("b@example.com", phone="")
    assert a.phone is None
    assert b.phone is None


def test_role_helpers():
    provider = create_user(role=User.Role.SERVICE_PROVIDER)
    admin = create_user(role=User.Role.ADMIN)
    customer = create_user()
    assert provider.is_service_provider
    assert not customer.is_service_provider
    assert admin.is_admin_role
    assert not provider.is_admin_role
