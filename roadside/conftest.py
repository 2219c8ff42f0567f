import pytest
from rest_framework.test import APIClient

from roadside.users.models import User
from tests.factories import create_admin
from tests.factories import create_provider
from tests.factories import create_user
from tests.factories import create_vehicle


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture
def user(db) -> User:
    return create_user("driver@example.com", phone="+9779800000001")


@pytest.fixture
def provider(db) -> User:
    return create_provider(
        "mechanic@example.com",
        latitude=27.70,
        longitude=85.32,
        company_name="Valley Towing",
    )


@pytest.fixture
def admin_account(db) -> User:
    return create_admin("admin@example.com")


@pytest.fixture
def vehicle(user):
    return create_vehicle(user, vin="1HGCM82633A004352")


@pytest.fixture
def client_for():
    """Build an APIClient authenticated as the given user."""

    def _make(account: User) -> APIClient:
        client = APIClient()
        client.force_authenticate(user=account)
        return client

    return _make
