import pytest

from roadside.users.auth_backends import EmailOrPhoneBackend
from tests.factories import create_user

pytestmark = pytest.mark.django_db

PASSWORD = "Backend-check-77"  # noqa: S105
PHONE = "+9779812345678"


@pytest.fixture
def account():
    return create_user("test@gmail.com", phone=PHONE, password=PASSWORD)


@pytest.mark.parametrize(
    "credentials",
    [
        {"username": "test@gmail.com"},
        {"username": "TEST@Gmail.com"},
        {"username": PHONE},
        {"login": PHONE},
        {"email": "test@gmail.com"},
    ],
    ids=["email", "email-case", "phone", "login-kwarg", "email-kwarg"],
)
def test_accepts_email_or_phone(account, credentials):
    user = EmailOrPhoneBackend().authenticate(None, password=PASSWORD, **credentials)
    assert user == account


@pytest.mark.parametrize(
    ("identifier", "password"),
    [
        ("wrong@gmail.com", PASSWORD),
        ("+10000000000", PASSWORD),
        ("test@gmail.com", "wrongpass"),
        ("", PASSWORD),
        ("test@gmail.com", None),
    ],
)
def test_rejects_bad_credentials(account, identifier, password):
    user = EmailOrPhoneBackend().authenticate(
        None,
        username=identifier,
        password=password,
    )
    assert user is None


def test_banned_user_cannot_authenticate(account):
    account.is_banned = True
    account.save(update_fields=["is_banned"])
    assert EmailOrPhoneBackend().authenticate(
        None,
        username="test@gmail.com",
        password=PASSWORD,
    ) is None


def test_inactive_user_cannot_authenticate(account):
    account.is_active = False
    account.save(update_fields=["is_active"])
    assert EmailOrPhoneBackend().authenticate(
        None,
        username=PHONE,
        password=PASSWORD,
    ) is None
