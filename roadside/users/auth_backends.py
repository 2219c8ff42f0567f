from django.contrib.auth import get_user_model
from django.contrib.auth.backends import ModelBackend
from django.db.models import Q


class EmailOrPhoneBackend(ModelBackend):
    """Authenticate with an email address or a phone number plus password.

    simplejwt passes the identifier under the serializer's username field
    (``login``); the admin login passes it as ``username``.
    """

    def authenticate(self, request, username=None, password=None, **kwargs):
        identifier = username or kwargs.get("login") or kwargs.get("email")
        if not identifier or password is None:
            return None
        user_model = get_user_model()
        user = (
            user_model.objects.filter(Q(email__iexact=identifier) | Q(phone=identifier))
            .order_by("pk")
            .first()
        )
        if user is None:
            # Same hashing cost for unknown identifiers.
            user_model().set_password(password)
            return None
        if user.check_password(password) and self.user_can_authenticate(user):
            return user
        return None

    def user_can_authenticate(self, user):
        if getattr(user, "is_banned", False):
            return False
        return super().user_can_authenticate(user)
