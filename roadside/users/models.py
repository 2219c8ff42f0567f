from django.contrib.auth.models import AbstractUser
from django.db import models
from django.db.models import CharField
from django.db.models import EmailField
from django.utils.translation import gettext_lazy as _


class User(AbstractUser):
    """
    Default custom user model for roadside.

    Customers, vendors, service providers and admins share this table and are
    told apart by ``role``. A user's current position lives directly on the
    row and is overwritten on every location update (no history).
    """

    class Role(models.TextChoices):
        USER = "USER", _("User")
        VENDOR = "VENDOR", _("Vendor")
        SERVICE_PROVIDER = "SERVICE_PROVIDER", _("Service Provider")
        ADMIN = "ADMIN", _("Admin")

    # First and last name do not cover name patterns around the globe
    name = CharField(_("Full Name"), blank=True, max_length=255)
    first_name = None  # type: ignore[assignment]
    last_name = None  # type: ignore[assignment]
    email = EmailField(_("email address"), unique=True)
    phone = CharField(_("Phone"), max_length=32, unique=True, null=True, blank=True)
    role = CharField(
        _("Role"),
        max_length=32,
        choices=Role.choices,
        default=Role.USER,
        db_index=True,
    )
    company_name = CharField(_("Company Name"), max_length=255, blank=True)
    profile_image = models.URLField(_("Profile Image"), max_length=500, blank=True)

    # Current position
    latitude = models.FloatField(null=True, blank=True)
    longitude = models.FloatField(null=True, blank=True)
    location_updated_at = models.DateTimeField(null=True, blank=True)
    is_available = models.BooleanField(default=True)

    # Presence
    is_online = models.BooleanField(default=False)
    last_seen = models.DateTimeField(null=True, blank=True)

    # Moderation
    is_banned = models.BooleanField(default=False)
    ban_reason = models.TextField(blank=True)

    # Audit timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        indexes = [
            models.Index(fields=["latitude", "longitude"], name="user_position_idx"),
        ]

    def save(self, *args, **kwargs):
        # Accounts sign in with email or phone; username mirrors the email.
        if not self.username:
            self.username = self.email
        if self.phone == "":
            self.phone = None
        super().save(*args, **kwargs)

    @property
    def is_service_provider(self) -> bool:
        return self.role == self.Role.SERVICE_PROVIDER

    @property
    def is_admin_role(self) -> bool:
        return self.role == self.Role.ADMIN or self.is_superuser
