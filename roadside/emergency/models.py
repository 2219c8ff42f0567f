from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _


class EmergencyRequest(models.Model):
    """A customer's call for roadside assistance.

    The position is copied from the request body at creation and never
    updated. Status only moves forward: PENDING -> INPROGRESS -> COMPLETED.
    """

    class Status(models.TextChoices):
        PENDING = "PENDING", _("Pending")
        INPROGRESS = "INPROGRESS", _("In progress")
        COMPLETED = "COMPLETED", _("Completed")

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="emergency_requests",
    )
    vehicle = models.ForeignKey(
        "vehicles.Vehicle",
        on_delete=models.CASCADE,
        related_name="emergency_requests",
    )
    provider = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="assigned_emergencies",
    )
    assistance_type = models.CharField(max_length=100)
    description = models.TextField(blank=True)
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.PENDING,
    )
    latitude = models.FloatField()
    longitude = models.FloatField()
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(
                fields=["status", "latitude", "longitude"],
                name="emergency_status_pos_idx",
            ),
        ]

    def __str__(self):
        return f"EmergencyRequest({self.pk}, {self.assistance_type}, {self.status})"

    @property
    def location(self) -> dict[str, float]:
        return {"latitude": self.latitude, "longitude": self.longitude}
