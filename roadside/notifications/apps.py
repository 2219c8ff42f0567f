from django.apps import AppConfig
from django.db.models.signals import post_save
from django.utils.translation import gettext_lazy as _


class NotificationsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "roadside.notifications"
    verbose_name = _("Notifications")

    def ready(self):
        from . import signals  # noqa: PLC0415

        post_save.connect(
            signals.publish_on_create,
            sender=self.get_model("Notification"),
            dispatch_uid="notifications.publish_on_create",
        )
