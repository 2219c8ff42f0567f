from django.contrib import admin
from django.contrib.auth import admin as auth_admin
from django.utils.translation import gettext_lazy as _

from roadside.users.models import User


@admin.register(User)
class UserAdmin(auth_admin.UserAdmin):
    fieldsets = (
        (None, {"fields": ("username", "password")}),
        (
            _("Personal info"),
            {"fields": ("name", "email", "phone", "company_name", "profile_image")},
        ),
        (
            _("Role & moderation"),
            {"fields": ("role", "is_banned", "ban_reason")},
        ),
        (
            _("Position & presence"),
            {
                "fields": (
                    "latitude",
                    "longitude",
                    "location_updated_at",
                    "is_available",
                    "is_online",
                    "last_seen",
                ),
            },
        ),
        (
            _("Permissions"),
            {
                "fields": (
                    "is_active",
                    "is_staff",
                    "is_superuser",
                    "groups",
                    "user_permissions",
                ),
            },
        ),
        (_("Important dates"), {"fields": ("last_login", "date_joined")}),
    )
    list_display = ["email", "name", "role", "is_online", "is_banned", "is_superuser"]
    list_filter = ["role", "is_online", "is_banned", "is_staff"]
    search_fields = ["name", "email", "phone", "company_name"]
    ordering = ["id"]
