from django.contrib import admin

from roadside.emergency import models


@admin.register(models.EmergencyRequest)
class EmergencyRequestAdmin(admin.ModelAdmin):
    list_display = [
        "id",
        "user",
        "provider",
        "assistance_type",
        "status",
        "latitude",
        "longitude",
        "created_at",
    ]
    search_fields = ["assistance_type", "description", "user__email"]
    list_filter = ["status", "assistance_type", "created_at"]
    raw_id_fields = ["user", "provider", "vehicle"]
