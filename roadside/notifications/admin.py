from django.contrib import admin

from roadside.notifications.models import Notification


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = [
        "id",
        "recipient",
        "notification_type",
        "title",
        "is_read",
        "created_at",
    ]
    list_filter = ["notification_type", "is_read"]
    list_select_related = ["recipient"]
    search_fields = ["title", "message", "recipient__email"]
    raw_id_fields = ["recipient"]
    readonly_fields = ["created_at"]
    actions = ["mark_selected_read"]

    @admin.action(description="Mark selected notifications as read")
    def mark_selected_read(self, request, queryset):
        updated = queryset.mark_read()
        self.message_user(request, f"{updated} notification(s) marked as read.")
