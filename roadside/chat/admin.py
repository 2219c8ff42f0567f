from django.contrib import admin

from roadside.chat import models


@admin.register(models.ChatMessage)
class ChatMessageAdmin(admin.ModelAdmin):
    list_display = ["id", "sender", "receiver", "message", "is_read", "created_at"]
    search_fields = ["message", "sender__email", "receiver__email"]
    list_filter = ["is_read", "created_at"]
