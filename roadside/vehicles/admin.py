from django.contrib import admin

from roadside.vehicles import models


@admin.register(models.Vehicle)
class VehicleAdmin(admin.ModelAdmin):
    list_display = ["id", "owner", "brand", "model", "year", "vin"]
    search_fields = ["brand", "model", "vin", "owner__email"]
    list_filter = ["brand", "year"]
