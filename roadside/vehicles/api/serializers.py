from rest_framework import serializers
from rest_framework.validators import UniqueValidator

from roadside.vehicles.models import Vehicle


class VehicleSerializer(serializers.ModelSerializer[Vehicle]):
    vin = serializers.CharField(
        max_length=64,
        validators=[
            UniqueValidator(
                queryset=Vehicle.objects.all(),
                message="A vehicle with this VIN already exists",
            ),
        ],
    )

    class Meta:
        model = Vehicle
        fields = (
            "id",
            "owner",
            "brand",
            "model",
            "year",
            "vin",
            "image",
            "created_at",
            "updated_at",
        )
        read_only_fields = ("id", "owner", "created_at", "updated_at")


class VehicleSummarySerializer(serializers.ModelSerializer[Vehicle]):
    class Meta:
        model = Vehicle
        fields = ("id", "brand", "model", "year")
        read_only_fields = fields
