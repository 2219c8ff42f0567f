from rest_framework import serializers

from roadside.emergency.models import EmergencyRequest
from roadside.users.api.serializers import PublicUserSerializer
from roadside.vehicles.api.serializers import VehicleSummarySerializer
from roadside.vehicles.models import Vehicle


class EmergencyRequestSerializer(serializers.ModelSerializer[EmergencyRequest]):
    user = PublicUserSerializer(read_only=True)
    provider = PublicUserSerializer(read_only=True, allow_null=True)
    vehicle = VehicleSummarySerializer(read_only=True)

    class Meta:
        model = EmergencyRequest
        fields = (
            "id",
            "user",
            "vehicle",
            "provider",
            "assistance_type",
            "description",
            "status",
            "latitude",
            "longitude",
            "created_at",
            "updated_at",
        )
        read_only_fields = fields


class NearbyEmergencyRequestSerializer(EmergencyRequestSerializer):
    distance = serializers.FloatField(read_only=True)

    class Meta(EmergencyRequestSerializer.Meta):
        fields = (*EmergencyRequestSerializer.Meta.fields, "distance")
        read_only_fields = fields


class OwnVehicleField(serializers.PrimaryKeyRelatedField):
    """Only vehicles owned by the requesting user are acceptable."""

    def get_queryset(self):
        request = self.context.get("request")
        if request is None:
            return Vehicle.objects.none()
        return Vehicle.objects.filter(owner=request.user)


class EmergencyRequestCreateSerializer(serializers.Serializer):
    vehicle_id = OwnVehicleField()
    assistance_type = serializers.CharField(max_length=100)
    description = serializers.CharField(required=False, allow_blank=True, default="")
    latitude = serializers.FloatField(min_value=-90, max_value=90)
    longitude = serializers.FloatField(min_value=-180, max_value=180)
