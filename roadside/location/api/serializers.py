from django.conf import settings
from rest_framework import serializers

from roadside.users.models import User


class NearbyQuerySerializer(serializers.Serializer):
    """Query string of the proximity searches."""

    latitude = serializers.FloatField(min_value=-90, max_value=90)
    longitude = serializers.FloatField(min_value=-180, max_value=180)
    radius = serializers.FloatField(required=False)

    def validate(self, attrs):
        attrs.setdefault("radius", settings.ROADSIDE_DEFAULT_SEARCH_RADIUS_KM)
        return attrs


class LocationUpdateSerializer(serializers.Serializer):
    latitude = serializers.FloatField(min_value=-90, max_value=90)
    longitude = serializers.FloatField(min_value=-180, max_value=180)
    is_available = serializers.BooleanField(required=False, default=True)


class NearbyProviderSerializer(serializers.ModelSerializer[User]):
    distance = serializers.FloatField(read_only=True)

    class Meta:
        model = User
        fields = (
            "id",
            "name",
            "company_name",
            "phone",
            "latitude",
            "longitude",
            "profile_image",
            "is_available",
            "distance",
        )
        read_only_fields = fields
