from drf_spectacular.utils import OpenApiParameter
from drf_spectacular.utils import extend_schema
from rest_framework.permissions import AllowAny
from rest_framework.permissions import IsAuthenticated
from rest_framework.views import APIView

from roadside.core.api.responses import success
from roadside.location import services

from .serializers import LocationUpdateSerializer
from .serializers import NearbyProviderSerializer
from .serializers import NearbyQuerySerializer


class LocationUpdateView(APIView):
    """Overwrite the caller's current position."""

    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["Location"], request=LocationUpdateSerializer)
    def post(self, request):
        body = LocationUpdateSerializer(data=request.data)
        body.is_valid(raise_exception=True)
        services.update_position(
            request.user.pk,
            body.validated_data["latitude"],
            body.validated_data["longitude"],
            is_available=body.validated_data["is_available"],
        )
        return success("Location updated successfully")


class NearbyProvidersView(APIView):
    """Online service providers around a point. Public."""

    permission_classes = [AllowAny]
    authentication_classes: list = []

    @extend_schema(
        tags=["Location"],
        parameters=[
            OpenApiParameter("latitude", float, required=True),
            OpenApiParameter("longitude", float, required=True),
            OpenApiParameter("radius", float, description="Search radius in km"),
        ],
        responses=NearbyProviderSerializer(many=True),
    )
    def get(self, request):
        query = NearbyQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        providers = []
        for provider, distance in services.nearby_providers(
            query.validated_data["latitude"],
            query.validated_data["longitude"],
            query.validated_data["radius"],
        ):
            provider.distance = distance
            providers.append(provider)
        return success(providers=NearbyProviderSerializer(providers, many=True).data)
