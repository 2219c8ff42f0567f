from django.db import transaction
from drf_spectacular.utils import OpenApiParameter
from drf_spectacular.utils import extend_schema
from drf_spectacular.utils import extend_schema_view
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.viewsets import GenericViewSet

from roadside.core.api.responses import success
from roadside.emergency import services
from roadside.location.api.serializers import NearbyQuerySerializer
from roadside.realtime.events.emergency import publish_provider_assigned
from roadside.users.api.permissions import IsServiceProvider

from .serializers import EmergencyRequestCreateSerializer
from .serializers import EmergencyRequestSerializer
from .serializers import NearbyEmergencyRequestSerializer

PROVIDER_ACTIONS = {"provider", "accept", "complete"}


@extend_schema_view(
    list=extend_schema(tags=["Emergency"]),
    create=extend_schema(
        tags=["Emergency"],
        request=EmergencyRequestCreateSerializer,
    ),
    nearby=extend_schema(
        tags=["Emergency"],
        parameters=[
            OpenApiParameter("latitude", float, required=True),
            OpenApiParameter("longitude", float, required=True),
            OpenApiParameter("radius", float, description="Search radius in km"),
        ],
        responses=NearbyEmergencyRequestSerializer(many=True),
    ),
    provider=extend_schema(tags=["Emergency"]),
    accept=extend_schema(tags=["Emergency"], request=None),
    complete=extend_schema(tags=["Emergency"], request=None),
)
class EmergencyRequestViewSet(GenericViewSet):
    """Emergency assistance requests.

    Customers create and list their own requests; service providers browse
    nearby PENDING requests, accept them and complete the ones assigned to
    them.
    """

    serializer_class = EmergencyRequestSerializer
    permission_classes = [IsAuthenticated]
    lookup_value_regex = r"\d+"

    def get_permissions(self):
        if self.action in PROVIDER_ACTIONS:
            return [IsAuthenticated(), IsServiceProvider()]
        return [p() for p in self.permission_classes]

    def get_queryset(self):
        return services.requests_for_user(self.request.user)

    def list(self, request):
        data = EmergencyRequestSerializer(self.get_queryset(), many=True).data
        return success(requests=data)

    def create(self, request):
        body = EmergencyRequestCreateSerializer(
            data=request.data,
            context={"request": request},
        )
        body.is_valid(raise_exception=True)
        data = body.validated_data
        emergency, nearby = services.request_assistance(
            request.user,
            data["vehicle_id"],
            assistance_type=data["assistance_type"],
            description=data["description"],
            latitude=data["latitude"],
            longitude=data["longitude"],
        )
        return success(
            "Emergency assistance requested",
            status=status.HTTP_201_CREATED,
            request=EmergencyRequestSerializer(emergency).data,
            nearby_providers=nearby,
        )

    @action(detail=False)
    def nearby(self, request):
        query = NearbyQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        found = []
        for emergency, distance in services.nearby_requests(
            query.validated_data["latitude"],
            query.validated_data["longitude"],
            query.validated_data["radius"],
        ):
            emergency.distance = distance
            found.append(emergency)
        return success(
            requests=NearbyEmergencyRequestSerializer(found, many=True).data,
        )

    @action(detail=False)
    def provider(self, request):
        qs = services.requests_for_provider(request.user)
        return success(requests=EmergencyRequestSerializer(qs, many=True).data)

    @action(detail=True, methods=["post"])
    def accept(self, request, pk=None):
        emergency = services.accept(int(pk), request.user)
        transaction.on_commit(lambda: publish_provider_assigned(emergency))
        return success(
            "Emergency request accepted",
            request=EmergencyRequestSerializer(emergency).data,
        )

    @action(detail=True, methods=["post"])
    def complete(self, request, pk=None):
        emergency = services.complete(int(pk), request.user)
        return success(
            "Emergency request completed",
            request=EmergencyRequestSerializer(emergency).data,
        )
