from drf_spectacular.utils import extend_schema
from drf_spectacular.utils import extend_schema_view
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.viewsets import ModelViewSet

from roadside.core.api.responses import success
from roadside.vehicles.models import Vehicle

from .serializers import VehicleSerializer


@extend_schema_view(
    list=extend_schema(tags=["Vehicles"]),
    retrieve=extend_schema(tags=["Vehicles"]),
    create=extend_schema(tags=["Vehicles"]),
    update=extend_schema(tags=["Vehicles"]),
    partial_update=extend_schema(tags=["Vehicles"]),
    destroy=extend_schema(tags=["Vehicles"]),
)
class VehicleViewSet(ModelViewSet):
    """The caller's own vehicles. Other owners' vehicles are invisible (404)."""

    serializer_class = VehicleSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = None

    def get_queryset(self):
        return Vehicle.objects.filter(owner=self.request.user)

    def perform_create(self, serializer):
        serializer.save(owner=self.request.user)

    def list(self, request, *args, **kwargs):
        serializer = self.get_serializer(self.get_queryset(), many=True)
        return success(vehicles=serializer.data)

    def retrieve(self, request, *args, **kwargs):
        return success(vehicle=self.get_serializer(self.get_object()).data)

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        self.perform_create(serializer)
        return success(
            "Vehicle added successfully",
            status=status.HTTP_201_CREATED,
            vehicle=serializer.data,
        )

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop("partial", False)
        serializer = self.get_serializer(
            self.get_object(),
            data=request.data,
            partial=partial,
        )
        serializer.is_valid(raise_exception=True)
        self.perform_update(serializer)
        return success("Vehicle updated successfully", vehicle=serializer.data)

    def destroy(self, request, *args, **kwargs):
        self.perform_destroy(self.get_object())
        return success("Vehicle deleted successfully")
