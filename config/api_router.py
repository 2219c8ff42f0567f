from django.conf import settings
from django.urls import include
from django.urls import path
from rest_framework.routers import DefaultRouter
from rest_framework.routers import SimpleRouter

from roadside.chat.api.views import ChatViewSet
from roadside.emergency.api.views import EmergencyRequestViewSet
from roadside.location.api.views import LocationUpdateView
from roadside.location.api.views import NearbyProvidersView
from roadside.notifications.api.views import NotificationViewSet
from roadside.users.api.views import AdminUserViewSet
from roadside.users.api.views import UserViewSet
from roadside.vehicles.api.views import VehicleViewSet

router = DefaultRouter() if settings.DEBUG else SimpleRouter()

router.register("users", UserViewSet, basename="user")
# Moderation lives beside, not under, the users resource.
router.register("admin/users", AdminUserViewSet, basename="admin-user")
router.register("vehicles", VehicleViewSet, basename="vehicle")
router.register(
    "emergency/requests",
    EmergencyRequestViewSet,
    basename="emergency-request",
)
# history/read/unread/conversations are all list-level actions.
router.register("chat", ChatViewSet, basename="chat")
router.register("notifications", NotificationViewSet, basename="notifications")


app_name = "api"
urlpatterns = [
    path("auth/", include("roadside.users.api.auth_urls")),
    path("location/update/", LocationUpdateView.as_view(), name="location-update"),
    path("location/nearby/", NearbyProvidersView.as_view(), name="location-nearby"),
    *router.urls,
]
