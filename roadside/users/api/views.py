from django.db.models import Count
from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import extend_schema
from drf_spectacular.utils import extend_schema_view
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.filters import SearchFilter
from rest_framework.generics import CreateAPIView
from rest_framework.mixins import ListModelMixin
from rest_framework.mixins import RetrieveModelMixin
from rest_framework.permissions import AllowAny
from rest_framework.permissions import IsAuthenticated
from rest_framework.viewsets import GenericViewSet
from rest_framework_simplejwt.tokens import RefreshToken
from rest_framework_simplejwt.views import TokenObtainPairView
from rest_framework_simplejwt.views import TokenRefreshView
from rest_framework_simplejwt.views import TokenVerifyView

from roadside.core.api.responses import success
from roadside.users.models import User

from .filters import UserFilter
from .permissions import IsAdminRole
from .serializers import AdminUserSerializer
from .serializers import BanSerializer
from .serializers import LoginSerializer
from .serializers import ProfileUpdateSerializer
from .serializers import RegisterSerializer
from .serializers import UserSerializer


def _tokens_for(user: User) -> dict[str, str]:
    refresh = RefreshToken.for_user(user)
    return {"access": str(refresh.access_token), "refresh": str(refresh)}


@extend_schema(tags=["Auth"])
class RegisterView(CreateAPIView):
    serializer_class = RegisterSerializer
    permission_classes = [AllowAny]
    authentication_classes: list = []

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        return success(
            "User registered successfully",
            status=status.HTTP_201_CREATED,
            user=UserSerializer(user, context={"request": request}).data,
            tokens=_tokens_for(user),
        )


@extend_schema(tags=["Auth"])
class LoginView(TokenObtainPairView):
    """Obtain an access/refresh pair with email-or-phone + password."""

    serializer_class = LoginSerializer


@extend_schema(tags=["Auth"])
class RefreshView(TokenRefreshView):
    pass


@extend_schema(tags=["Auth"])
class VerifyView(TokenVerifyView):
    pass


@extend_schema_view(
    me=extend_schema(tags=["Users"]),
    update_me=extend_schema(tags=["Users"], request=ProfileUpdateSerializer),
    delete_me=extend_schema(tags=["Users"]),
)
class UserViewSet(GenericViewSet):
    serializer_class = UserSerializer
    permission_classes = [IsAuthenticated]
    queryset = User.objects.none()

    @action(detail=False)
    def me(self, request):
        serializer = UserSerializer(request.user, context={"request": request})
        return success(user=serializer.data)

    @me.mapping.patch
    def update_me(self, request):
        serializer = ProfileUpdateSerializer(
            request.user,
            data=request.data,
            partial=True,
            context={"request": request},
        )
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        return success(
            "Profile updated successfully",
            user=UserSerializer(user, context={"request": request}).data,
        )

    @me.mapping.delete
    def delete_me(self, request):
        request.user.delete()
        return success("User deleted successfully")


@extend_schema_view(
    list=extend_schema(tags=["Admin"]),
    retrieve=extend_schema(tags=["Admin"]),
    ban=extend_schema(tags=["Admin"], request=BanSerializer),
    unban=extend_schema(tags=["Admin"], request=None),
    stats=extend_schema(tags=["Admin"]),
)
class AdminUserViewSet(RetrieveModelMixin, ListModelMixin, GenericViewSet):
    """User moderation for ADMIN accounts."""

    serializer_class = AdminUserSerializer
    permission_classes = [IsAuthenticated, IsAdminRole]
    pagination_class = None
    queryset = User.objects.order_by("-date_joined")
    filter_backends = [DjangoFilterBackend, SearchFilter]
    filterset_class = UserFilter
    search_fields = ["name", "email", "phone", "company_name"]

    def list(self, request, *args, **kwargs):
        serializer = self.get_serializer(
            self.filter_queryset(self.get_queryset()),
            many=True,
        )
        return success(users=serializer.data)

    def retrieve(self, request, *args, **kwargs):
        serializer = self.get_serializer(self.get_object())
        return success(user=serializer.data)

    @action(detail=True, methods=["post"])
    def ban(self, request, pk=None):
        user = self.get_object()
        body = BanSerializer(data=request.data)
        body.is_valid(raise_exception=True)
        user.is_banned = True
        user.ban_reason = body.validated_data["reason"]
        user.save(update_fields=["is_banned", "ban_reason", "updated_at"])
        return success("User banned", user=self.get_serializer(user).data)

    @action(detail=True, methods=["post"])
    def unban(self, request, pk=None):
        user = self.get_object()
        user.is_banned = False
        user.ban_reason = ""
        user.save(update_fields=["is_banned", "ban_reason", "updated_at"])
        return success("User unbanned", user=self.get_serializer(user).data)

    @action(detail=False)
    def stats(self, request):
        per_role = dict(
            User.objects.order_by()
            .values("role")
            .annotate(n=Count("id"))
            .values_list("role", "n"),
        )
        return success(
            stats={
                "total_users": sum(per_role.values()),
                "by_role": {role: per_role.get(role, 0) for role in User.Role.values},
                "online": User.objects.filter(is_online=True).count(),
                "banned": User.objects.filter(is_banned=True).count(),
            },
        )
