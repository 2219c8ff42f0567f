from django.contrib.auth.password_validation import validate_password
from rest_framework import serializers
from rest_framework.validators import UniqueValidator
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer

from roadside.users.models import User

SELF_REGISTRATION_ROLES = (
    User.Role.USER,
    User.Role.VENDOR,
    User.Role.SERVICE_PROVIDER,
)


class UserSerializer(serializers.ModelSerializer[User]):
    """Profile view of an account, as seen by its owner."""

    class Meta:
        model = User
        fields = [
            "id",
            "name",
            "email",
            "phone",
            "role",
            "company_name",
            "profile_image",
            "latitude",
            "longitude",
            "location_updated_at",
            "is_available",
            "is_online",
            "last_seen",
            "date_joined",
        ]
        read_only_fields = [
            "id",
            "email",
            "role",
            "latitude",
            "longitude",
            "location_updated_at",
            "is_available",
            "is_online",
            "last_seen",
            "date_joined",
        ]


class PublicUserSerializer(serializers.ModelSerializer[User]):
    """Minimal identity card embedded in chats and emergency requests."""

    class Meta:
        model = User
        fields = ["id", "name", "phone", "role", "company_name", "profile_image"]
        read_only_fields = fields


class AdminUserSerializer(UserSerializer):
    class Meta(UserSerializer.Meta):
        fields = [*UserSerializer.Meta.fields, "is_active", "is_banned", "ban_reason"]
        read_only_fields = fields


class ProfileUpdateSerializer(serializers.ModelSerializer[User]):
    """PATCH /users/me/. Password changes need the current password."""

    phone = serializers.CharField(
        max_length=32,
        required=False,
        allow_blank=True,
        allow_null=True,
        validators=[UniqueValidator(queryset=User.objects.all())],
    )
    old_password = serializers.CharField(write_only=True, required=False)
    new_password = serializers.CharField(write_only=True, required=False)

    class Meta:
        model = User
        fields = [
            "name",
            "phone",
            "company_name",
            "profile_image",
            "old_password",
            "new_password",
        ]

    def validate(self, attrs):
        new_password = attrs.get("new_password")
        old_password = attrs.get("old_password")
        if new_password is None and old_password is None:
            return attrs
        if not new_password or not old_password:
            msg = "Both old_password and new_password are required."
            raise serializers.ValidationError({"new_password": msg})
        if not self.instance.check_password(old_password):
            raise serializers.ValidationError({"old_password": "Invalid password"})
        validate_password(new_password, self.instance)
        return attrs

    def update(self, instance, validated_data):
        validated_data.pop("old_password", None)
        new_password = validated_data.pop("new_password", None)
        if new_password:
            instance.set_password(new_password)
        return super().update(instance, validated_data)


class RegisterSerializer(serializers.ModelSerializer[User]):
    email = serializers.EmailField(
        validators=[UniqueValidator(queryset=User.objects.all(), lookup="iexact")],
    )
    phone = serializers.CharField(
        max_length=32,
        required=False,
        allow_blank=True,
        validators=[UniqueValidator(queryset=User.objects.all())],
    )
    password = serializers.CharField(write_only=True)
    role = serializers.ChoiceField(
        choices=[(r.value, r.label) for r in SELF_REGISTRATION_ROLES],
        default=User.Role.USER,
    )

    class Meta:
        model = User
        fields = ["id", "name", "email", "phone", "password", "role", "company_name"]
        read_only_fields = ["id"]

    def validate_email(self, value):
        return value.strip().lower()

    def validate(self, attrs):
        if attrs.get("role") == User.Role.VENDOR and not attrs.get("company_name"):
            raise serializers.ValidationError(
                {"company_name": "Company name is required for vendors."},
            )
        if attrs.get("role") != User.Role.VENDOR:
            attrs.pop("company_name", None)
        validate_password(attrs["password"])
        return attrs

    def create(self, validated_data):
        password = validated_data.pop("password")
        if not validated_data.get("phone"):
            validated_data["phone"] = None
        user = User(**validated_data)
        user.set_password(password)
        user.save()
        return user


class BanSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=True, default="")


class LoginSerializer(TokenObtainPairSerializer):
    """simplejwt pair login where ``login`` is an email address or a phone."""

    username_field = "login"
