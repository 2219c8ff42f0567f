from rest_framework.permissions import BasePermission


class IsServiceProvider(BasePermission):
    """Allow access only to accounts with the SERVICE_PROVIDER role."""

    message = "Only service providers can perform this action."

    def has_permission(self, request, view):
        u = getattr(request, "user", None)
        if not (u and getattr(u, "is_authenticated", False)):
            return False
        return bool(getattr(u, "is_service_provider", False))


class IsAdminRole(BasePermission):
    """Allow access only to ADMIN accounts (or superusers)."""

    message = "Admin access required."

    def has_permission(self, request, view):
        u = getattr(request, "user", None)
        if not (u and getattr(u, "is_authenticated", False)):
            return False
        return bool(getattr(u, "is_admin_role", False))
