from django.urls import path

from .views import LoginView
from .views import RefreshView
from .views import RegisterView
from .views import VerifyView

# Mounted under /api/v1/auth/. Login takes {"login": <email or phone>, "password"}.
urlpatterns = [
    path("register/", RegisterView.as_view(), name="auth-register"),
    path("jwt/create/", LoginView.as_view(), name="jwt-create"),
    path("jwt/refresh/", RefreshView.as_view(), name="jwt-refresh"),
    path("jwt/verify/", VerifyView.as_view(), name="jwt-verify"),
]
