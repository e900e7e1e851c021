"""Authentication routes grouped under /api/v1/auth/."""

from django.urls import path

from .views import RefreshView, SignInView, current_user

urlpatterns = [
    path("token/", SignInView.as_view(), name="token_obtain_pair"),
    path("token/refresh/", RefreshView.as_view(), name="token_refresh"),
    path("me/", current_user, name="current_user"),
]
