"""User routes under /api/v1/."""

from django.urls import include, path

urlpatterns = [
    path("auth/", include("users.auth_urls")),
    path("admin/users/", include("users.admin_urls")),
]
