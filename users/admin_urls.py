from django.urls import path

from .admin_views import AdminUserDeleteView

urlpatterns = [
    path("<int:user_id>/", AdminUserDeleteView.as_view(), name="admin-user-delete"),
]
