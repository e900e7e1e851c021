"""Staff endpoint for removing user accounts."""

from django.shortcuts import get_object_or_404
from drf_spectacular.utils import OpenApiExample, extend_schema
from rest_framework import permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from .models import User
from .services import UserDeletionError, delete_user


class AdminUserDeleteView(APIView):
    permission_classes = [permissions.IsAdminUser]
    throttle_scope = "users_admin_write"

    @extend_schema(
        tags=["Admin Endpoints"],
        summary="Delete user",
        description="Deletes the user, or deactivates the account when it has orders.",
        responses={200: None},
        examples=[
            OpenApiExample("Deleted", value={"action": "deleted"}, response_only=True),
            OpenApiExample("Deactivated", value={"action": "deactivated"}, response_only=True),
        ],
    )
    def delete(self, request, user_id: int):
        user = get_object_or_404(User, pk=user_id)
        try:
            outcome = delete_user(user=user, acting_user=request.user)
        except UserDeletionError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        return Response({"action": str(outcome)}, status=status.HTTP_200_OK)
