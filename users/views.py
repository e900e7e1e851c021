"""Users app API views: JWT sign-in/refresh and the current user's profile."""

from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework.decorators import api_view, permission_classes, throttle_classes
from rest_framework.exceptions import APIException
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.throttling import ScopedRateThrottle
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

from .logging import log_auth_event
from .serializers import UserMeSerializer


@extend_schema(
    operation_id="users_current_user",
    summary="Get current user profile",
    tags=["User Endpoints"],
    responses={
        200: OpenApiResponse(description="User profile", response=UserMeSerializer),
        401: OpenApiResponse(description="Unauthorized"),
    },
)
@api_view(["GET"])
@permission_classes([IsAuthenticated])
@throttle_classes([ScopedRateThrottle])
def current_user(request):
    return Response(UserMeSerializer(request.user).data)


current_user.cls.throttle_scope = "profile"


class SignInView(TokenObtainPairView):
    """Issue an access/refresh pair for a username and password."""

    throttle_classes = [ScopedRateThrottle]
    throttle_scope = "signin"

    @extend_schema(tags=["User Endpoints"], summary="Obtain JWT pair")
    def post(self, request, *args, **kwargs):
        # Attempted username only; passwords never reach the log
        extra = {"username": request.data.get("username")}
        try:
            resp = super().post(request, *args, **kwargs)
        except APIException:
            log_auth_event("signin", request, status="failed", extra=extra)
            raise
        log_auth_event("signin", request, status="success", extra=extra)
        return resp


class RefreshView(TokenRefreshView):
    throttle_classes = [ScopedRateThrottle]
    throttle_scope = "token_refresh"

    @extend_schema(tags=["User Endpoints"], summary="Refresh JWT access token")
    def post(self, request, *args, **kwargs):
        try:
            resp = super().post(request, *args, **kwargs)
        except APIException:
            log_auth_event("token_refresh", request, status="failed")
            raise
        log_auth_event("token_refresh", request, status="success")
        return resp
