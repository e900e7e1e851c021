"""Staff endpoints for order management.

Restricted to `is_staff` users; status writes go through the same services
as customer cancellation so stock is always restored on cancel.
"""

from django_filters import rest_framework as filters
from drf_spectacular.utils import OpenApiExample, extend_schema
from rest_framework import filters as drf_filters
from rest_framework import generics, permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from .models import Order
from .selectors import get_order_by_number
from .serializers import AdminOrderSerializer, BulkStatusUpdateSerializer, OrderStatusUpdateSerializer
from .services import OrderNotFound, bulk_update_status, update_order_status
from .views import HANDLED_ERRORS, DefaultPagination, order_error_body


class AdminOrderFilterSet(filters.FilterSet):
    status = filters.ChoiceFilter(choices=Order.STATUS_CHOICES)
    user = filters.NumberFilter(field_name="user_id")
    email = filters.CharFilter(field_name="user__email", lookup_expr="iexact")
    created_after = filters.IsoDateTimeFilter(field_name="created_at", lookup_expr="gte")
    created_before = filters.IsoDateTimeFilter(field_name="created_at", lookup_expr="lte")
    min_total = filters.NumberFilter(field_name="total_amount", lookup_expr="gte")
    max_total = filters.NumberFilter(field_name="total_amount", lookup_expr="lte")

    class Meta:
        model = Order
        fields = ["status", "user", "email", "created_after", "created_before", "min_total", "max_total"]


class AdminOrderListView(generics.ListAPIView):
    permission_classes = [permissions.IsAdminUser]
    serializer_class = AdminOrderSerializer
    pagination_class = DefaultPagination
    throttle_scope = "orders"
    filter_backends = [filters.DjangoFilterBackend, drf_filters.SearchFilter, drf_filters.OrderingFilter]
    filterset_class = AdminOrderFilterSet
    search_fields = ["order_number", "user__email", "user__username"]
    ordering_fields = ["created_at", "total_amount", "status"]
    ordering = ["-created_at", "-id"]

    def get_queryset(self):
        return Order.objects.select_related("user").prefetch_related("items")

    @extend_schema(tags=["Admin Endpoints"], summary="List orders (admin)")
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)


class AdminOrderDetailView(APIView):
    permission_classes = [permissions.IsAdminUser]
    throttle_scope = "orders"

    @extend_schema(tags=["Admin Endpoints"], summary="Get order (admin)", responses={200: AdminOrderSerializer})
    def get(self, request, order_number: str):
        try:
            order = get_order_by_number(order_number=order_number)
        except OrderNotFound as exc:
            body, code = order_error_body(exc)
            return Response(body, status=code)
        return Response(AdminOrderSerializer(order).data, status=status.HTTP_200_OK)


class AdminOrderStatusView(APIView):
    permission_classes = [permissions.IsAdminUser]
    throttle_scope = "orders_admin_write"

    @extend_schema(
        tags=["Admin Endpoints"],
        summary="Update order status",
        description="Applies one transition of the order status graph. Cancelling returns stock.",
        request=OrderStatusUpdateSerializer,
        responses={200: AdminOrderSerializer},
        examples=[
            OpenApiExample("Ship", value={"status": "shipped", "admin_notes": "Tracking 1Z999"}, request_only=True),
        ],
    )
    def patch(self, request, order_number: str):
        serializer = OrderStatusUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            order = get_order_by_number(order_number=order_number)
            update_order_status(
                order=order,
                status=serializer.validated_data["status"],
                admin_notes=serializer.validated_data.get("admin_notes"),
                acting_user=request.user,
            )
        except HANDLED_ERRORS as exc:
            body, code = order_error_body(exc)
            return Response(body, status=code)
        order = get_order_by_number(order_number=order_number)
        return Response(AdminOrderSerializer(order).data, status=status.HTTP_200_OK)


class AdminOrderBulkStatusView(APIView):
    permission_classes = [permissions.IsAdminUser]
    throttle_scope = "orders_admin_write"

    @extend_schema(
        tags=["Admin Endpoints"],
        summary="Bulk update order status",
        description=(
            "Moves every listed order to `processing`, `shipped` or `delivered`. If any order cannot make "
            "the transition, nothing is changed and the offending orders are listed."
        ),
        request=BulkStatusUpdateSerializer,
        examples=[
            OpenApiExample(
                "Rejected",
                value={
                    "detail": "1 order(s) cannot be changed to shipped",
                    "requested_status": "shipped",
                    "invalid_orders": [
                        {"order_id": 3, "order_number": "ORD-2026-000318", "current_status": "pending"}
                    ],
                },
                response_only=True,
                status_codes=["422"],
            )
        ],
    )
    def post(self, request):
        serializer = BulkStatusUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            orders = bulk_update_status(
                order_ids=serializer.validated_data["order_ids"],
                status=serializer.validated_data["status"],
                acting_user=request.user,
            )
        except HANDLED_ERRORS as exc:
            body, code = order_error_body(exc)
            return Response(body, status=code)
        return Response(
            {"updated": len(orders), "status": serializer.validated_data["status"]},
            status=status.HTTP_200_OK,
        )
