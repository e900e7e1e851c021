"""Orders API endpoints for customers."""

from common.responses import retryable_conflict_body, stock_problem_body
from django.db import DatabaseError
from drf_spectacular.utils import OpenApiExample, OpenApiParameter, extend_schema
from inventory.services import ReservationConflict, StockProblemError
from rest_framework import generics, status
from rest_framework.pagination import PageNumberPagination
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from .selectors import get_order_for_user, orders_for_user
from .serializers import OrderCreateSerializer, OrderSerializer
from .services import (
    BulkTransitionRejected,
    EmptyCart,
    InvalidStatusTransition,
    OrderError,
    OrderNotFound,
    cancel_order,
    compute_request_hash,
    create_order,
    with_idempotency,
)

IDEMPOTENCY_PARAMETER = OpenApiParameter(
    name="Idempotency-Key",
    location=OpenApiParameter.HEADER,
    required=False,
    description="Makes the request idempotent within scope+path+method",
    type=str,
)


def order_error_body(exc: Exception) -> tuple[dict, int]:
    """Map an order-path exception to a response body and status code."""

    if isinstance(exc, StockProblemError):
        return stock_problem_body(exc), status.HTTP_422_UNPROCESSABLE_ENTITY
    if isinstance(exc, (ReservationConflict, DatabaseError)):
        return retryable_conflict_body(), status.HTTP_409_CONFLICT
    if isinstance(exc, BulkTransitionRejected):
        return (
            {"detail": str(exc), "requested_status": exc.requested, "invalid_orders": exc.invalid_orders},
            status.HTTP_422_UNPROCESSABLE_ENTITY,
        )
    if isinstance(exc, InvalidStatusTransition):
        return (
            {"detail": str(exc), "current_status": exc.current, "requested_status": exc.requested},
            status.HTTP_422_UNPROCESSABLE_ENTITY,
        )
    if isinstance(exc, OrderNotFound):
        body = {"detail": str(exc)}
        if exc.missing_ids:
            body["missing_ids"] = exc.missing_ids
        return body, status.HTTP_404_NOT_FOUND
    if isinstance(exc, EmptyCart):
        return {"detail": str(exc)}, status.HTTP_400_BAD_REQUEST
    if isinstance(exc, OrderError):
        return {"detail": str(exc)}, status.HTTP_400_BAD_REQUEST
    raise exc


HANDLED_ERRORS = (OrderError, StockProblemError, ReservationConflict, DatabaseError)


def run_idempotent(request, handler):
    """Run `handler` through the idempotency store when the client sent a key."""

    idem_key = request.headers.get("Idempotency-Key")
    if idem_key:
        body, code = with_idempotency(
            key=idem_key,
            user=request.user,
            path=str(request.path),
            method=str(request.method),
            request_hash=compute_request_hash(getattr(request, "data", None)),
            handler=handler,
        )
        return Response(body, status=code)
    body, code = handler()
    return Response(body, status=code)


class DefaultPagination(PageNumberPagination):
    page_size = 20
    page_size_query_param = "page_size"
    max_page_size = 100


class OrderListCreateView(generics.ListAPIView):
    """List the user's orders or place a new order from the cart."""

    permission_classes = [IsAuthenticated]
    serializer_class = OrderSerializer
    pagination_class = DefaultPagination

    def get_throttles(self):
        self.throttle_scope = "orders_write" if self.request.method == "POST" else "orders"
        return super().get_throttles()

    def get_queryset(self):
        return orders_for_user(user=self.request.user, status=self.request.query_params.get("status"))

    @extend_schema(
        tags=["Orders"],
        summary="List orders",
        description="List the current user's orders, newest first.",
        parameters=[
            OpenApiParameter(name="status", description="Order status filter", required=False, type=str),
            OpenApiParameter(name="page", description="Page number", required=False, type=int),
            OpenApiParameter(name="page_size", description="Items per page", required=False, type=int),
        ],
    )
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)

    @extend_schema(
        tags=["Orders"],
        summary="Create order from cart",
        description=(
            "Validates every cart line, reserves stock and creates a pending order. Understocked lines "
            "stay in the cart and are listed in `unavailable_items` (422). A 409 with `retryable: true` "
            "means a concurrent checkout won; the request can be resubmitted."
        ),
        parameters=[IDEMPOTENCY_PARAMETER],
        request=OrderCreateSerializer,
        responses={201: OrderSerializer},
        examples=[
            OpenApiExample(
                "Create",
                value={
                    "shipping_address": {
                        "name": "Ada Lovelace",
                        "address_line_1": "12 Analytical Row",
                        "city": "London",
                        "state": "Greater London",
                        "postal_code": "N1 9GU",
                        "country": "GB",
                    },
                    "payment_method": "credit_card",
                    "notes": "Leave at the door",
                },
                request_only=True,
            ),
            OpenApiExample(
                "Insufficient stock",
                value={
                    "detail": "Insufficient stock",
                    "unavailable_items": [
                        {
                            "cart_item_id": 4,
                            "product_id": 7,
                            "product_name": "Canvas Tote",
                            "reason": "insufficient_stock",
                            "requested_quantity": 1,
                            "available_quantity": 0,
                        }
                    ],
                },
                response_only=True,
                status_codes=["422"],
            ),
        ],
    )
    def post(self, request):
        serializer = OrderCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        def _handler():
            try:
                order = create_order(
                    user=request.user,
                    shipping_address=serializer.validated_data["shipping_address"],
                    payment_method=serializer.validated_data["payment_method"],
                    notes=serializer.validated_data.get("notes", ""),
                )
            except HANDLED_ERRORS as exc:
                return order_error_body(exc)
            return OrderSerializer(order, context={"request": request}).data, status.HTTP_201_CREATED

        return run_idempotent(request, _handler)


class OrderDetailView(APIView):
    permission_classes = [IsAuthenticated]
    throttle_scope = "orders"

    @extend_schema(tags=["Orders"], summary="Get order detail", responses={200: OrderSerializer})
    def get(self, request, order_number: str):
        try:
            order = get_order_for_user(user=request.user, order_number=order_number)
        except OrderNotFound as exc:
            body, code = order_error_body(exc)
            return Response(body, status=code)
        return Response(OrderSerializer(order, context={"request": request}).data, status=status.HTTP_200_OK)


class OrderCancelView(APIView):
    """Cancel an order for the authenticated owner.

    Idempotent when `Idempotency-Key` is provided.
    """

    permission_classes = [IsAuthenticated]
    throttle_scope = "orders_write"

    @extend_schema(
        tags=["Orders"],
        summary="Cancel order",
        description="Cancels a pending or processing order and returns its stock.",
        parameters=[IDEMPOTENCY_PARAMETER],
        request=None,
        responses={200: OrderSerializer},
        examples=[
            OpenApiExample(
                "Not cancellable",
                value={
                    "detail": "Cannot change order status from delivered to cancelled",
                    "current_status": "delivered",
                    "requested_status": "cancelled",
                },
                response_only=True,
                status_codes=["422"],
            ),
        ],
    )
    def post(self, request, order_number: str):
        try:
            order = get_order_for_user(user=request.user, order_number=order_number)
        except OrderNotFound as exc:
            body, code = order_error_body(exc)
            return Response(body, status=code)

        def _handler():
            try:
                updated = cancel_order(order=order, acting_user=request.user)
            except HANDLED_ERRORS as exc:
                return order_error_body(exc)
            updated = get_order_for_user(user=request.user, order_number=updated.order_number)
            return OrderSerializer(updated, context={"request": request}).data, status.HTTP_200_OK

        return run_idempotent(request, _handler)
