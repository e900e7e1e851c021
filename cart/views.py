"""DRF views for cart operations."""

from common.responses import retryable_conflict_response, stock_problem_response
from django.db import DatabaseError
from drf_spectacular.utils import OpenApiExample, extend_schema, inline_serializer
from inventory.services import StockProblemError
from rest_framework import serializers as rf_serializers
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from .models import CartItem
from .selectors import cart_totals
from .serializers import (
    AddItemSerializer,
    CartItemReadSerializer,
    CartReadSerializer,
    CartTotalsSerializer,
    UpdateItemQuantitySerializer,
)
from .services import CartError, clear_cart, reconcile_cart, remove_item, validate_cart

UNAVAILABLE_EXAMPLE = OpenApiExample(
    "Insufficient stock",
    value={
        "detail": "Insufficient stock",
        "unavailable_items": [
            {
                "product_id": 7,
                "product_name": "Canvas Tote",
                "reason": "insufficient_stock",
                "requested_quantity": 3,
                "available_quantity": 1,
            }
        ],
    },
    response_only=True,
    status_codes=["422"],
)


class CartDetailView(APIView):
    """Return the authenticated user's cart after evicting unavailable lines."""

    permission_classes = [IsAuthenticated]
    throttle_scope = "cart"

    @extend_schema(
        tags=["Cart Endpoints"],
        summary="Get cart",
        description=(
            "Returns the cart with items and totals. Lines whose product became inactive or "
            "understocked are removed as part of the read; `unavailable_items_removed` counts them."
        ),
        responses={200: CartReadSerializer},
        examples=[
            OpenApiExample(
                "Cart",
                value={
                    "items": [
                        {
                            "id": 10,
                            "product": {"id": 7, "name": "Canvas Tote", "effective_price": "24.99"},
                            "quantity": 2,
                            "unit_price": "24.99",
                            "line_total": "49.98",
                            "is_available": True,
                        }
                    ],
                    "totals": {"subtotal": "49.98", "total": "49.98", "item_count": 2, "items_total": 1},
                    "unavailable_items_removed": 0,
                },
                response_only=True,
            )
        ],
    )
    def get(self, request):
        snapshot = reconcile_cart(user=request.user)
        data = CartReadSerializer.from_snapshot(snapshot=snapshot).data
        return Response(data, status=status.HTTP_200_OK)


class CartSummaryView(APIView):
    permission_classes = [IsAuthenticated]
    throttle_scope = "cart"

    @extend_schema(
        tags=["Cart Endpoints"],
        summary="Get cart summary",
        description="Totals for the reconciled cart.",
        responses={
            200: inline_serializer(
                name="CartSummaryResponse",
                fields={
                    "totals": CartTotalsSerializer(),
                    "unavailable_items_removed": rf_serializers.IntegerField(),
                },
            )
        },
    )
    def get(self, request):
        snapshot = reconcile_cart(user=request.user)
        totals = CartTotalsSerializer(cart_totals(snapshot.items)).data
        return Response(
            {"totals": totals, "unavailable_items_removed": snapshot.removed_count},
            status=status.HTTP_200_OK,
        )


class CartValidateView(APIView):
    """Pre-checkout validation of the cart."""

    permission_classes = [IsAuthenticated]
    throttle_scope = "cart"

    @extend_schema(
        tags=["Cart Endpoints"],
        summary="Validate cart",
        description=(
            "Removes lines for inactive products and reports understocked lines without removing them. "
            "Returns 422 when the cart is empty or has invalid lines."
        ),
        request=None,
        responses={
            200: inline_serializer(
                name="CartValidationResponse",
                fields={
                    "valid": rf_serializers.BooleanField(),
                    "valid_items": CartItemReadSerializer(many=True),
                    "invalid_items": rf_serializers.ListField(child=rf_serializers.DictField()),
                    "unavailable_items_removed": rf_serializers.IntegerField(),
                    "totals": CartTotalsSerializer(),
                },
            )
        },
        examples=[
            OpenApiExample(
                "Invalid",
                value={
                    "valid": False,
                    "detail": "Cart has validation errors",
                    "valid_items": [],
                    "invalid_items": [
                        {
                            "cart_item_id": 10,
                            "product_id": 7,
                            "product_name": "Canvas Tote",
                            "reason": "insufficient_stock",
                            "requested_quantity": 3,
                            "available_quantity": 1,
                        }
                    ],
                    "unavailable_items_removed": 0,
                    "totals": {"subtotal": "0.00", "total": "0.00", "item_count": 0, "items_total": 0},
                },
                response_only=True,
            )
        ],
    )
    def post(self, request):
        result = validate_cart(user=request.user)
        if result.valid:
            detail = "Cart is valid for checkout"
        elif not result.items and not result.invalid_items:
            detail = "Cart is empty"
        else:
            detail = "Cart has validation errors"
        body = {
            "valid": result.valid,
            "detail": detail,
            "valid_items": CartItemReadSerializer(result.items, many=True).data,
            "invalid_items": result.invalid_items,
            "unavailable_items_removed": result.removed_count,
            "totals": CartTotalsSerializer(cart_totals(result.items)).data,
        }
        code = status.HTTP_200_OK if result.valid else status.HTTP_422_UNPROCESSABLE_ENTITY
        return Response(body, status=code)


class CartAddItemView(APIView):
    """Add an item to the cart."""

    permission_classes = [IsAuthenticated]
    throttle_scope = "cart_write"

    @extend_schema(
        tags=["Cart Endpoints"],
        summary="Add item to cart",
        description="Adds a product to the cart, merging with an existing line. Stock must cover the new total.",
        request=AddItemSerializer,
        responses={
            201: CartItemReadSerializer,
            400: inline_serializer(name="CartMutationError", fields={"detail": rf_serializers.CharField()}),
            404: inline_serializer(name="NotFoundError", fields={"detail": rf_serializers.CharField()}),
        },
        examples=[UNAVAILABLE_EXAMPLE],
    )
    def post(self, request):
        serializer = AddItemSerializer(data=request.data, context={"request": request})
        serializer.is_valid(raise_exception=True)
        try:
            item = serializer.save()
        except StockProblemError as exc:
            return stock_problem_response(exc)
        except CartError:
            return Response({"detail": "Unable to update cart."}, status=status.HTTP_400_BAD_REQUEST)
        except DatabaseError:
            return retryable_conflict_response()
        return Response(CartItemReadSerializer(item).data, status=status.HTTP_201_CREATED)


class CartItemView(APIView):
    """Update or remove a single cart line."""

    permission_classes = [IsAuthenticated]
    throttle_scope = "cart_write"

    @extend_schema(
        tags=["Cart Endpoints"],
        summary="Update cart item quantity",
        description=(
            "Sets the line quantity. A line whose product is no longer active is removed "
            "and reported with 422."
        ),
        request=UpdateItemQuantitySerializer,
        responses={
            200: CartItemReadSerializer,
            404: inline_serializer(name="NotFoundError", fields={"detail": rf_serializers.CharField()}),
        },
        examples=[UNAVAILABLE_EXAMPLE],
    )
    def patch(self, request, item_id: int):
        try:
            item = CartItem.objects.get(id=item_id, user_id=request.user.id)
        except CartItem.DoesNotExist:
            return Response({"detail": "Not found."}, status=status.HTTP_404_NOT_FOUND)
        serializer = UpdateItemQuantitySerializer(instance=item, data=request.data, context={"request": request})
        serializer.is_valid(raise_exception=True)
        try:
            item = serializer.save()
        except StockProblemError as exc:
            return stock_problem_response(exc)
        except CartError:
            return Response({"detail": "Unable to update cart."}, status=status.HTTP_400_BAD_REQUEST)
        return Response(CartItemReadSerializer(item).data, status=status.HTTP_200_OK)

    @extend_schema(
        tags=["Cart Endpoints"],
        summary="Delete cart item",
        responses={
            204: None,
            404: inline_serializer(name="NotFoundError", fields={"detail": rf_serializers.CharField()}),
        },
    )
    def delete(self, request, item_id: int):
        # Other users' items are reported as missing
        if not CartItem.objects.filter(id=item_id, user_id=request.user.id).exists():
            return Response({"detail": "Not found."}, status=status.HTTP_404_NOT_FOUND)
        remove_item(user=request.user, item_id=item_id)
        return Response(status=status.HTTP_204_NO_CONTENT)


class CartClearView(APIView):
    """Delete every line in the cart."""

    permission_classes = [IsAuthenticated]
    throttle_scope = "cart_write"

    @extend_schema(
        tags=["Cart Endpoints"],
        summary="Clear cart",
        request=None,
        responses={
            200: inline_serializer(
                name="CartCleared",
                fields={"status": rf_serializers.CharField(), "removed_count": rf_serializers.IntegerField()},
            ),
        },
        examples=[OpenApiExample("Cleared", value={"status": "cleared", "removed_count": 3})],
    )
    def post(self, request):
        removed = clear_cart(user=request.user)
        return Response({"status": "cleared", "removed_count": removed}, status=status.HTTP_200_OK)
