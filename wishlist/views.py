"""DRF views for wishlist operations."""

from common.responses import retryable_conflict_response
from django.db import DatabaseError
from drf_spectacular.utils import OpenApiExample, extend_schema, inline_serializer
from rest_framework import serializers as rf_serializers
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from .models import WishlistItem
from .selectors import is_in_wishlist
from .serializers import AddWishlistItemSerializer, MoveToCartSerializer, WishlistItemSerializer
from .services import (
    WishlistError,
    add_to_wishlist,
    clear_wishlist,
    move_to_cart,
    reconcile_wishlist,
    remove_item,
    remove_product,
)


class WishlistView(APIView):
    """List the wishlist (evicting unavailable products) or add a product."""

    permission_classes = [IsAuthenticated]

    def get_throttles(self):
        self.throttle_scope = "wishlist_write" if self.request.method == "POST" else "wishlist"
        return super().get_throttles()

    @extend_schema(
        tags=["Wishlist Endpoints"],
        summary="Get wishlist",
        description="Entries whose product is inactive or out of stock are removed as part of the read.",
        responses={
            200: inline_serializer(
                name="WishlistResponse",
                fields={
                    "items": WishlistItemSerializer(many=True),
                    "count": rf_serializers.IntegerField(),
                    "unavailable_items_removed": rf_serializers.IntegerField(),
                },
            )
        },
    )
    def get(self, request):
        snapshot = reconcile_wishlist(user=request.user)
        return Response(
            {
                "items": WishlistItemSerializer(snapshot.items, many=True).data,
                "count": len(snapshot.items),
                "unavailable_items_removed": snapshot.removed_count,
            },
            status=status.HTTP_200_OK,
        )

    @extend_schema(
        tags=["Wishlist Endpoints"],
        summary="Add product to wishlist",
        request=AddWishlistItemSerializer,
        responses={
            201: WishlistItemSerializer,
            404: inline_serializer(name="NotFoundError", fields={"detail": rf_serializers.CharField()}),
            409: inline_serializer(name="WishlistConflict", fields={"detail": rf_serializers.CharField()}),
        },
        examples=[
            OpenApiExample(
                "Duplicate",
                value={"detail": "Product is already in your wishlist"},
                response_only=True,
                status_codes=["409"],
            )
        ],
    )
    def post(self, request):
        serializer = AddWishlistItemSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            item = add_to_wishlist(user=request.user, product_id=serializer.validated_data["product_id"])
        except WishlistError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_409_CONFLICT)
        return Response(WishlistItemSerializer(item).data, status=status.HTTP_201_CREATED)


class WishlistItemDeleteView(APIView):
    permission_classes = [IsAuthenticated]
    throttle_scope = "wishlist_write"

    @extend_schema(tags=["Wishlist Endpoints"], summary="Remove wishlist entry", responses={204: None})
    def delete(self, request, item_id: int):
        if not remove_item(user=request.user, item_id=item_id):
            return Response({"detail": "Not found."}, status=status.HTTP_404_NOT_FOUND)
        return Response(status=status.HTTP_204_NO_CONTENT)


class WishlistProductDeleteView(APIView):
    permission_classes = [IsAuthenticated]
    throttle_scope = "wishlist_write"

    @extend_schema(tags=["Wishlist Endpoints"], summary="Remove product from wishlist", responses={204: None})
    def delete(self, request, product_id: int):
        if not remove_product(user=request.user, product_id=product_id):
            return Response({"detail": "Not found."}, status=status.HTTP_404_NOT_FOUND)
        return Response(status=status.HTTP_204_NO_CONTENT)


class WishlistMoveToCartView(APIView):
    """Move a wishlist entry into the cart."""

    permission_classes = [IsAuthenticated]
    throttle_scope = "wishlist_write"

    @extend_schema(
        tags=["Wishlist Endpoints"],
        summary="Move wishlist entry to cart",
        description=(
            "Adds the product to the cart (merging with an existing line) and removes the wishlist entry. "
            "Returns 422 and changes nothing when the product is inactive or stock is short."
        ),
        request=MoveToCartSerializer,
        responses={
            200: inline_serializer(name="WishlistMoved", fields={"status": rf_serializers.CharField()}),
            422: inline_serializer(name="WishlistMoveRejected", fields={"detail": rf_serializers.CharField()}),
        },
        examples=[
            OpenApiExample("Moved", value={"status": "moved"}, response_only=True),
            OpenApiExample(
                "Rejected",
                value={"detail": "Product is not available or out of stock."},
                response_only=True,
                status_codes=["422"],
            ),
        ],
    )
    def post(self, request, item_id: int):
        try:
            item = WishlistItem.objects.get(id=item_id, user_id=request.user.id)
        except WishlistItem.DoesNotExist:
            return Response({"detail": "Not found."}, status=status.HTTP_404_NOT_FOUND)
        serializer = MoveToCartSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            moved = move_to_cart(item=item, quantity=serializer.validated_data["quantity"])
        except DatabaseError:
            return retryable_conflict_response()
        if not moved:
            return Response(
                {"detail": "Product is not available or out of stock."},
                status=status.HTTP_422_UNPROCESSABLE_ENTITY,
            )
        return Response({"status": "moved"}, status=status.HTTP_200_OK)


class WishlistClearView(APIView):
    permission_classes = [IsAuthenticated]
    throttle_scope = "wishlist_write"

    @extend_schema(
        tags=["Wishlist Endpoints"],
        summary="Clear wishlist",
        request=None,
        responses={
            200: inline_serializer(
                name="WishlistCleared",
                fields={"status": rf_serializers.CharField(), "removed_count": rf_serializers.IntegerField()},
            )
        },
    )
    def post(self, request):
        removed = clear_wishlist(user=request.user)
        return Response({"status": "cleared", "removed_count": removed}, status=status.HTTP_200_OK)


class WishlistCheckView(APIView):
    permission_classes = [IsAuthenticated]
    throttle_scope = "wishlist"

    @extend_schema(
        tags=["Wishlist Endpoints"],
        summary="Check whether a product is wishlisted",
        responses={
            200: inline_serializer(
                name="WishlistCheck",
                fields={"product_id": rf_serializers.IntegerField(), "in_wishlist": rf_serializers.BooleanField()},
            )
        },
    )
    def get(self, request, product_id: int):
        return Response(
            {"product_id": product_id, "in_wishlist": is_in_wishlist(user=request.user, product_id=product_id)},
            status=status.HTTP_200_OK,
        )
