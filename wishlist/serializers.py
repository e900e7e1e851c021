"""Wishlist serializers."""

from catalog.serializers import ProductSummarySerializer
from rest_framework import serializers

from .models import WishlistItem


class WishlistItemSerializer(serializers.ModelSerializer):
    product = ProductSummarySerializer(read_only=True)
    is_product_available = serializers.BooleanField(read_only=True)

    class Meta:
        model = WishlistItem
        fields = ["id", "product", "is_product_available", "created_at"]
        read_only_fields = fields


class AddWishlistItemSerializer(serializers.Serializer):
    product_id = serializers.IntegerField()


class MoveToCartSerializer(serializers.Serializer):
    quantity = serializers.IntegerField(min_value=1, max_value=100, default=1)
