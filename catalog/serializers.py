"""Serializers for the catalog app."""

from rest_framework import serializers

from .models import Category, Product


class CategorySerializer(serializers.ModelSerializer):
    class Meta:
        model = Category
        fields = ["id", "name", "slug", "description", "parent", "is_active", "sort_order"]


class ProductSummarySerializer(serializers.ModelSerializer):
    """Live product snapshot embedded in cart and wishlist payloads."""

    effective_price = serializers.DecimalField(max_digits=10, decimal_places=2, read_only=True)
    discount_percentage = serializers.IntegerField(read_only=True, allow_null=True)
    is_in_stock = serializers.BooleanField(read_only=True)

    class Meta:
        model = Product
        fields = [
            "id",
            "name",
            "slug",
            "sku",
            "price",
            "sale_price",
            "effective_price",
            "discount_percentage",
            "stock_quantity",
            "is_in_stock",
            "is_active",
        ]
        read_only_fields = fields


class ProductDetailSerializer(ProductSummarySerializer):
    category = CategorySerializer(read_only=True)

    class Meta(ProductSummarySerializer.Meta):
        fields = ProductSummarySerializer.Meta.fields + [
            "description",
            "short_description",
            "category",
            "featured",
            "is_on_sale",
        ]
        read_only_fields = fields
