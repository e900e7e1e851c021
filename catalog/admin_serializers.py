"""Admin write serializers for catalog resources."""

from rest_framework import serializers

from .models import Category, Product
from .services import CategoryTreeError, validate_category_parent


class CategoryAdminSerializer(serializers.ModelSerializer):
    slug = serializers.SlugField(required=False, allow_blank=True)

    class Meta:
        model = Category
        fields = ["id", "name", "slug", "description", "parent", "is_active", "sort_order"]
        read_only_fields = ["id"]

    def validate(self, attrs):
        parent = attrs.get("parent", getattr(self.instance, "parent", None))
        category = self.instance or Category(name=attrs.get("name", ""))
        try:
            validate_category_parent(category=category, parent=parent)
        except CategoryTreeError as exc:
            raise serializers.ValidationError({"parent": str(exc)})
        return attrs


class ProductAdminSerializer(serializers.ModelSerializer):
    """Product create/update payload.

    `stock_quantity` seeds initial stock on create; afterwards it only moves
    through the inventory ledger, so updates ignore it.
    """

    slug = serializers.SlugField(required=False, allow_blank=True)
    sku = serializers.CharField(required=False, allow_blank=True, max_length=64)
    stock_quantity = serializers.IntegerField(required=False, min_value=0)
    effective_price = serializers.DecimalField(max_digits=10, decimal_places=2, read_only=True)

    class Meta:
        model = Product
        fields = [
            "id",
            "name",
            "slug",
            "sku",
            "description",
            "short_description",
            "category",
            "price",
            "sale_price",
            "effective_price",
            "stock_quantity",
            "is_active",
            "featured",
        ]
        read_only_fields = ["id", "effective_price"]

    def validate_price(self, value):
        if value < 0:
            raise serializers.ValidationError("Price must be non-negative")
        return value

    def validate_sale_price(self, value):
        if value is not None and value < 0:
            raise serializers.ValidationError("Sale price must be non-negative")
        return value

    def update(self, instance, validated_data):  # type: ignore[override]
        validated_data.pop("stock_quantity", None)
        return super().update(instance, validated_data)
