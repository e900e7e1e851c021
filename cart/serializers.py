"""Cart serializers for read and write operations."""

from catalog.serializers import ProductSummarySerializer
from rest_framework import serializers

from .models import CartItem
from .selectors import cart_totals
from .services import add_item, update_item_quantity


class CartItemReadSerializer(serializers.ModelSerializer):
    """Read serializer for a cart line with its live product."""

    product = ProductSummarySerializer(read_only=True)
    unit_price = serializers.DecimalField(max_digits=10, decimal_places=2, read_only=True)
    line_total = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)
    is_available = serializers.BooleanField(read_only=True)

    class Meta:
        model = CartItem
        fields = [
            "id",
            "product",
            "quantity",
            "unit_price",
            "line_total",
            "is_available",
        ]


class CartTotalsSerializer(serializers.Serializer):
    subtotal = serializers.DecimalField(max_digits=12, decimal_places=2)
    total = serializers.DecimalField(max_digits=12, decimal_places=2)
    item_count = serializers.IntegerField()
    items_total = serializers.IntegerField()


class CartReadSerializer(serializers.Serializer):
    """Read serializer for the reconciled cart: lines, totals and evictions."""

    items = CartItemReadSerializer(many=True)
    totals = CartTotalsSerializer()
    unavailable_items_removed = serializers.IntegerField()

    @classmethod
    def from_snapshot(cls, *, snapshot):
        return cls(
            {
                "items": snapshot.items,
                "totals": cart_totals(snapshot.items),
                "unavailable_items_removed": snapshot.removed_count,
            }
        )


class AddItemSerializer(serializers.Serializer):
    """Write serializer for adding an item to the cart."""

    product_id = serializers.IntegerField()
    quantity = serializers.IntegerField(min_value=1, max_value=100)

    def create(self, validated_data):  # type: ignore[override]
        user = self.context["request"].user
        return add_item(user=user, **validated_data)


class UpdateItemQuantitySerializer(serializers.Serializer):
    """Write serializer for updating a cart item quantity."""

    quantity = serializers.IntegerField(min_value=1, max_value=100)

    def update(self, instance, validated_data):  # type: ignore[override]
        user = self.context["request"].user
        return update_item_quantity(user=user, item_id=instance.id, quantity=validated_data["quantity"])
