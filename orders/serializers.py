"""DRF serializers for Orders.

Order amounts are the values frozen at checkout; nothing here recomputes
prices from the live catalog.
"""

from common.choices import OrderStatus, PaymentMethod
from rest_framework import serializers

from .models import SHIPPING_ADDRESS_LINES, Order, OrderItem
from .transitions import BULK_TARGET_STATUSES


class ShippingAddressSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    address_line_1 = serializers.CharField(max_length=255)
    address_line_2 = serializers.CharField(max_length=255, required=False, allow_blank=True, allow_null=True)
    city = serializers.CharField(max_length=100)
    state = serializers.CharField(max_length=100)
    postal_code = serializers.CharField(max_length=20)
    country = serializers.CharField(max_length=100)
    phone = serializers.CharField(max_length=20, required=False, allow_blank=True, allow_null=True)

    def to_internal_value(self, data):
        value = super().to_internal_value(data)
        return {k: value[k] for k in SHIPPING_ADDRESS_LINES if value.get(k) not in (None, "")}


class OrderItemSerializer(serializers.ModelSerializer):
    class Meta:
        model = OrderItem
        fields = ["id", "product", "product_name", "quantity", "price", "total"]
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    """API representation for an order owned by the requesting user."""

    items = OrderItemSerializer(many=True, read_only=True)
    status_label = serializers.CharField(read_only=True)
    items_count = serializers.IntegerField(read_only=True)
    can_be_cancelled = serializers.BooleanField(read_only=True)
    formatted_shipping_address = serializers.CharField(read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "order_number",
            "status",
            "status_label",
            "total_amount",
            "items_count",
            "can_be_cancelled",
            "shipping_address",
            "formatted_shipping_address",
            "payment_method",
            "notes",
            "items",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class AdminOrderSerializer(OrderSerializer):
    user_id = serializers.IntegerField(read_only=True)
    user_email = serializers.EmailField(source="user.email", read_only=True)

    class Meta(OrderSerializer.Meta):
        fields = OrderSerializer.Meta.fields + ["user_id", "user_email", "admin_notes"]
        read_only_fields = fields


class OrderCreateSerializer(serializers.Serializer):
    shipping_address = ShippingAddressSerializer()
    payment_method = serializers.ChoiceField(choices=PaymentMethod.choices)
    notes = serializers.CharField(max_length=1000, required=False, allow_blank=True, default="")


class OrderStatusUpdateSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=OrderStatus.choices)
    admin_notes = serializers.CharField(max_length=1000, required=False, allow_blank=True)


class BulkStatusUpdateSerializer(serializers.Serializer):
    order_ids = serializers.ListField(child=serializers.IntegerField(min_value=1), min_length=1, max_length=500)
    status = serializers.ChoiceField(choices=[(s, OrderStatus(s).label) for s in BULK_TARGET_STATUSES])
