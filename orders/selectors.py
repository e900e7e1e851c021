"""Read-only order queries."""

from .models import Order
from .services import OrderNotFound


def orders_for_user(*, user, status: str | None = None):
    qs = Order.objects.filter(user=user).prefetch_related("items").order_by("-created_at", "-id")
    if status:
        qs = qs.filter(status=status)
    return qs


def get_order_for_user(*, user, order_number: str) -> Order:
    """Return the user's order; other users' orders are reported as missing."""
    try:
        return Order.objects.prefetch_related("items").get(user=user, order_number=order_number)
    except Order.DoesNotExist:
        raise OrderNotFound(order_number=order_number)


def get_order_by_number(*, order_number: str) -> Order:
    try:
        return Order.objects.select_related("user").prefetch_related("items").get(order_number=order_number)
    except Order.DoesNotExist:
        raise OrderNotFound(order_number=order_number)
