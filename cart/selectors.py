"""Selectors for read-only cart queries."""

from dataclasses import dataclass, field
from decimal import Decimal

from .models import CartItem


@dataclass
class CartSnapshot:
    """Result of reconciling a cart.

    `items` are fully available lines, `retained` are active but understocked
    lines kept in the cart, `removed` are the lines that were deleted.
    """

    items: list = field(default_factory=list)
    retained: list = field(default_factory=list)
    removed: list = field(default_factory=list)

    @property
    def removed_count(self) -> int:
        return len(self.removed)

    @property
    def lines(self) -> list:
        return sorted(self.items + self.retained, key=lambda i: i.id)


def cart_items_for_user(*, user):
    return CartItem.objects.filter(user=user).select_related("product", "product__category").order_by("id")


def partition_cart_items(items, *, evict_understocked: bool = True):
    """Split cart lines into (available, retained, evicted).

    Pure: reads only the loaded product fields and never touches the database.
    An inactive product is always evicted; an understocked one is evicted or
    retained depending on `evict_understocked`.
    """

    available, retained, evicted = [], [], []
    for item in items:
        product = item.product
        if not product.is_active:
            evicted.append(item)
        elif product.stock_quantity < item.quantity:
            (evicted if evict_understocked else retained).append(item)
        else:
            available.append(item)
    return available, retained, evicted


def cart_totals(items):
    """Compute cart totals from live product prices."""

    subtotal = sum((item.line_total for item in items), Decimal("0.00"))
    subtotal = subtotal.quantize(Decimal("0.01"))
    # Taxes and shipping are not modelled; total equals subtotal
    return {
        "subtotal": subtotal,
        "total": subtotal,
        "item_count": sum(int(item.quantity) for item in items),
        "items_total": len(items),
    }
