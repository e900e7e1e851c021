"""Cart app models.

A cart is simply the set of `CartItem` rows owned by a user; there is no
separate cart header. Lines are joined live to `catalog.Product`, so prices
and availability always reflect the current catalog.
"""

from decimal import Decimal

from django.conf import settings
from django.db import models


class TimeStampedModel(models.Model):
    """Abstract base model adding created/updated timestamps."""

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class CartItem(TimeStampedModel):
    """One product line in a user's cart."""

    user = models.ForeignKey(settings.AUTH_USER_MODEL, related_name="cart_items", on_delete=models.CASCADE)
    product = models.ForeignKey("catalog.Product", related_name="cart_items", on_delete=models.CASCADE)
    quantity = models.PositiveIntegerField(default=1)

    class Meta:
        ordering = ["id"]
        constraints = [
            models.UniqueConstraint(fields=["user", "product"], name="unique_product_per_cart"),
            models.CheckConstraint(name="cart_quantity_positive", condition=models.Q(quantity__gte=1)),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"CartItem#{self.id} user={self.user_id} product={self.product_id} qty={self.quantity}"

    @property
    def unit_price(self) -> Decimal:
        return self.product.effective_price

    @property
    def line_total(self) -> Decimal:
        return (self.unit_price or Decimal("0.00")) * Decimal(int(self.quantity))

    @property
    def is_available(self) -> bool:
        return self.product.is_available(self.quantity)
