"""Wishlist models: products a user saved without a quantity."""

from django.conf import settings
from django.db import models


class TimeStampedModel(models.Model):
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class WishlistItem(TimeStampedModel):
    user = models.ForeignKey(settings.AUTH_USER_MODEL, related_name="wishlist_items", on_delete=models.CASCADE)
    product = models.ForeignKey("catalog.Product", related_name="wishlist_items", on_delete=models.CASCADE)

    class Meta:
        ordering = ["-created_at", "-id"]
        constraints = [
            models.UniqueConstraint(fields=["user", "product"], name="unique_product_per_wishlist"),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"WishlistItem#{self.id} user={self.user_id} product={self.product_id}"

    @property
    def is_product_available(self) -> bool:
        """Active and with at least one unit on hand."""
        return self.product.is_available(1)
