"""Selectors for read-only wishlist queries."""

from dataclasses import dataclass, field

from .models import WishlistItem


@dataclass
class WishlistSnapshot:
    items: list = field(default_factory=list)
    removed: list = field(default_factory=list)

    @property
    def removed_count(self) -> int:
        return len(self.removed)


def wishlist_items_for_user(*, user):
    return WishlistItem.objects.filter(user=user).select_related("product", "product__category")


def is_in_wishlist(*, user, product_id: int) -> bool:
    return WishlistItem.objects.filter(user=user, product_id=product_id).exists()
