"""Wishlist services, including the wishlist-to-cart mover."""

import logging

from cart.models import CartItem
from catalog.models import Product
from django.db import transaction
from django.shortcuts import get_object_or_404

from .models import WishlistItem
from .selectors import WishlistSnapshot, is_in_wishlist, wishlist_items_for_user


class WishlistError(Exception):
    """Raised for wishlist mutation failures."""


logger = logging.getLogger("storefront.wishlist")


def reconcile_wishlist(*, user) -> WishlistSnapshot:
    """Load the wishlist, deleting entries whose product is inactive or out of stock."""

    items = list(wishlist_items_for_user(user=user))
    keep = [i for i in items if i.is_product_available]
    removed = [i for i in items if not i.is_product_available]
    if removed:
        WishlistItem.objects.filter(id__in=[i.id for i in removed]).delete()
        logger.info(
            "wishlist.reconciled",
            extra={
                "event": "wishlist.reconciled",
                "user_id": getattr(user, "id", None),
                "removed_count": len(removed),
                "product_ids": [i.product_id for i in removed],
            },
        )
    return WishlistSnapshot(items=keep, removed=removed)


@transaction.atomic
def add_to_wishlist(*, user, product_id: int) -> WishlistItem:
    """Save an active product; saving the same product twice is an error."""

    product = get_object_or_404(Product, id=product_id, is_active=True)
    if is_in_wishlist(user=user, product_id=product.id):
        raise WishlistError("Product is already in your wishlist")
    item = WishlistItem.objects.create(user=user, product=product)
    logger.info(
        "wishlist.item_added",
        extra={"event": "wishlist.item_added", "user_id": getattr(user, "id", None), "product_id": product.id},
    )
    return item


def remove_item(*, user, item_id: int) -> bool:
    deleted, _ = WishlistItem.objects.filter(id=item_id, user=user).delete()
    if deleted:
        logger.info(
            "wishlist.item_removed",
            extra={"event": "wishlist.item_removed", "user_id": getattr(user, "id", None), "item_id": item_id},
        )
    return bool(deleted)


def remove_product(*, user, product_id: int) -> bool:
    deleted, _ = WishlistItem.objects.filter(product_id=product_id, user=user).delete()
    if deleted:
        logger.info(
            "wishlist.item_removed",
            extra={
                "event": "wishlist.item_removed",
                "user_id": getattr(user, "id", None),
                "product_id": product_id,
            },
        )
    return bool(deleted)


def clear_wishlist(*, user) -> int:
    deleted, _ = WishlistItem.objects.filter(user=user).delete()
    logger.info(
        "wishlist.cleared",
        extra={"event": "wishlist.cleared", "user_id": getattr(user, "id", None), "removed_count": deleted},
    )
    return deleted


@transaction.atomic
def move_to_cart(*, item: WishlistItem, quantity: int = 1) -> bool:
    """Move a wishlist entry into the owner's cart.

    Runs with the product row locked. Returns False, changing nothing, when the
    product is inactive or stock does not cover the request (or, when merging
    into an existing cart line, the merged total). On success the cart line is
    created or increased and the wishlist entry is deleted.
    """

    if quantity <= 0:
        raise WishlistError("Quantity must be positive")

    entry = WishlistItem.objects.select_for_update().filter(pk=item.pk).first()
    if entry is None:
        return False
    product = Product.objects.select_for_update().get(pk=entry.product_id)
    if not product.is_available(quantity):
        logger.info(
            "wishlist.move_rejected",
            extra={
                "event": "wishlist.move_rejected",
                "user_id": entry.user_id,
                "product_id": product.id,
                "quantity": quantity,
            },
        )
        return False

    line = CartItem.objects.select_for_update().filter(user_id=entry.user_id, product=product).first()
    if line is not None:
        new_quantity = int(line.quantity) + int(quantity)
        if product.stock_quantity < new_quantity:
            logger.info(
                "wishlist.move_rejected",
                extra={
                    "event": "wishlist.move_rejected",
                    "user_id": entry.user_id,
                    "product_id": product.id,
                    "quantity": new_quantity,
                },
            )
            return False
        line.quantity = new_quantity
        line.save(update_fields=["quantity", "updated_at"])
    else:
        CartItem.objects.create(user_id=entry.user_id, product=product, quantity=quantity)

    entry.delete()
    logger.info(
        "wishlist.moved_to_cart",
        extra={
            "event": "wishlist.moved_to_cart",
            "user_id": item.user_id,
            "product_id": product.id,
            "quantity": quantity,
        },
    )
    return True
