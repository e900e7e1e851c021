"""Cart services: reconciliation and line mutations."""

import logging
from dataclasses import dataclass, field

from catalog.models import Product
from django.db import transaction
from django.shortcuts import get_object_or_404
from inventory.services import REASON_UNAVAILABLE, ensure_available, raise_for_problems, stock_problem

from .models import CartItem
from .selectors import CartSnapshot, cart_items_for_user, partition_cart_items


class CartError(Exception):
    """Raised for cart mutation failures."""


logger = logging.getLogger("storefront.cart")


@dataclass
class CartValidation:
    valid: bool
    items: list = field(default_factory=list)
    invalid_items: list = field(default_factory=list)
    removed_count: int = 0


def reconcile_cart(*, user, evict_understocked: bool = True) -> CartSnapshot:
    """Load the user's cart and delete lines that can no longer be fulfilled.

    Deletion is a side effect of reading, so every caller sees a cart that was
    valid at read time. Checkout passes `evict_understocked=False` to keep
    understocked lines around for the user to fix.
    """

    items = list(cart_items_for_user(user=user))
    available, retained, evicted = partition_cart_items(items, evict_understocked=evict_understocked)
    if evicted:
        CartItem.objects.filter(id__in=[i.id for i in evicted]).delete()
        logger.info(
            "cart.reconciled",
            extra={
                "event": "cart.reconciled",
                "user_id": getattr(user, "id", None),
                "removed_count": len(evicted),
                "product_ids": [i.product_id for i in evicted],
            },
        )
    return CartSnapshot(items=available, retained=retained, removed=evicted)


def validate_cart(*, user) -> CartValidation:
    """Pre-checkout report: inactive lines are removed, understocked ones listed."""

    snapshot = reconcile_cart(user=user, evict_understocked=False)
    invalid = [
        stock_problem(i.product, i.quantity, cart_item_id=i.id) for i in snapshot.removed + snapshot.retained
    ]
    valid = bool(snapshot.items) and not invalid
    return CartValidation(
        valid=valid,
        items=snapshot.items,
        invalid_items=invalid,
        removed_count=snapshot.removed_count,
    )


@transaction.atomic
def add_item(*, user, product_id: int, quantity: int) -> CartItem:
    """Add a product to the user's cart, merging into an existing line.

    The merged total must be covered by current stock.
    """

    if quantity <= 0:
        raise CartError("Quantity must be positive")
    product = get_object_or_404(Product, id=product_id)

    try:
        item = CartItem.objects.select_for_update().get(user=user, product=product)
    except CartItem.DoesNotExist:
        ensure_available(product, quantity)
        created = CartItem.objects.create(user=user, product=product, quantity=quantity)
        logger.info(
            "cart.item_added",
            extra={
                "event": "cart.item_added",
                "user_id": getattr(user, "id", None),
                "product_id": product.id,
                "quantity": quantity,
            },
        )
        return created

    new_quantity = int(item.quantity) + int(quantity)
    ensure_available(product, new_quantity, cart_item_id=item.id)
    item.quantity = new_quantity
    item.save(update_fields=["quantity", "updated_at"])
    logger.info(
        "cart.item_updated",
        extra={
            "event": "cart.item_updated",
            "user_id": getattr(user, "id", None),
            "product_id": product.id,
            "quantity": new_quantity,
        },
    )
    return item


def update_item_quantity(*, user, item_id: int, quantity: int) -> CartItem:
    """Set a line's quantity with the line row locked.

    A line whose product went inactive is removed and `ProductUnavailable` is
    raised; the removal is committed even though the call fails.
    """

    if quantity <= 0:
        raise CartError("Quantity must be positive")

    with transaction.atomic():
        item = get_object_or_404(
            CartItem.objects.select_for_update(of=("self",)).select_related("product"),
            id=item_id,
            user=user,
        )
        problem = stock_problem(item.product, quantity, cart_item_id=item.id)
        if problem and problem["reason"] == REASON_UNAVAILABLE:
            item.delete()
            logger.info(
                "cart.item_evicted",
                extra={
                    "event": "cart.item_evicted",
                    "user_id": getattr(user, "id", None),
                    "product_id": problem["product_id"],
                    "item_id": item_id,
                },
            )
        elif not problem:
            item.quantity = quantity
            item.save(update_fields=["quantity", "updated_at"])
            logger.info(
                "cart.item_updated",
                extra={
                    "event": "cart.item_updated",
                    "user_id": getattr(user, "id", None),
                    "product_id": item.product_id,
                    "quantity": quantity,
                },
            )
    raise_for_problems([problem])
    return item


@transaction.atomic
def remove_item(*, user, item_id: int) -> None:
    """Remove an item from the cart; unknown ids are ignored."""

    deleted, _ = CartItem.objects.filter(id=item_id, user=user).delete()
    if not deleted:
        return
    logger.info(
        "cart.item_removed",
        extra={"event": "cart.item_removed", "user_id": getattr(user, "id", None), "item_id": item_id},
    )


@transaction.atomic
def clear_cart(*, user) -> int:
    """Delete every line in the user's cart and return how many were removed."""

    deleted, _ = CartItem.objects.filter(user=user).delete()
    logger.info(
        "cart.cleared",
        extra={"event": "cart.cleared", "user_id": getattr(user, "id", None), "removed_count": deleted},
    )
    return deleted
