"""Catalog services: category tree checks and product removal."""

import logging

from common.choices import DeleteOutcome
from django.conf import settings
from django.db import transaction

from .models import Category, Product

logger = logging.getLogger("storefront.catalog")


class CategoryTreeError(Exception):
    """Raised when a parent assignment would corrupt the category tree."""


def validate_category_parent(*, category: Category, parent, max_depth: int | None = None) -> None:
    """Reject parents that would create a cycle or exceed the depth limit.

    Walks the ancestor chain of `parent` instead of recursing, so a tree
    that is already damaged cannot loop forever.
    """

    if parent is None:
        return
    if max_depth is None:
        max_depth = int(getattr(settings, "CATEGORY_MAX_DEPTH", 10))

    if category.pk is not None and parent.pk == category.pk:
        raise CategoryTreeError("A category cannot be its own parent")

    depth = 1
    node = parent
    seen = set()
    while node is not None:
        if category.pk is not None and node.pk == category.pk:
            raise CategoryTreeError("Category hierarchy cannot contain cycles")
        if node.pk in seen:
            raise CategoryTreeError("Existing category hierarchy contains a cycle")
        seen.add(node.pk)
        depth += 1
        if depth > max_depth:
            raise CategoryTreeError(f"Category hierarchy cannot be deeper than {max_depth} levels")
        node = node.parent


@transaction.atomic
def delete_product(*, product: Product) -> str:
    """Delete a product, or deactivate it when it appears on any order.

    Returns a `DeleteOutcome` value.
    """

    product_id = product.id
    if product.order_items.exists():
        product.is_active = False
        product.save(update_fields=["is_active", "updated_at"])
        outcome = DeleteOutcome.DEACTIVATED
    else:
        product.delete()
        outcome = DeleteOutcome.DELETED
    logger.info(
        "product.deleted",
        extra={"event": "product.deleted", "product_id": product_id, "outcome": str(outcome)},
    )
    return outcome
