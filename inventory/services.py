"""Inventory services (single-location): the stock ledger.

Stock is decremented with one conditional UPDATE whose affected-row count
decides the outcome, so concurrent reservations can never overdraw a
product. Releases are unconditional increments.
"""

import logging

from catalog.models import Product
from django.db import transaction
from django.db.models import F
from django.utils import timezone

from .models import StockMovement

logger = logging.getLogger("storefront.inventory")

REASON_UNAVAILABLE = "unavailable"
REASON_INSUFFICIENT_STOCK = "insufficient_stock"


class MovementError(Exception):
    """Raised for invalid stock ledger requests."""


class StockProblemError(MovementError):
    """Availability failure carrying every offending line.

    `problems` is a list of dicts as built by `stock_problem`.
    """

    default_message = "Stock check failed"

    def __init__(self, problems, message: str | None = None):
        self.problems = list(problems)
        super().__init__(message or self.default_message)


class ProductUnavailable(StockProblemError):
    default_message = "Product is no longer available"


class InsufficientStock(StockProblemError):
    default_message = "Insufficient stock"

    @property
    def available_quantity(self):
        for problem in self.problems:
            if problem["reason"] == REASON_INSUFFICIENT_STOCK:
                return problem["available_quantity"]
        return None


class ReservationConflict(MovementError):
    """A reservation lost a race after its availability check passed."""


def _positive(quantity) -> int:
    quantity = int(quantity)
    if quantity <= 0:
        raise MovementError("Quantity must be positive")
    return quantity


def is_available(product: Product, quantity: int = 1) -> bool:
    """Read-only check; callers must still go through `reserve`."""
    return product.is_available(quantity)


def stock_problem(product: Product, quantity: int, **context):
    """Describe why `quantity` of `product` cannot be supplied, or None.

    Extra keyword arguments (e.g. `cart_item_id`) are copied into the result.
    """

    if product.is_active and product.stock_quantity >= quantity:
        return None
    problem = {
        **context,
        "product_id": product.id,
        "product_name": product.name,
        "requested_quantity": int(quantity),
        "available_quantity": max(0, int(product.stock_quantity)) if product.is_active else 0,
    }
    problem["reason"] = REASON_INSUFFICIENT_STOCK if product.is_active else REASON_UNAVAILABLE
    return problem


def raise_for_problems(problems) -> None:
    """Raise the aggregate error for a list of stock problems, if any.

    Any shortfall makes it `InsufficientStock`; a list made only of inactive
    products is `ProductUnavailable`. Both carry the full list.
    """

    problems = [p for p in problems if p]
    if not problems:
        return
    if any(p["reason"] == REASON_INSUFFICIENT_STOCK for p in problems):
        raise InsufficientStock(problems)
    raise ProductUnavailable(problems)


def ensure_available(product: Product, quantity: int, **context) -> None:
    raise_for_problems([stock_problem(product, quantity, **context)])


@transaction.atomic
def reserve(*, product: Product, quantity: int, reference: str = "", reason: str = "order") -> bool:
    """Atomically take `quantity` units out of stock.

    Returns False, without touching the row, when stock does not cover the
    request.
    """

    quantity = _positive(quantity)
    updated = Product.objects.filter(pk=product.pk, stock_quantity__gte=quantity).update(
        stock_quantity=F("stock_quantity") - quantity,
        updated_at=timezone.now(),
    )
    if updated != 1:
        logger.info(
            "stock.reserve_failed",
            extra={"event": "stock.reserve_failed", "product_id": product.pk, "quantity": quantity},
        )
        return False

    StockMovement.objects.create(
        product_id=product.pk,
        movement_type=StockMovement.TYPE_RESERVE,
        quantity=-quantity,
        reason=reason,
        reference=reference,
    )
    product.refresh_from_db(fields=["stock_quantity", "updated_at"])
    logger.info(
        "stock.reserved",
        extra={
            "event": "stock.reserved",
            "product_id": product.pk,
            "quantity": quantity,
            "stock_after": product.stock_quantity,
            "reference": reference,
        },
    )
    return True


@transaction.atomic
def release(*, product: Product, quantity: int, reference: str = "", reason: str = "order cancelled") -> None:
    """Atomically return `quantity` units to stock. Always succeeds."""

    quantity = _positive(quantity)
    Product.objects.filter(pk=product.pk).update(
        stock_quantity=F("stock_quantity") + quantity,
        updated_at=timezone.now(),
    )
    StockMovement.objects.create(
        product_id=product.pk,
        movement_type=StockMovement.TYPE_RELEASE,
        quantity=quantity,
        reason=reason,
        reference=reference,
    )
    product.refresh_from_db(fields=["stock_quantity", "updated_at"])
    logger.info(
        "stock.released",
        extra={
            "event": "stock.released",
            "product_id": product.pk,
            "quantity": quantity,
            "stock_after": product.stock_quantity,
            "reference": reference,
        },
    )


# EOF
