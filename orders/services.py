"""Order services: checkout, status transitions and idempotent replays."""

import hashlib
import json
import logging
import secrets
from datetime import timedelta
from decimal import Decimal
from functools import partial
from typing import Callable, Optional, Tuple

from cart.models import CartItem
from cart.selectors import cart_items_for_user
from cart.services import reconcile_cart
from catalog.models import Product
from django.conf import settings
from django.db import IntegrityError, transaction
from django.utils import timezone
from inventory.services import (
    REASON_UNAVAILABLE,
    ReservationConflict,
    raise_for_problems,
    release,
    reserve,
    stock_problem,
)

from .emails import send_order_confirmation_email, send_order_status_email
from .models import IdempotencyKey, Order, OrderItem
from .transitions import CANCELLED, can_transition

logger = logging.getLogger("storefront.orders")

CENT = Decimal("0.01")


class OrderError(Exception):
    """Raised for order mutation failures."""


class EmptyCart(OrderError):
    pass


class InvalidStatusTransition(OrderError):
    def __init__(self, current, requested, message: str | None = None):
        self.current = str(current) if current is not None else None
        self.requested = str(requested)
        super().__init__(message or f"Cannot change order status from {self.current} to {self.requested}")


class BulkTransitionRejected(InvalidStatusTransition):
    """At least one order in a batch cannot make the transition; nothing changed."""

    def __init__(self, requested, invalid_orders):
        self.invalid_orders = list(invalid_orders)
        super().__init__(
            None,
            requested,
            f"{len(self.invalid_orders)} order(s) cannot be changed to {requested}",
        )


class OrderNotFound(OrderError):
    def __init__(self, *, missing_ids=None, order_number: str | None = None):
        self.missing_ids = list(missing_ids or [])
        self.order_number = order_number
        if order_number:
            message = f"Order {order_number} not found"
        else:
            message = f"Orders not found: {', '.join(str(i) for i in self.missing_ids)}"
        super().__init__(message)


def generate_order_number() -> str:
    """Return a candidate number such as `ORD-2026-004217`; uniqueness is checked by the caller."""
    return f"ORD-{timezone.now().year}-{secrets.randbelow(999999) + 1:06d}"


def _create_order_row(**fields) -> Order:
    attempts = int(getattr(settings, "ORDER_NUMBER_MAX_ATTEMPTS", 10))
    for _ in range(attempts):
        number = generate_order_number()
        if Order.objects.filter(order_number=number).exists():
            continue
        try:
            with transaction.atomic():
                return Order.objects.create(order_number=number, **fields)
        except IntegrityError:
            # Lost a race for the same number
            continue
    raise OrderError("Could not allocate a unique order number")


def _line_problems(lines, products):
    problems = []
    for line in lines:
        product = products.get(line.product_id)
        if product is None:
            problems.append(
                {
                    "cart_item_id": line.id,
                    "product_id": line.product_id,
                    "product_name": line.product.name,
                    "requested_quantity": int(line.quantity),
                    "available_quantity": 0,
                    "reason": REASON_UNAVAILABLE,
                }
            )
            continue
        problems.append(stock_problem(product, line.quantity, cart_item_id=line.id))
    return problems


def _send_safely(sender, order_id: int, *args) -> None:
    """Run a notification after commit; delivery problems never reach the caller."""
    try:
        order = Order.objects.select_related("user").prefetch_related("items").get(pk=order_id)
        sender(order, *args)
    except Exception:
        logger.warning(
            "order.notification_failed",
            extra={"event": "order.notification_failed", "order_id": order_id, "sender": sender.__name__},
            exc_info=True,
        )


def create_order(*, user, shipping_address: dict, payment_method: str = "", notes: str = "") -> Order:
    """Turn the user's cart into a pending order.

    Availability is checked twice: once against the reconciled cart so the
    caller gets every problem without any side effect, and again on the
    locked product rows inside the transaction. Stock is then reserved line
    by line; a lost reservation rolls the whole order back. The cart rows
    are locked first and must all still exist when they are cleared, so one
    cart never becomes two orders.
    """

    snapshot = reconcile_cart(user=user, evict_understocked=False)
    lines = snapshot.lines
    if not lines:
        raise EmptyCart("Cart is empty")
    raise_for_problems([stock_problem(line.product, line.quantity, cart_item_id=line.id) for line in lines])

    with transaction.atomic():
        # Cart rows before product rows; a second submit of the same cart waits here
        list(CartItem.objects.select_for_update().filter(user=user).order_by("id").values_list("id", flat=True))
        lines = list(cart_items_for_user(user=user))
        if not lines:
            raise EmptyCart("Cart is empty")
        product_ids = sorted({line.product_id for line in lines})
        products = {p.id: p for p in Product.objects.select_for_update().filter(id__in=product_ids).order_by("id")}
        raise_for_problems(_line_problems(lines, products))

        priced = []
        for line in lines:
            product = products[line.product_id]
            price = product.effective_price.quantize(CENT)
            priced.append((line, product, price, (price * int(line.quantity)).quantize(CENT)))
        total = sum((line_total for *_, line_total in priced), Decimal("0.00"))

        order = _create_order_row(
            user=user,
            status=Order.STATUS_PENDING,
            total_amount=total,
            shipping_address=dict(shipping_address or {}),
            payment_method=payment_method or "",
            notes=notes or "",
        )
        for line, product, price, line_total in priced:
            OrderItem.objects.create(
                order=order,
                product=product,
                product_name=product.name,
                quantity=line.quantity,
                price=price,
                total=line_total,
            )
        for line, product, _, _ in sorted(priced, key=lambda p: p[1].id):
            if not reserve(product=product, quantity=line.quantity, reference=order.order_number):
                raise ReservationConflict(f"Stock for product {product.id} changed during checkout")

        deleted, _ = CartItem.objects.filter(user=user, id__in=[line.id for line in lines]).delete()
        if deleted != len(lines):
            raise ReservationConflict("Cart changed during checkout")
        transaction.on_commit(partial(_send_safely, send_order_confirmation_email, order.id))

    logger.info(
        "order_created",
        extra={
            "event": "order_created",
            "order_id": order.id,
            "order_number": order.order_number,
            "user_id": getattr(user, "id", None),
            "total_amount": str(order.total_amount),
            "items": len(priced),
        },
    )
    return Order.objects.prefetch_related("items__product").get(pk=order.pk)


def _apply_transition(order: Order, status: str, *, admin_notes: Optional[str] = None, acting_user=None) -> Order:
    """Move a locked order to `status`, restoring stock on cancellation."""

    if not can_transition(order.status, status):
        raise InvalidStatusTransition(order.status, status)
    previous = str(order.status)
    if str(status) == CANCELLED:
        for item in order.items.select_related("product").order_by("product_id"):
            release(
                product=item.product,
                quantity=item.quantity,
                reference=order.order_number,
                reason="order cancelled",
            )

    order.status = str(status)
    fields = ["status", "updated_at"]
    if admin_notes is not None:
        order.admin_notes = admin_notes
        fields.append("admin_notes")
    order.save(update_fields=fields)

    logger.info(
        "order_status_changed",
        extra={
            "event": "order_status_changed",
            "order_id": order.id,
            "order_number": order.order_number,
            "user_id": order.user_id,
            "status_from": previous,
            "status_to": order.status,
            "acting_user_id": getattr(acting_user, "id", None),
        },
    )
    transaction.on_commit(partial(_send_safely, send_order_status_email, order.id, previous))
    return order


@transaction.atomic
def cancel_order(*, order: Order, acting_user=None) -> Order:
    """Cancel a pending or processing order and put its stock back."""

    locked = Order.objects.select_for_update().get(pk=order.pk)
    return _apply_transition(locked, CANCELLED, acting_user=acting_user)


@transaction.atomic
def update_order_status(*, order: Order, status: str, admin_notes: Optional[str] = None, acting_user=None) -> Order:
    """Admin status change for a single order."""

    locked = Order.objects.select_for_update().get(pk=order.pk)
    return _apply_transition(locked, status, admin_notes=admin_notes, acting_user=acting_user)


@transaction.atomic
def bulk_update_status(*, order_ids, status: str, acting_user=None) -> list:
    """Move every listed order to `status`, or none of them.

    All orders are locked in id order and validated before the first write.
    """

    ids = sorted({int(i) for i in order_ids})
    if not ids:
        raise OrderError("No orders given")
    orders = list(Order.objects.select_for_update().filter(id__in=ids).order_by("id"))
    missing = sorted(set(ids) - {o.id for o in orders})
    if missing:
        raise OrderNotFound(missing_ids=missing)

    invalid = [
        {"order_id": o.id, "order_number": o.order_number, "current_status": str(o.status)}
        for o in orders
        if not can_transition(o.status, status)
    ]
    if invalid:
        raise BulkTransitionRejected(status, invalid)

    for order in orders:
        _apply_transition(order, status, acting_user=acting_user)
    logger.info(
        "order.bulk_status_updated",
        extra={
            "event": "order.bulk_status_updated",
            "order_ids": ids,
            "status_to": str(status),
            "acting_user_id": getattr(acting_user, "id", None),
        },
    )
    return orders


def with_idempotency(
    *,
    key: str,
    user,
    path: str,
    method: str,
    handler: Callable[[], Tuple[dict, int]],
    request_hash: Optional[str] = None,
) -> Tuple[dict, int]:
    """Run handler idempotently and persist its response for the given key and scope.

    - Scope is derived from the caller: for authenticated users, "user:<id>"; otherwise "anon".
    - If a record exists and the stored `request_hash` differs from the provided one, returns 409.
    - If a record exists but response is not yet stored, returns 409 to indicate in-progress.
    - Outcomes that depend on current state are not stored, so the same key can be
      used again: 5xx, a body flagged `retryable`, or a stock report listing
      `unavailable_items`.
    """

    scope = f"user:{getattr(user, 'id', None)}" if getattr(user, "id", None) else "anon"
    method = str(method).upper()
    path = str(path)
    ttl_hours = int(getattr(settings, "IDEMPOTENCY_TTL_HOURS", 24))

    try:
        with transaction.atomic():
            idem = IdempotencyKey.objects.create(
                key=key,
                user=user if getattr(user, "id", None) else None,
                scope=scope,
                path=path,
                method=method,
                request_hash=request_hash,
                expires_at=timezone.now() + timedelta(hours=ttl_hours),
            )
    except IntegrityError:
        idem = IdempotencyKey.objects.get(key=key, scope=scope, path=path, method=method)
        # Guard against key reuse with different fingerprints
        if idem.request_hash and request_hash and idem.request_hash != request_hash:
            return {"detail": "Idempotency key reused with different request payload"}, 409
        if idem.response_json is not None and idem.response_code is not None:
            return idem.response_json, int(idem.response_code)
        return {"detail": "Request in progress"}, 409

    try:
        body, code = handler()
    except Exception:
        IdempotencyKey.objects.filter(id=idem.id).delete()
        raise

    if code >= 500 or (isinstance(body, dict) and (body.get("retryable") or "unavailable_items" in body)):
        IdempotencyKey.objects.filter(id=idem.id).delete()
        return body, code

    def _json_safe(value):
        if isinstance(value, Decimal):
            return str(value)
        if isinstance(value, dict):
            return {k: _json_safe(v) for k, v in value.items()}
        if isinstance(value, (list, tuple)):
            return [_json_safe(v) for v in value]
        return value

    safe_body = _json_safe(body)
    IdempotencyKey.objects.filter(id=idem.id).update(response_json=safe_body, response_code=code)
    return body, code


def compute_request_hash(data: Optional[dict]) -> Optional[str]:
    """Compute a canonical SHA256 hash of the request body.

    Uses sorted keys JSON representation to stabilize the hash across equivalent payloads.
    Returns None when data is falsy or not JSON-serializable.
    """
    if not data:
        return None
    try:
        payload = json.dumps(data, sort_keys=True, separators=(",", ":"), default=str)
    except (TypeError, ValueError):
        return None
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()
