from decimal import Decimal

import pytest
from catalog.tests.factories import ProductFactory
from inventory.models import StockMovement
from orders.models import Order
from orders.services import (
    BulkTransitionRejected,
    InvalidStatusTransition,
    OrderNotFound,
    bulk_update_status,
    cancel_order,
    update_order_status,
)
from orders.tests.factories import OrderFactory, OrderItemFactory
from orders.transitions import ALLOWED_TRANSITIONS, allowed_targets, can_transition, is_terminal
from users.tests.factories import AdminUserFactory

ALL_STATUSES = ["pending", "processing", "shipped", "delivered", "cancelled"]
VALID = {
    ("pending", "processing"),
    ("pending", "cancelled"),
    ("processing", "shipped"),
    ("processing", "cancelled"),
    ("shipped", "delivered"),
}


@pytest.mark.parametrize("current", ALL_STATUSES)
@pytest.mark.parametrize("requested", ALL_STATUSES)
def test_transition_graph(current, requested):
    assert can_transition(current, requested) is ((current, requested) in VALID)


def test_terminal_statuses():
    assert is_terminal("delivered")
    assert is_terminal("cancelled")
    assert not is_terminal("shipped")
    assert allowed_targets("pending") == ["cancelled", "processing"]
    assert set(ALLOWED_TRANSITIONS) == set(ALL_STATUSES)


def test_unknown_status_has_no_transitions():
    assert can_transition("refunded", "pending") is False
    assert can_transition("pending", "refunded") is False


@pytest.mark.django_db
def test_update_order_status_walks_the_happy_path(django_capture_on_commit_callbacks, mailoutbox):
    order = OrderFactory()
    admin = AdminUserFactory()

    with django_capture_on_commit_callbacks(execute=True):
        update_order_status(order=order, status="processing", acting_user=admin)
        update_order_status(order=order, status="shipped", admin_notes="Tracking 1Z999", acting_user=admin)
        update_order_status(order=order, status="delivered", acting_user=admin)

    order.refresh_from_db()
    assert order.status == Order.STATUS_DELIVERED
    assert order.admin_notes == "Tracking 1Z999"
    assert len(mailoutbox) == 3
    assert "changed from shipped to delivered" in mailoutbox[-1].body


@pytest.mark.django_db
def test_invalid_transition_is_rejected():
    order = OrderFactory(status=Order.STATUS_PENDING)

    with pytest.raises(InvalidStatusTransition) as excinfo:
        update_order_status(order=order, status="delivered")

    assert excinfo.value.current == "pending"
    assert excinfo.value.requested == "delivered"
    order.refresh_from_db()
    assert order.status == Order.STATUS_PENDING


@pytest.mark.django_db
@pytest.mark.parametrize("status", ["pending", "processing"])
def test_cancel_restores_stock(status):
    product = ProductFactory(stock_quantity=3)
    order = OrderFactory(status=status)
    OrderItemFactory(order=order, product=product, quantity=2, price=Decimal("5.00"), total=Decimal("10.00"))

    cancel_order(order=order)

    order.refresh_from_db()
    product.refresh_from_db()
    assert order.status == Order.STATUS_CANCELLED
    assert product.stock_quantity == 5
    movement = StockMovement.objects.get(reference=order.order_number)
    assert movement.quantity == 2


@pytest.mark.django_db
@pytest.mark.parametrize("status", ["shipped", "delivered", "cancelled"])
def test_cancel_outside_cancellable_statuses(status):
    product = ProductFactory(stock_quantity=3)
    order = OrderFactory(status=status)
    OrderItemFactory(order=order, product=product, quantity=2)

    with pytest.raises(InvalidStatusTransition):
        cancel_order(order=order)

    product.refresh_from_db()
    assert product.stock_quantity == 3
    assert not StockMovement.objects.exists()


@pytest.mark.django_db
def test_admin_cancel_through_status_update_restores_stock():
    product = ProductFactory(stock_quantity=0)
    order = OrderFactory(status=Order.STATUS_PROCESSING)
    OrderItemFactory(order=order, product=product, quantity=4)

    update_order_status(order=order, status="cancelled")

    product.refresh_from_db()
    assert product.stock_quantity == 4


@pytest.mark.django_db
def test_bulk_update_moves_every_order():
    orders = [OrderFactory(status=Order.STATUS_PROCESSING) for _ in range(3)]

    updated = bulk_update_status(order_ids=[o.id for o in orders], status="shipped")

    assert len(updated) == 3
    assert set(Order.objects.values_list("status", flat=True)) == {"shipped"}


@pytest.mark.django_db
def test_bulk_update_is_all_or_nothing():
    ready = OrderFactory(status=Order.STATUS_PROCESSING)
    blocked = OrderFactory(status=Order.STATUS_PENDING)

    with pytest.raises(BulkTransitionRejected) as excinfo:
        bulk_update_status(order_ids=[ready.id, blocked.id], status="shipped")

    assert excinfo.value.invalid_orders == [
        {"order_id": blocked.id, "order_number": blocked.order_number, "current_status": "pending"}
    ]
    ready.refresh_from_db()
    assert ready.status == Order.STATUS_PROCESSING


@pytest.mark.django_db
def test_bulk_update_reports_missing_orders():
    order = OrderFactory(status=Order.STATUS_PENDING)

    with pytest.raises(OrderNotFound) as excinfo:
        bulk_update_status(order_ids=[order.id, 987654], status="processing")

    assert excinfo.value.missing_ids == [987654]
    order.refresh_from_db()
    assert order.status == Order.STATUS_PENDING


@pytest.mark.django_db
def test_bulk_ship_of_pending_and_shipped_orders_is_rejected():
    pending = OrderFactory(status=Order.STATUS_PENDING)
    shipped = OrderFactory(status=Order.STATUS_SHIPPED)

    with pytest.raises(BulkTransitionRejected) as excinfo:
        bulk_update_status(order_ids=[pending.id, shipped.id], status="shipped")

    invalid = {o["order_id"]: o["current_status"] for o in excinfo.value.invalid_orders}
    assert invalid[pending.id] == "pending"
    # A same-status request is not a transition either
    assert invalid[shipped.id] == "shipped"
    assert dict(Order.objects.values_list("id", "status")) == {pending.id: "pending", shipped.id: "shipped"}
