"""Order status graph.

Pure data and predicates; the services in `orders.services` apply the side
effects (stock release, notifications) that go with a transition.
"""

from common.choices import OrderStatus

PENDING = OrderStatus.PENDING.value
PROCESSING = OrderStatus.PROCESSING.value
SHIPPED = OrderStatus.SHIPPED.value
DELIVERED = OrderStatus.DELIVERED.value
CANCELLED = OrderStatus.CANCELLED.value

# Keys and members are plain strings so lookups work with raw request values
ALLOWED_TRANSITIONS = {
    PENDING: frozenset({PROCESSING, CANCELLED}),
    PROCESSING: frozenset({SHIPPED, CANCELLED}),
    SHIPPED: frozenset({DELIVERED}),
    DELIVERED: frozenset(),
    CANCELLED: frozenset(),
}

# Statuses an admin may request through the bulk endpoint
BULK_TARGET_STATUSES = (PROCESSING, SHIPPED, DELIVERED)


def can_transition(current: str, requested: str) -> bool:
    return str(requested) in ALLOWED_TRANSITIONS.get(str(current), frozenset())


def allowed_targets(current: str) -> list[str]:
    return sorted(ALLOWED_TRANSITIONS.get(str(current), frozenset()))


def is_terminal(status: str) -> bool:
    return not ALLOWED_TRANSITIONS.get(str(status))
