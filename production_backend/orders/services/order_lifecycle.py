# orders/services/order_lifecycle.py

"""
ORDER LIFECYCLE DOMAIN RULES

This module defines the ONLY allowed status changes for Order entities.

DESIGN PRINCIPLES:
- No database writes
- No side effects
- Single source of truth

Operations (not target statuses) are the keys: start, release and fulfill resolve
their target from fulfilled_quantity.
"""

from common.exceptions import InvalidStateError
from common.quantities import reaches
from orders.models import Order

# ============================================================
# STATE DEFINITIONS
# ============================================================

OP_BATCH = "batch"
OP_START = "start"
OP_RELEASE = "release"
OP_FULFILL = "fulfill"

TERMINAL_STATES = {
    Order.STATUS_COMPLETED,
}

ALLOWED_TRANSITIONS = {
    OP_BATCH: {
        Order.STATUS_PENDING,
        Order.STATUS_IN_PROGRESS,
        Order.STATUS_BATCHED,
        Order.STATUS_PARTIALLY_DISPATCHED,
    },
    OP_START: {
        Order.STATUS_PENDING,
        Order.STATUS_BATCHED,
        Order.STATUS_PARTIALLY_DISPATCHED,
    },
    OP_RELEASE: {
        Order.STATUS_PENDING,
        Order.STATUS_BATCHED,
        Order.STATUS_IN_PROGRESS,
        Order.STATUS_PARTIALLY_DISPATCHED,
    },
    OP_FULFILL: {
        Order.STATUS_PENDING,
        Order.STATUS_IN_PROGRESS,
        Order.STATUS_BATCHED,
        Order.STATUS_PARTIALLY_DISPATCHED,
    },
}


# ============================================================
# DOMAIN RULES
# ============================================================


def can_apply(*, operation: str, from_status: str) -> bool:
    if from_status in TERMINAL_STATES:
        return False

    return from_status in ALLOWED_TRANSITIONS.get(operation, set())


def validate_operation(*, order: Order, operation: str):
    if not can_apply(operation=operation, from_status=order.status):
        raise InvalidStateError(
            f"Order {order.order_number} cannot {operation} from '{order.status}'"
        )


def target_status(*, order: Order, operation: str, fulfilled_quantity=None) -> str:
    """
    Resolve the status an operation leads to.

    fulfilled_quantity defaults to the order's current value.
    """
    fulfilled = order.fulfilled_quantity if fulfilled_quantity is None else fulfilled_quantity

    if operation == OP_BATCH:
        return Order.STATUS_BATCHED

    if operation == OP_START:
        # delivered progress is never rolled back
        if fulfilled > 0:
            return Order.STATUS_PARTIALLY_DISPATCHED
        return Order.STATUS_IN_PROGRESS

    if operation == OP_RELEASE:
        if fulfilled > 0:
            return Order.STATUS_PARTIALLY_DISPATCHED
        return Order.STATUS_PENDING

    if operation == OP_FULFILL:
        if reaches(fulfilled, order.quantity):
            return Order.STATUS_COMPLETED
        return Order.STATUS_PARTIALLY_DISPATCHED

    raise InvalidStateError(f"Unknown order operation: {operation}")
