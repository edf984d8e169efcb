# orders/services/order_service.py

"""
======================================================
PATH: orders/services/order_service.py
======================================================
ORDER STORE SERVICE

Purpose:
- Create orders with generated order numbers.
- Apply the status operations defined in order_lifecycle
  (batch / start / release / fulfill).

Rules:
- Callers that mutate an order hold its row lock (lock_order) inside their
  own transaction.
- fulfilled_quantity never decreases and is clamped at quantity.
"""

from __future__ import annotations

import logging
import re

from django.conf import settings
from django.db import transaction
from django.utils import timezone
from django.utils.dateparse import parse_date

from common.exceptions import InvalidQuantityError, NotFoundError
from common.quantities import is_positive, to_quantity
from orders.models import Order
from orders.services import order_lifecycle as lifecycle

logger = logging.getLogger(__name__)


# ============================================================
# ORDER NUMBERS
# ============================================================

def location_code(client_location: str | None) -> str:
    """First three letters of the location (letters only, uppercased) or UNK."""
    letters = "".join(re.findall(r"[A-Za-z]+", client_location or ""))
    return letters[:3].upper() or "UNK"


def generate_order_number(*, client_location, scheduled_date) -> str:
    """
    PREFIX-LOC-DDMMYYYY-NNNNN, serial per location and scheduled date.
    """
    prefix = getattr(settings, "ORDER_NUMBER_PREFIX", "AKO")
    stem = f"{prefix}-{location_code(client_location)}-{scheduled_date:%d%m%Y}-"

    serial = Order.objects.filter(order_number__startswith=stem).count() + 1
    candidate = f"{stem}{serial:05d}"

    # Numbers are never reused, so skip forward past any collision.
    while Order.objects.filter(order_number=candidate).exists():
        serial += 1
        candidate = f"{stem}{serial:05d}"

    return candidate


# ============================================================
# CREATE / READ
# ============================================================

@transaction.atomic
def create_order(
    *,
    client_name: str,
    product_type: str,
    quantity,
    scheduled_date,
    unit: str = "litres",
    client_location: str = "",
) -> Order:
    try:
        qty = to_quantity(quantity)
    except ValueError as exc:
        raise InvalidQuantityError(str(exc)) from exc
    if not is_positive(qty):
        raise InvalidQuantityError("Order quantity must be greater than zero")

    if isinstance(scheduled_date, str):
        scheduled_date = parse_date(scheduled_date)
    if scheduled_date is None:
        raise InvalidQuantityError("scheduled_date must be a valid date")

    order = Order.objects.create(
        order_number=generate_order_number(
            client_location=client_location,
            scheduled_date=scheduled_date,
        ),
        client_name=client_name.strip(),
        client_location=(client_location or "").strip(),
        product_type=product_type.strip(),
        quantity=qty,
        unit=unit or "litres",
        scheduled_date=scheduled_date,
        status=Order.STATUS_PENDING,
        fulfilled_quantity=0.0,
    )

    logger.info(
        "Order created",
        extra={
            "order_number": order.order_number,
            "product_type": order.product_type,
            "quantity": qty,
            "scheduled_date": str(scheduled_date),
        },
    )
    return order


def get_order(order_id) -> Order:
    try:
        return Order.objects.get(id=order_id)
    except Order.DoesNotExist as exc:
        raise NotFoundError(f"Order not found: {order_id}") from exc


def lock_order(order_id) -> Order:
    """
    SELECT ... FOR UPDATE on one order. Must run inside a transaction.
    """
    try:
        return Order.objects.select_for_update().get(id=order_id)
    except Order.DoesNotExist as exc:
        raise NotFoundError(f"Order not found: {order_id}") from exc


# ============================================================
# STATUS OPERATIONS
# ============================================================

def mark_batched(order: Order, *, batch_id, at=None) -> Order:
    lifecycle.validate_operation(order=order, operation=lifecycle.OP_BATCH)

    order.status = lifecycle.target_status(order=order, operation=lifecycle.OP_BATCH)
    order.batch_id = batch_id
    order.batched_at = at or timezone.now()
    order.save(update_fields=["status", "batch_id", "batched_at", "updated_at"])
    return order


def start_order(order: Order) -> Order:
    lifecycle.validate_operation(order=order, operation=lifecycle.OP_START)

    order.status = lifecycle.target_status(order=order, operation=lifecycle.OP_START)
    order.save(update_fields=["status", "updated_at"])
    return order


def release_order(order: Order) -> Order:
    """
    Detach an order from its batch: pending when nothing was delivered yet,
    partially_dispatched otherwise.
    """
    lifecycle.validate_operation(order=order, operation=lifecycle.OP_RELEASE)

    order.status = lifecycle.target_status(order=order, operation=lifecycle.OP_RELEASE)
    order.batch_id = None
    order.batched_at = None
    order.save(update_fields=["status", "batch_id", "batched_at", "updated_at"])

    logger.info(
        "Order released",
        extra={"order_number": order.order_number, "status": order.status},
    )
    return order


@transaction.atomic
def apply_fulfillment(order_id, quantity) -> Order:
    """
    Record delivered quantity against an order (row-locked).

    Over-delivery is clamped at the ordered quantity.
    """
    try:
        qty = to_quantity(quantity)
    except ValueError as exc:
        raise InvalidQuantityError(str(exc)) from exc
    if not is_positive(qty):
        raise InvalidQuantityError("Fulfilled quantity must be greater than zero")

    order = lock_order(order_id)
    lifecycle.validate_operation(order=order, operation=lifecycle.OP_FULFILL)

    fulfilled = min(float(order.quantity), float(order.fulfilled_quantity) + qty)
    status = lifecycle.target_status(
        order=order,
        operation=lifecycle.OP_FULFILL,
        fulfilled_quantity=fulfilled,
    )

    if status == Order.STATUS_COMPLETED:
        # snap to the exact ordered quantity
        fulfilled = float(order.quantity)
        order.completed_at = timezone.now()

    order.fulfilled_quantity = fulfilled
    order.status = status
    order.save(
        update_fields=["fulfilled_quantity", "status", "completed_at", "updated_at"]
    )

    logger.info(
        "Order fulfilled",
        extra={
            "order_number": order.order_number,
            "delivered": qty,
            "fulfilled_quantity": fulfilled,
            "status": status,
        },
    )
    return order
