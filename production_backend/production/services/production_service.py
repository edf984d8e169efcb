# production/services/production_service.py

"""
======================================================
PATH: production/services/production_service.py
======================================================
PRODUCTION LIFECYCLE MANAGER

Operations:
- produce(): create a non-batch production (manual or for one order);
  materials are deducted immediately, all-or-nothing.
- proceed(): pending -> in_process
- complete(): in_process -> done; deducts stock exactly once when the
  production has not consumed materials yet (batches).
- delete_production(): restores the materials it still holds (a batch
  keeps only its undispatched share), marks deleted and
  releases the orders that depended on it.

Rules:
- Every operation runs in ONE transaction with the production row locked.
- Transitions are validated centrally by production_lifecycle.
- Stock errors abort the operation with nothing written.
"""

from __future__ import annotations

import logging

from django.db import transaction
from django.db.models import Q, Sum
from django.utils import timezone

from common.exceptions import InvalidQuantityError, InvalidStateError, NotFoundError
from common.quantities import is_positive, quantities_equal, scale_materials, to_quantity
from inventory.services.recipes import compute_required_materials
from inventory.services.stock_ledger import deduct_materials, restore_materials
from orders.models import Order
from orders.services import order_lifecycle
from orders.services.order_service import lock_order, release_order, start_order
from production.models import BatchAllocation, Production
from production.services import production_lifecycle as lifecycle
from production.services.batch_allocation import (
    RELEASABLE_ORDER_STATUSES,
    STARTED_BATCH_STATUSES,
    acquire_key_lock,
    allocate_batches,
    remove_order_from_pending_batches,
)

logger = logging.getLogger(__name__)


# ============================================================
# READ / LOCK
# ============================================================

def get_production(production_id) -> Production:
    try:
        return Production.objects.get(id=production_id)
    except Production.DoesNotExist as exc:
        raise NotFoundError(f"Production not found: {production_id}") from exc


def lock_production(production_id) -> Production:
    """
    SELECT ... FOR UPDATE on one production. Must run inside a transaction.
    """
    try:
        return Production.objects.select_for_update().get(id=production_id)
    except Production.DoesNotExist as exc:
        raise NotFoundError(f"Production not found: {production_id}") from exc


# ============================================================
# PRODUCE
# ============================================================

def _prepare_order_for_production(order: Order) -> bool:
    """
    Detach an order from provisional batching before producing it directly.

    Returns True when provisional batches of the order's key were changed.
    """
    already = (
        Production.objects.filter(
            from_order=order,
            is_batch=False,
            original_production__isnull=True,
        )
        .exclude(status=Production.STATUS_DELETED)
        .exists()
    )
    if already:
        raise InvalidStateError(f"Order {order.order_number} has already been produced")

    in_started_batch = BatchAllocation.objects.filter(
        order=order,
        dispatched=False,
        batch__status__in=STARTED_BATCH_STATUSES,
    ).exists()
    if in_started_batch:
        raise InvalidStateError(
            f"Order {order.order_number} is assigned to a batch in process; "
            "use batch actions to proceed, complete or dispatch it"
        )

    order_lifecycle.validate_operation(order=order, operation=order_lifecycle.OP_START)

    touched = remove_order_from_pending_batches(order)

    if order.status == Order.STATUS_BATCHED or order.batch_id is not None:
        order.refresh_from_db()
        release_order(order)

    return touched > 0


@transaction.atomic
def produce(*, product_type: str, quantity, unit: str = "litres", order_id=None) -> Production:
    """
    Create a pending non-batch production and deduct its materials.

    With order_id the production is made for that order: the order leaves any
    provisional batch, becomes in_progress (a partly delivered order stays
    partially_dispatched) and carries its client and order number onto the
    production.
    """
    try:
        qty = to_quantity(quantity)
    except ValueError as exc:
        raise InvalidQuantityError(str(exc)) from exc
    if not is_positive(qty):
        raise InvalidQuantityError("Production quantity must be greater than zero")

    requirements = compute_required_materials(product_type, qty)

    order = None
    rebatch = False
    if order_id is not None:
        try:
            key = Order.objects.values("scheduled_date", "product_type").get(id=order_id)
        except Order.DoesNotExist as exc:
            raise NotFoundError(f"Order not found: {order_id}") from exc

        # key lock before the order lock, same order as allocate_batches
        acquire_key_lock(key["scheduled_date"], key["product_type"])
        order = lock_order(order_id)
        rebatch = _prepare_order_for_production(order)

    now = timezone.now()
    production = Production.objects.create(
        is_batch=False,
        product_type=product_type.strip(),
        scheduled_date=order.scheduled_date if order else None,
        quantity=qty,
        unit=unit or "litres",
        status=Production.STATUS_PENDING,
        produced_at=now,
        from_order=order,
        client_name=order.client_name if order else "",
        order_number=order.order_number if order else "",
    )

    deduct_materials(requirements, production=production)

    production.materials_consumed = requirements
    production.stock_deducted_at = now
    production.save(update_fields=["materials_consumed", "stock_deducted_at", "updated_at"])

    if order is not None:
        start_order(order)
        if rebatch:
            allocate_batches(order.scheduled_date, order.product_type)

    logger.info(
        "Production created",
        extra={
            "production_id": str(production.id),
            "product_type": production.product_type,
            "quantity": qty,
            "order_number": production.order_number or None,
        },
    )
    return production


# ============================================================
# LIFECYCLE
# ============================================================

@transaction.atomic
def proceed(production_id) -> Production:
    production = lock_production(production_id)
    target = lifecycle.validate_operation(
        production=production, operation=lifecycle.OP_PROCEED
    )

    production.status = target
    production.proceeded_at = timezone.now()
    production.save(update_fields=["status", "proceeded_at", "updated_at"])

    logger.info(
        "Production proceeded",
        extra={"production_id": str(production.id), "batch_number": production.batch_number},
    )
    return production


@transaction.atomic
def complete(production_id) -> Production:
    production = lock_production(production_id)
    target = lifecycle.validate_operation(
        production=production, operation=lifecycle.OP_COMPLETE
    )

    now = timezone.now()
    update_fields = ["status", "completed_at", "updated_at"]

    if not production.materials_consumed:
        requirements = compute_required_materials(
            production.product_type, production.quantity
        )
        deduct_materials(requirements, production=production)

        production.materials_consumed = requirements
        production.stock_deducted_at = now
        update_fields += ["materials_consumed", "stock_deducted_at"]

    production.status = target
    production.completed_at = now
    production.save(update_fields=update_fields)

    logger.info(
        "Production completed",
        extra={"production_id": str(production.id), "batch_number": production.batch_number},
    )
    return production


# ============================================================
# DELETE (REVERSAL)
# ============================================================

def _release_dependent_orders(production: Production) -> list[Order]:
    if production.is_batch:
        holder_ids = BatchAllocation.objects.filter(
            batch=production, dispatched=False
        ).values_list("order_id", flat=True)
        orders = (
            Order.objects.select_for_update()
            .filter(Q(batch_id=production.id) | Q(id__in=list(holder_ids)))
            .filter(status__in=RELEASABLE_ORDER_STATUSES)
            .order_by("created_at", "id")
        )
    elif production.from_order_id:
        orders = Order.objects.select_for_update().filter(
            id=production.from_order_id, status=Order.STATUS_IN_PROGRESS
        )
    else:
        return []

    return [release_order(order) for order in orders]


def _restorable_materials(production: Production) -> list[dict]:
    """
    Materials still held by a production.

    A batch keeps only the share of its undispatched allocations; dispatched
    shares left with their output records.
    """
    consumed = production.materials_consumed or []
    if not production.is_batch or not consumed:
        return consumed

    open_quantity = (
        production.allocations.filter(dispatched=False).aggregate(total=Sum("quantity"))["total"]
        or 0.0
    )
    if quantities_equal(open_quantity, production.quantity):
        return consumed
    if not is_positive(open_quantity):
        return []

    return scale_materials(consumed, part=open_quantity, whole=production.quantity)


@transaction.atomic
def delete_production(production_id) -> Production:
    production = lock_production(production_id)
    target = lifecycle.validate_operation(
        production=production, operation=lifecycle.OP_DELETE
    )

    restore_materials(
        _restorable_materials(production),
        production=production,
        note="production deleted",
    )

    production.status = target
    production.deleted_at = timezone.now()
    production.save(update_fields=["status", "deleted_at", "updated_at"])

    released = _release_dependent_orders(production)

    logger.info(
        "Production deleted",
        extra={
            "production_id": str(production.id),
            "batch_number": production.batch_number,
            "released_orders": [o.order_number for o in released],
        },
    )
    return production
