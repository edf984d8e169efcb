# production/services/dispatch_service.py

"""
======================================================
PATH: production/services/dispatch_service.py
======================================================
DISPATCH SPLITTER

Distributes completed output:
- dispatch_batch():       every open allocation of a done batch
- dispatch_allocation():  one allocation (0-based position in sequence order)
- deploy():               a non-batch production, split into a client part
                          and an overflow part when not all of it is sent

Every dispatched quantity becomes a deployed output record (Production row)
carrying its proportional share of the source's consumed materials, and is
credited to the linked order.

Shares always derive from the ORIGINAL source totals, never by chaining
subtractions.
"""

from __future__ import annotations

import logging

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from common.exceptions import (
    InconsistentStateError,
    InvalidQuantityError,
    InvalidStateError,
    NotFoundError,
)
from common.quantities import EPSILON, is_positive, quantities_equal, scale_materials, to_quantity
from orders.services.order_service import apply_fulfillment
from production.models import BatchAllocation, Production
from production.services import production_lifecycle as lifecycle
from production.services.batch_allocation import verify_allocation_sum
from production.services.production_service import lock_production

logger = logging.getLogger(__name__)


def overflow_destination() -> str:
    return getattr(settings, "OVERFLOW_DESTINATION", "Godown")


# ============================================================
# BATCH DISPATCH
# ============================================================

def _lock_done_batch(batch_id) -> Production:
    batch = lock_production(batch_id)
    lifecycle.validate_operation(production=batch, operation=lifecycle.OP_DISPATCH)

    if batch.materials_consumed is None:
        raise InconsistentStateError(
            f"Batch {batch.batch_number} is done but has no consumed materials"
        )
    verify_allocation_sum(batch)
    return batch


def _dispatch_one(batch: Production, allocation: BatchAllocation, now) -> Production:
    output = Production.objects.create(
        is_batch=False,
        product_type=batch.product_type,
        scheduled_date=batch.scheduled_date,
        quantity=allocation.quantity,
        unit=allocation.unit,
        status=Production.STATUS_DEPLOYED,
        materials_consumed=scale_materials(
            batch.materials_consumed,
            part=allocation.quantity,
            whole=batch.quantity,
        ),
        produced_at=batch.produced_at,
        deployed_at=now,
        client_name=allocation.client_name,
        from_order_id=allocation.order_id,
        order_number=allocation.display_order_code,
        original_production=batch,
        source_allocation=allocation,
    )

    allocation.dispatched = True
    allocation.dispatched_at = now
    allocation.save(update_fields=["dispatched", "dispatched_at"])

    apply_fulfillment(allocation.order_id, allocation.quantity)

    logger.info(
        "Allocation dispatched",
        extra={
            "batch_number": batch.batch_number,
            "display_order_code": allocation.display_order_code,
            "quantity": allocation.quantity,
        },
    )
    return output


def _mark_batch_deployed(batch: Production, now) -> None:
    batch.status = Production.STATUS_DEPLOYED
    batch.deployed_at = now
    batch.save(update_fields=["status", "deployed_at", "updated_at"])

    logger.info("Batch deployed", extra={"batch_number": batch.batch_number})


@transaction.atomic
def dispatch_batch(batch_id) -> list[Production]:
    """
    Dispatch every undispatched allocation; the batch becomes deployed.

    Returns the output records created.
    """
    batch = _lock_done_batch(batch_id)
    now = timezone.now()

    open_allocations = list(
        batch.allocations.select_for_update().filter(dispatched=False).order_by("sequence")
    )
    if not open_allocations:
        raise InvalidStateError(f"Batch {batch.batch_number} has nothing left to dispatch")

    outputs = [_dispatch_one(batch, allocation, now) for allocation in open_allocations]

    _mark_batch_deployed(batch, now)
    return outputs


@transaction.atomic
def dispatch_allocation(batch_id, allocation_index: int) -> Production:
    """
    Dispatch the allocation at 0-based position allocation_index.

    The batch becomes deployed once every allocation is dispatched.
    """
    batch = _lock_done_batch(batch_id)

    allocations = list(batch.allocations.select_for_update().order_by("sequence"))
    if allocation_index < 0 or allocation_index >= len(allocations):
        raise NotFoundError(
            f"Batch {batch.batch_number} has no allocation at index {allocation_index}"
        )

    allocation = allocations[allocation_index]
    if allocation.dispatched:
        raise InvalidStateError(
            f"Allocation {allocation.display_order_code} was already dispatched"
        )

    now = timezone.now()
    output = _dispatch_one(batch, allocation, now)

    if all(a.dispatched for a in allocations):
        _mark_batch_deployed(batch, now)

    return output


# ============================================================
# NON-BATCH DEPLOY (WITH OVERFLOW SPLIT)
# ============================================================

@transaction.atomic
def deploy(production_id, dispatch_quantity) -> dict:
    """
    Send dispatch_quantity of a non-batch production to its client; any
    remainder goes to the overflow destination.

    Returns {"source", "client_record", "overflow_record"} (overflow may be None).
    """
    production = lock_production(production_id)
    target = lifecycle.validate_operation(
        production=production, operation=lifecycle.OP_DEPLOY
    )

    try:
        qty = to_quantity(dispatch_quantity, field_name="dispatch_quantity")
    except ValueError as exc:
        raise InvalidQuantityError(str(exc)) from exc

    total = float(production.quantity)
    if not is_positive(qty) or qty > total + EPSILON:
        raise InvalidQuantityError(
            f"dispatch_quantity must be greater than zero and at most "
            f"{total:g} {production.unit}"
        )

    if quantities_equal(qty, total):
        qty = total
    remainder = total - qty
    split = is_positive(remainder)

    now = timezone.now()
    base_code = production.order_number

    client_record = Production.objects.create(
        is_batch=False,
        product_type=production.product_type,
        scheduled_date=production.scheduled_date,
        quantity=qty,
        unit=production.unit,
        status=Production.STATUS_DEPLOYED,
        materials_consumed=scale_materials(
            production.materials_consumed, part=qty, whole=total
        ),
        produced_at=production.produced_at,
        deployed_at=now,
        client_name=production.client_name,
        from_order_id=production.from_order_id,
        order_number=f"{base_code}S1" if (base_code and split) else base_code,
        original_production=production,
        from_split=split,
    )

    overflow_record = None
    if split:
        overflow_record = Production.objects.create(
            is_batch=False,
            product_type=production.product_type,
            scheduled_date=production.scheduled_date,
            quantity=remainder,
            unit=production.unit,
            status=Production.STATUS_DEPLOYED,
            materials_consumed=scale_materials(
                production.materials_consumed, part=remainder, whole=total
            ),
            produced_at=production.produced_at,
            deployed_at=now,
            client_name=overflow_destination(),
            from_order_id=production.from_order_id,
            order_number=f"{base_code}S2" if base_code else "",
            original_production=production,
            from_split=True,
        )

    production.status = target
    production.deployed_at = now
    production.split_into = (
        Production.SPLIT_CLIENT_OVERFLOW if split else Production.SPLIT_CLIENT_ONLY
    )
    production.save(update_fields=["status", "deployed_at", "split_into", "updated_at"])

    if production.from_order_id:
        apply_fulfillment(production.from_order_id, qty)

    logger.info(
        "Production deployed",
        extra={
            "production_id": str(production.id),
            "dispatched": qty,
            "overflow": remainder if split else 0.0,
            "split_into": production.split_into,
        },
    )
    return {
        "source": production,
        "client_record": client_record,
        "overflow_record": overflow_record,
    }
