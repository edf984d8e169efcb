# production/services/batch_allocation.py

"""
======================================================
PATH: production/services/batch_allocation.py
======================================================
BATCH ALLOCATION ENGINE

Packs the open orders of one (scheduled_date, product_type) key into
capacity-bounded batches, first come first served.

Rebuild strategy:
- Provisional (pending) batches are deconstructed and rebuilt from scratch
  on every run, so the run is idempotent and safe to repeat.
- Started batches (in_process / done / deployed) are never touched; what they
  already carry for an order is subtracted from that order's remaining need.

Concurrency:
- One AllocationLock row per key, taken with SELECT ... FOR UPDATE, serializes
  runs for the same key. The whole run is one transaction.
"""

from __future__ import annotations

import logging
from collections import defaultdict

from django.db import transaction
from django.db.models import Sum
from django.utils import timezone

from common.exceptions import InconsistentStateError
from common.quantities import EPSILON, quantities_equal
from orders.models import Order
from orders.services.order_service import mark_batched, release_order
from production.models import AllocationLock, BatchAllocation, Production
from production.services.capacity import get_batch_capacity

logger = logging.getLogger(__name__)

ELIGIBLE_ORDER_STATUSES = (
    Order.STATUS_PENDING,
    Order.STATUS_IN_PROGRESS,
    Order.STATUS_PARTIALLY_DISPATCHED,
)

RELEASABLE_ORDER_STATUSES = (
    Order.STATUS_PENDING,
    Order.STATUS_IN_PROGRESS,
    Order.STATUS_BATCHED,
    Order.STATUS_PARTIALLY_DISPATCHED,
)

STARTED_BATCH_STATUSES = (
    Production.STATUS_IN_PROCESS,
    Production.STATUS_DONE,
)

OPEN_PRODUCTION_STATUSES = (
    Production.STATUS_PENDING,
    Production.STATUS_IN_PROCESS,
    Production.STATUS_DONE,
)


# ============================================================
# HELPERS
# ============================================================

def acquire_key_lock(scheduled_date, product_type) -> AllocationLock:
    AllocationLock.objects.get_or_create(
        scheduled_date=scheduled_date, product_type=product_type
    )
    return AllocationLock.objects.select_for_update().get(
        scheduled_date=scheduled_date, product_type=product_type
    )


def _batches_for_key(scheduled_date, product_type):
    return Production.objects.filter(
        is_batch=True,
        scheduled_date=scheduled_date,
        product_type=product_type,
    )


def _batch_index(batch_number: str | None) -> int:
    try:
        return int((batch_number or "").rsplit("-", 1)[-1])
    except ValueError:
        return 0


def build_batch_number(scheduled_date, index: int) -> str:
    return f"BT-{scheduled_date:%Y%m%d}-{index:05d}"


def verify_allocation_sum(batch: Production) -> None:
    """
    sum(allocation quantities) must equal the batch quantity.
    """
    total = batch.allocations.aggregate(total=Sum("quantity"))["total"] or 0.0
    if not quantities_equal(total, batch.quantity):
        raise InconsistentStateError(
            f"Batch {batch.batch_number}: allocations sum to {total:g}, "
            f"batch quantity is {batch.quantity:g}"
        )


def committed_quantities(order_ids) -> dict:
    """
    Quantity already on its way to each order outside provisional batches:
    undispatched allocations of started batches plus open non-batch
    productions made from the order.
    """
    committed = defaultdict(float)

    allocated = (
        BatchAllocation.objects.filter(
            order_id__in=order_ids,
            dispatched=False,
            batch__status__in=STARTED_BATCH_STATUSES,
        )
        .values("order_id")
        .annotate(total=Sum("quantity"))
    )
    for row in allocated:
        committed[row["order_id"]] += float(row["total"] or 0.0)

    produced = (
        Production.objects.filter(
            is_batch=False,
            from_order_id__in=order_ids,
            status__in=OPEN_PRODUCTION_STATUSES,
        )
        .values("from_order_id")
        .annotate(total=Sum("quantity"))
    )
    for row in produced:
        committed[row["from_order_id"]] += float(row["total"] or 0.0)

    return committed


def _resequence(batch: Production) -> None:
    allocations = list(batch.allocations.order_by("sequence"))
    for seq, allocation in enumerate(allocations, start=1):
        code = BatchAllocation.build_display_code(allocation.order_number, seq)
        if allocation.sequence != seq or allocation.display_order_code != code:
            allocation.sequence = seq
            allocation.display_order_code = code
            allocation.save(update_fields=["sequence", "display_order_code"])

    batch.quantity = sum(float(a.quantity) for a in allocations)
    batch.save(update_fields=["quantity", "updated_at"])


# ============================================================
# BATCH CONSTRUCTION
# ============================================================

class _BatchBuilder:
    """
    Accumulates allocations for the batch currently being filled.
    """

    def __init__(self, *, scheduled_date, product_type, capacity, start_index, now):
        self.scheduled_date = scheduled_date
        self.product_type = product_type
        self.capacity = capacity
        self.index = start_index
        self.now = now
        self.lines = []
        self.total = 0.0
        self.created = []

    @property
    def available(self) -> float:
        return self.capacity - self.total

    @property
    def is_full(self) -> bool:
        return self.total >= self.capacity - EPSILON

    def add(self, order: Order, quantity: float) -> None:
        self.lines.append((order, quantity))
        self.total += quantity

    def flush(self) -> Production | None:
        if not self.lines:
            return None

        self.index += 1
        batch = Production.objects.create(
            is_batch=True,
            batch_number=build_batch_number(self.scheduled_date, self.index),
            product_type=self.product_type,
            scheduled_date=self.scheduled_date,
            quantity=self.total,
            unit=self.lines[0][0].unit or "litres",
            status=Production.STATUS_PENDING,
            produced_at=self.now,
        )

        BatchAllocation.objects.bulk_create(
            [
                BatchAllocation(
                    batch=batch,
                    order=order,
                    client_name=order.client_name,
                    order_number=order.order_number,
                    quantity=quantity,
                    unit=order.unit or "litres",
                    sequence=seq,
                    display_order_code=BatchAllocation.build_display_code(
                        order.order_number, seq
                    ),
                )
                for seq, (order, quantity) in enumerate(self.lines, start=1)
            ]
        )

        verify_allocation_sum(batch)

        for order, _ in self.lines:
            mark_batched(order, batch_id=batch.id, at=self.now)

        logger.info(
            "Batch created",
            extra={
                "batch_number": batch.batch_number,
                "product_type": self.product_type,
                "quantity": self.total,
                "allocations": len(self.lines),
            },
        )

        self.created.append(batch)
        self.lines = []
        self.total = 0.0
        return batch


# ============================================================
# PUBLIC API
# ============================================================

@transaction.atomic
def allocate_batches(scheduled_date, product_type: str) -> list[Production]:
    """
    Rebuild the provisional batches of one key from its open orders.

    Returns the batches created by this run (empty when nothing is open).
    """
    lock = acquire_key_lock(scheduled_date, product_type)
    now = timezone.now()

    capacity = get_batch_capacity(product_type)

    # 1) Deconstruct provisional batches.
    provisional_ids = list(
        _batches_for_key(scheduled_date, product_type)
        .filter(status=Production.STATUS_PENDING)
        .values_list("id", flat=True)
    )

    if provisional_ids:
        # Orders pointing at a provisional batch, or holding a share in one
        # while pointing at a later started batch.
        affected_ids = set(
            BatchAllocation.objects.filter(batch_id__in=provisional_ids).values_list(
                "order_id", flat=True
            )
        )
        affected_ids.update(
            Order.objects.filter(batch_id__in=provisional_ids).values_list("id", flat=True)
        )

        affected = (
            Order.objects.select_for_update()
            .filter(id__in=affected_ids, status__in=RELEASABLE_ORDER_STATUSES)
            .order_by("created_at", "id")
        )
        for order in affected:
            release_order(order)

        Production.objects.filter(id__in=provisional_ids).delete()

    # 2) Orphan repair: batched orders must point at a live batch of this key.
    live_ids = list(
        _batches_for_key(scheduled_date, product_type)
        .exclude(status=Production.STATUS_DELETED)
        .values_list("id", flat=True)
    )
    orphans = (
        Order.objects.select_for_update()
        .filter(
            scheduled_date=scheduled_date,
            product_type=product_type,
            status=Order.STATUS_BATCHED,
        )
        .exclude(batch_id__in=live_ids)
    )
    for order in orphans:
        logger.warning(
            "Releasing orphaned batched order",
            extra={"order_number": order.order_number, "batch_id": str(order.batch_id)},
        )
        release_order(order)

    # 3) Eligible orders, FIFO.
    orders = list(
        Order.objects.select_for_update()
        .filter(
            scheduled_date=scheduled_date,
            product_type=product_type,
            status__in=ELIGIBLE_ORDER_STATUSES,
        )
        .order_by("created_at", "id")
    )

    lock.last_run_at = now
    lock.save(update_fields=["last_run_at"])

    if not orders:
        return []

    # 4) Numbering continues after every batch row still present for the key.
    remaining_numbers = list(
        _batches_for_key(scheduled_date, product_type).values_list(
            "batch_number", flat=True
        )
    )
    start_index = max(
        [len(remaining_numbers)] + [_batch_index(n) for n in remaining_numbers]
    )

    builder = _BatchBuilder(
        scheduled_date=scheduled_date,
        product_type=product_type,
        capacity=capacity,
        start_index=start_index,
        now=now,
    )

    committed = committed_quantities([o.id for o in orders])

    # 5) Greedy packing.
    for order in orders:
        remaining = (
            float(order.quantity)
            - float(order.fulfilled_quantity)
            - committed.get(order.id, 0.0)
        )
        if remaining <= EPSILON:
            continue

        while remaining > EPSILON:
            if builder.available <= EPSILON:
                builder.flush()
                continue

            take = min(remaining, builder.available)
            builder.add(order, take)
            remaining -= take

            if builder.is_full:
                builder.flush()

    # 6) Trailing partial batch.
    builder.flush()

    logger.info(
        "Allocation run finished",
        extra={
            "scheduled_date": str(scheduled_date),
            "product_type": product_type,
            "capacity": capacity,
            "batches": [b.batch_number for b in builder.created],
        },
    )
    return builder.created


@transaction.atomic
def remove_order_from_pending_batches(order: Order) -> int:
    """
    Take an order out of the provisional batches of its key.

    Emptied batches are deleted; the rest are re-sequenced (dense C1..Cn codes)
    and their totals recomputed. Returns the number of batches touched.
    """
    batch_ids = set(
        BatchAllocation.objects.filter(
            order=order,
            batch__is_batch=True,
            batch__status=Production.STATUS_PENDING,
            batch__scheduled_date=order.scheduled_date,
            batch__product_type=order.product_type,
        ).values_list("batch_id", flat=True)
    )
    if not batch_ids:
        return 0

    batches = Production.objects.select_for_update().filter(id__in=batch_ids).order_by("id")

    for batch in batches:
        batch.allocations.filter(order=order).delete()

        if not batch.allocations.exists():
            logger.info(
                "Deleting emptied provisional batch",
                extra={"batch_number": batch.batch_number},
            )
            batch.delete()
            continue

        _resequence(batch)
        verify_allocation_sum(batch)

    return len(batch_ids)
