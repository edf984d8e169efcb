# inventory/services/stock_ledger.py

"""
======================================================
PATH: inventory/services/stock_ledger.py
======================================================
STOCK LEDGER (RAW MATERIALS)

Purpose:
- Receive stock (upsert-on-missing + increment).
- Set an absolute stock level (audited adjustment).
- Deduct the materials of a production ALL-OR-NOTHING.
- Restore the materials of a deleted production.

Rules:
- Material rows are locked with SELECT ... FOR UPDATE in name order, and the
  sufficiency check runs under the same lock as the mutation.
- Every requirement is checked before ANY row is written: one short material
  aborts the whole deduction with nothing changed.
- Stock never goes negative.
- Every mutation appends a MaterialMovement.
"""

from __future__ import annotations

import logging
from collections import OrderedDict

from django.db import transaction

from common.exceptions import (
    InsufficientStockError,
    InvalidQuantityError,
    NotFoundError,
)
from common.quantities import EPSILON, to_quantity
from inventory.models import MaterialMovement, RawMaterial

logger = logging.getLogger(__name__)


# ============================================================
# HELPERS
# ============================================================

def _normalize_requirements(requirements) -> "OrderedDict[str, float]":
    """
    Aggregate [{"material": ..., "required_quantity": ...}, ...] by material.
    """
    totals: "OrderedDict[str, float]" = OrderedDict()

    for line in requirements or []:
        name = (line.get("material") or "").strip()
        if not name:
            raise InvalidQuantityError("Requirement is missing a material name")

        try:
            qty = to_quantity(line.get("required_quantity"), field_name="required_quantity")
        except ValueError as exc:
            raise InvalidQuantityError(str(exc)) from exc

        if qty < 0:
            raise InvalidQuantityError(
                f"required_quantity for {name} cannot be negative"
            )

        totals[name] = totals.get(name, 0.0) + qty

    return totals


def _lock_materials(names) -> dict[str, RawMaterial]:
    rows = (
        RawMaterial.objects.select_for_update()
        .filter(name__in=list(names))
        .order_by("name")
    )
    return {m.name: m for m in rows}


def _record(material, *, movement_type, reason, quantity, production=None, note=""):
    return MaterialMovement.objects.create(
        material=material,
        movement_type=movement_type,
        reason=reason,
        quantity=quantity,
        balance_after=material.total_quantity,
        production=production,
        note=note,
    )


# ============================================================
# INTAKE / ADJUSTMENT
# ============================================================

@transaction.atomic
def register_material(*, name: str, unit: str = "kg") -> RawMaterial:
    """
    Idempotent: returns the existing material when the name is taken.
    """
    material, created = RawMaterial.objects.get_or_create(
        name=(name or "").strip(),
        defaults={"unit": unit or "kg", "total_quantity": 0.0},
    )
    if created:
        logger.info("Registered raw material", extra={"material": material.name})
    return material


@transaction.atomic
def receive_material(*, name: str, quantity, note: str = "") -> RawMaterial:
    """
    Add stock to a material, creating the material when it does not exist yet.
    """
    name = (name or "").strip()
    if not name:
        raise InvalidQuantityError("Material name is required")

    try:
        qty = to_quantity(quantity)
    except ValueError as exc:
        raise InvalidQuantityError(str(exc)) from exc
    if qty <= 0:
        raise InvalidQuantityError("Received quantity must be greater than zero")

    RawMaterial.objects.get_or_create(name=name, defaults={"total_quantity": 0.0})
    material = RawMaterial.objects.select_for_update().get(name=name)

    material.total_quantity = float(material.total_quantity) + qty
    material.save(update_fields=["total_quantity", "updated_at"])

    _record(
        material,
        movement_type=MaterialMovement.MovementType.IN,
        reason=MaterialMovement.Reason.RECEIPT,
        quantity=qty,
        note=note,
    )

    logger.info(
        "Received raw material",
        extra={"material": name, "quantity": qty, "balance": material.total_quantity},
    )
    return material


@transaction.atomic
def set_material_quantity(*, name: str, new_quantity, note: str = "") -> RawMaterial:
    """
    Overwrite the available quantity (stock count correction).
    """
    try:
        target = to_quantity(new_quantity, field_name="new_quantity")
    except ValueError as exc:
        raise InvalidQuantityError(str(exc)) from exc
    if target < 0:
        raise InvalidQuantityError("new_quantity cannot be negative")

    try:
        material = RawMaterial.objects.select_for_update().get(name=(name or "").strip())
    except RawMaterial.DoesNotExist as exc:
        raise NotFoundError(f"Raw material not found: {name}") from exc

    delta = target - float(material.total_quantity)
    if abs(delta) <= EPSILON:
        return material

    material.total_quantity = target
    material.save(update_fields=["total_quantity", "updated_at"])

    _record(
        material,
        movement_type=(
            MaterialMovement.MovementType.IN if delta > 0 else MaterialMovement.MovementType.OUT
        ),
        reason=MaterialMovement.Reason.ADJUSTMENT,
        quantity=abs(delta),
        note=note,
    )

    logger.info(
        "Adjusted raw material",
        extra={"material": material.name, "delta": delta, "balance": target},
    )
    return material


# ============================================================
# PRODUCTION DEDUCTION / REVERSAL
# ============================================================

@transaction.atomic
def deduct_materials(requirements, *, production, note: str = "") -> list[MaterialMovement]:
    """
    Deduct every requirement or none of them.

    Raises InsufficientStockError naming each short material and its shortfall.
    """
    needed = _normalize_requirements(requirements)
    needed = OrderedDict((k, v) for k, v in needed.items() if v > 0)
    if not needed:
        return []

    locked = _lock_materials(needed.keys())

    shortfalls = {}
    for name, qty in needed.items():
        material = locked.get(name)
        available = float(material.total_quantity) if material else 0.0
        if available < qty - EPSILON:
            shortfalls[name] = qty - available

    if shortfalls:
        logger.warning(
            "Stock deduction refused",
            extra={"production_id": str(getattr(production, "id", "")), "shortfalls": shortfalls},
        )
        raise InsufficientStockError(shortfalls)

    movements = []
    for name in sorted(needed):
        material = locked[name]
        remaining = float(material.total_quantity) - needed[name]
        # absorb float drift inside the tolerance
        material.total_quantity = remaining if remaining > 0 else 0.0
        material.save(update_fields=["total_quantity", "updated_at"])

        movements.append(
            _record(
                material,
                movement_type=MaterialMovement.MovementType.OUT,
                reason=MaterialMovement.Reason.PRODUCTION,
                quantity=needed[name],
                production=production,
                note=note,
            )
        )

    logger.info(
        "Deducted materials for production",
        extra={"production_id": str(getattr(production, "id", "")), "materials": dict(needed)},
    )
    return movements


@transaction.atomic
def restore_materials(requirements, *, production, note: str = "") -> list[MaterialMovement]:
    """
    Add back previously deducted quantities (upsert-on-missing).
    """
    returned = _normalize_requirements(requirements)
    returned = OrderedDict((k, v) for k, v in returned.items() if v > 0)
    if not returned:
        return []

    for name in returned:
        RawMaterial.objects.get_or_create(name=name, defaults={"total_quantity": 0.0})

    locked = _lock_materials(returned.keys())

    movements = []
    for name in sorted(returned):
        material = locked[name]
        material.total_quantity = float(material.total_quantity) + returned[name]
        material.save(update_fields=["total_quantity", "updated_at"])

        movements.append(
            _record(
                material,
                movement_type=MaterialMovement.MovementType.IN,
                reason=MaterialMovement.Reason.REVERSAL,
                quantity=returned[name],
                production=production,
                note=note,
            )
        )

    logger.info(
        "Restored materials from production",
        extra={"production_id": str(getattr(production, "id", "")), "materials": dict(returned)},
    )
    return movements
