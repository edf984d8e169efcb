# common/quantities.py

"""
QUANTITY ARITHMETIC

Quantities (litres, kilograms, ...) are real numbers. Repeated proportional
division drifts, so every equality / completion check goes through an
absolute tolerance instead of ==.

Rules:
- Shares are always derived from the ORIGINAL total and ratio, never by
  chaining subtractions.
"""

from __future__ import annotations

EPSILON = 1e-9


def to_quantity(value, *, field_name: str = "quantity") -> float:
    if value is None or value == "":
        raise ValueError(f"{field_name} is required")
    if isinstance(value, bool):
        raise ValueError(f"{field_name} must be a number")
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{field_name} must be a number") from exc


def is_positive(value: float) -> bool:
    return value > EPSILON


def quantities_equal(a: float, b: float) -> bool:
    return abs(float(a) - float(b)) <= EPSILON


def reaches(value: float, target: float) -> bool:
    """True when value has reached target (within tolerance)."""
    return float(value) >= float(target) - EPSILON


def proportional_share(amount: float, part: float, whole: float) -> float:
    """amount * part / whole, computed from the original totals."""
    if whole <= 0:
        raise ValueError("whole must be greater than zero")
    return float(amount) * float(part) / float(whole)


def scale_materials(materials, *, part: float, whole: float) -> list[dict]:
    """
    Scale a materials-consumed list to `part` of a production of size `whole`.
    """
    return [
        {
            "material": m["material"],
            "required_quantity": proportional_share(m["required_quantity"], part, whole),
        }
        for m in (materials or [])
    ]
