# common/exceptions.py

"""
ENGINE ERRORS

Centralized domain errors shared by the inventory, orders and production
services. Every service failure a caller can act on is one of these.

HTTP mapping lives in common.api.error_response_for().
"""

from __future__ import annotations


class EngineError(Exception):
    """Base exception for all batching / fulfillment engine failures."""

    code = "ENGINE_ERROR"


class NotFoundError(EngineError):
    """Raised when a referenced order, production, batch or material does not exist."""

    code = "NOT_FOUND"


class InvalidStateError(EngineError):
    """Raised when a requested transition is not legal from the current status."""

    code = "INVALID_STATE"


class InvalidQuantityError(EngineError):
    """Raised on non-positive or over-limit dispatch / allocation amounts."""

    code = "INVALID_QUANTITY"


class InconsistentStateError(EngineError):
    """
    Raised when an invariant is found violated (e.g. allocation sum mismatch).

    Never corrected silently.
    """

    code = "INCONSISTENT_STATE"


class InsufficientStockError(EngineError):
    """
    Raised when one or more materials cannot cover a deduction.

    shortfalls maps material name -> missing quantity.
    """

    code = "INSUFFICIENT_STOCK"

    def __init__(self, shortfalls: dict[str, float]):
        self.shortfalls = dict(shortfalls)
        detail = ", ".join(
            f"{name} (short by {missing:g})" for name, missing in self.shortfalls.items()
        )
        super().__init__(f"Insufficient stock: {detail}")
