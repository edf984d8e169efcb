# common/api.py

"""
API ERROR NORMALIZATION

One canonical error body for every engine failure:
    {"error": {"code": "...", "message": "...", ...}}
"""

from __future__ import annotations

from rest_framework import status
from rest_framework.response import Response

from common.exceptions import (
    EngineError,
    InconsistentStateError,
    InsufficientStockError,
    InvalidQuantityError,
    InvalidStateError,
    NotFoundError,
)

ERROR_STATUS = {
    NotFoundError: status.HTTP_404_NOT_FOUND,
    InvalidStateError: status.HTTP_409_CONFLICT,
    InvalidQuantityError: status.HTTP_400_BAD_REQUEST,
    InsufficientStockError: status.HTTP_400_BAD_REQUEST,
    InconsistentStateError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def error_response(*, code: str, message: str, http_status: int, **extra):
    """
    Canonical API error response.
    """
    body = {"code": code, "message": message}
    body.update(extra)
    return Response({"error": body}, status=http_status)


def error_response_for(exc: EngineError):
    http_status = status.HTTP_400_BAD_REQUEST
    for exc_type, mapped in ERROR_STATUS.items():
        if isinstance(exc, exc_type):
            http_status = mapped
            break

    extra = {}
    if isinstance(exc, InsufficientStockError):
        extra["shortfalls"] = exc.shortfalls

    return error_response(
        code=exc.code,
        message=str(exc),
        http_status=http_status,
        **extra,
    )
