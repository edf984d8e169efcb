# production/services/production_lifecycle.py

"""
PRODUCTION LIFECYCLE DOMAIN RULES

This module defines the ONLY allowed lifecycle transitions for Production
(batch and non-batch) entities.

DESIGN PRINCIPLES:
- No database writes
- No stock mutation
- No side effects
- Single source of truth
"""

from common.exceptions import InvalidStateError
from production.models import Production

# ============================================================
# STATE DEFINITIONS
# ============================================================

OP_PROCEED = "proceed"
OP_COMPLETE = "complete"
OP_DELETE = "delete"
OP_DISPATCH = "dispatch"
OP_DEPLOY = "deploy"

TERMINAL_STATES = {
    Production.STATUS_DEPLOYED,
    Production.STATUS_DELETED,
}

# operation -> (legal source statuses, target status)
ALLOWED_TRANSITIONS = {
    OP_PROCEED: (
        {Production.STATUS_PENDING},
        Production.STATUS_IN_PROCESS,
    ),
    OP_COMPLETE: (
        {Production.STATUS_IN_PROCESS},
        Production.STATUS_DONE,
    ),
    OP_DELETE: (
        {
            Production.STATUS_PENDING,
            Production.STATUS_IN_PROCESS,
            Production.STATUS_DONE,
        },
        Production.STATUS_DELETED,
    ),
    OP_DISPATCH: (
        {Production.STATUS_DONE},
        Production.STATUS_DEPLOYED,
    ),
    OP_DEPLOY: (
        {
            Production.STATUS_PENDING,
            Production.STATUS_IN_PROCESS,
            Production.STATUS_DONE,
        },
        Production.STATUS_DEPLOYED,
    ),
}

# operations that apply to one kind of record only
BATCH_ONLY = {OP_DISPATCH}
NON_BATCH_ONLY = {OP_DEPLOY}


# ============================================================
# DOMAIN RULES
# ============================================================


def can_apply(*, operation: str, from_status: str) -> bool:
    if from_status in TERMINAL_STATES:
        return False

    sources, _ = ALLOWED_TRANSITIONS.get(operation, (set(), None))
    return from_status in sources


def validate_operation(*, production: Production, operation: str) -> str:
    """
    Returns the target status, or raises InvalidStateError.
    """
    if operation in BATCH_ONLY and not production.is_batch:
        raise InvalidStateError(
            f"Production {production.id} is not a batch and cannot {operation}"
        )
    if operation in NON_BATCH_ONLY and production.is_batch:
        raise InvalidStateError(
            f"Batch {production.batch_number} cannot {operation}; dispatch its allocations"
        )

    if not can_apply(operation=operation, from_status=production.status):
        raise InvalidStateError(
            f"Production {production.batch_number or production.id} cannot "
            f"{operation} from '{production.status}'"
        )

    return ALLOWED_TRANSITIONS[operation][1]
