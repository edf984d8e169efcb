from .allocation import BatchAllocation
from .production import Production
from .settings import AllocationLock, BatchCapacitySetting

__all__ = [
    "AllocationLock",
    "BatchAllocation",
    "BatchCapacitySetting",
    "Production",
]
