from .batch import (
    AllocateBatchesSerializer,
    BatchAllocationSerializer,
    BatchSerializer,
    BatchCapacitySettingSerializer,
)
from .production import DeploySerializer, ProduceSerializer, ProductionSerializer

__all__ = [
    "AllocateBatchesSerializer",
    "BatchAllocationSerializer",
    "BatchSerializer",
    "BatchCapacitySettingSerializer",
    "DeploySerializer",
    "ProduceSerializer",
    "ProductionSerializer",
]
