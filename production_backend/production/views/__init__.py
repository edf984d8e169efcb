from .batch import (
    AllocateBatchesView,
    AllocationDispatchView,
    BatchCapacityView,
    BatchDispatchView,
    BatchListView,
)
from .production import (
    ProductionCompleteView,
    ProductionDeployView,
    ProductionDetailView,
    ProductionListCreateView,
    ProductionProceedView,
)

__all__ = [
    "AllocateBatchesView",
    "AllocationDispatchView",
    "BatchCapacityView",
    "BatchDispatchView",
    "BatchListView",
    "ProductionCompleteView",
    "ProductionDeployView",
    "ProductionDetailView",
    "ProductionListCreateView",
    "ProductionProceedView",
]
