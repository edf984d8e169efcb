# production/urls.py

"""
PRODUCTION URLS

Mounted under /api/production/
"""

from django.urls import path

from production.views import (
    AllocateBatchesView,
    AllocationDispatchView,
    BatchCapacityView,
    BatchDispatchView,
    BatchListView,
    ProductionCompleteView,
    ProductionDeployView,
    ProductionDetailView,
    ProductionListCreateView,
    ProductionProceedView,
)

urlpatterns = [
    path("capacity/", BatchCapacityView.as_view(), name="batch-capacity"),
    # batches
    path("batches/", BatchListView.as_view(), name="batch-list"),
    path("batches/allocate/", AllocateBatchesView.as_view(), name="batch-allocate"),
    path(
        "batches/<uuid:batch_id>/dispatch/",
        BatchDispatchView.as_view(),
        name="batch-dispatch",
    ),
    path(
        "batches/<uuid:batch_id>/allocations/<int:allocation_index>/dispatch/",
        AllocationDispatchView.as_view(),
        name="allocation-dispatch",
    ),
    # productions
    path("productions/", ProductionListCreateView.as_view(), name="production-list"),
    path(
        "productions/<uuid:production_id>/",
        ProductionDetailView.as_view(),
        name="production-detail",
    ),
    path(
        "productions/<uuid:production_id>/proceed/",
        ProductionProceedView.as_view(),
        name="production-proceed",
    ),
    path(
        "productions/<uuid:production_id>/complete/",
        ProductionCompleteView.as_view(),
        name="production-complete",
    ),
    path(
        "productions/<uuid:production_id>/deploy/",
        ProductionDeployView.as_view(),
        name="production-deploy",
    ),
]
