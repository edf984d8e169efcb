# production/views/batch.py

"""
======================================================
PATH: production/views/batch.py
======================================================
BATCH API

- GET  /api/production/capacity/                                   capacity per product type
- PUT  /api/production/capacity/                                   set capacity
- GET  /api/production/batches/                                    batches with allocations
- POST /api/production/batches/allocate/                           (re)build provisional batches
- POST /api/production/batches/<id>/dispatch/                      dispatch whole batch
- POST /api/production/batches/<id>/allocations/<index>/dispatch/  dispatch one allocation
"""

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.generics import GenericAPIView, ListAPIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from common.api import error_response_for
from common.exceptions import EngineError
from production.models import BatchCapacitySetting, Production
from production.serializers import (
    AllocateBatchesSerializer,
    BatchCapacitySettingSerializer,
    BatchSerializer,
    ProductionSerializer,
)
from production.services.batch_allocation import allocate_batches
from production.services.capacity import default_capacity, set_batch_capacity
from production.services.dispatch_service import dispatch_allocation, dispatch_batch


# ======================================================
# CAPACITY SETTINGS
# ======================================================

class BatchCapacityView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = BatchCapacitySettingSerializer

    @extend_schema(tags=["production"], responses=BatchCapacitySettingSerializer(many=True))
    def get(self, request):
        qs = BatchCapacitySetting.objects.all().order_by("product_type")
        return Response(
            {
                "default_capacity": default_capacity(),
                "settings": BatchCapacitySettingSerializer(qs, many=True).data,
            },
            status=status.HTTP_200_OK,
        )

    @extend_schema(
        tags=["production"],
        request=BatchCapacitySettingSerializer,
        responses={200: BatchCapacitySettingSerializer},
    )
    def put(self, request):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            setting = set_batch_capacity(
                product_type=s.validated_data["product_type"],
                capacity=s.validated_data["capacity"],
            )
        except EngineError as exc:
            return error_response_for(exc)

        return Response(
            BatchCapacitySettingSerializer(setting).data, status=status.HTTP_200_OK
        )


# ======================================================
# BATCHES
# ======================================================

class BatchListView(ListAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = BatchSerializer
    queryset = (
        Production.objects.filter(is_batch=True)
        .prefetch_related("allocations")
        .order_by("scheduled_date", "product_type", "batch_number")
    )
    filterset_fields = ["scheduled_date", "product_type", "status"]

    @extend_schema(tags=["production"])
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)


class AllocateBatchesView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = AllocateBatchesSerializer

    @extend_schema(
        tags=["production"],
        request=AllocateBatchesSerializer,
        responses={200: BatchSerializer(many=True)},
    )
    def post(self, request):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            batches = allocate_batches(
                s.validated_data["scheduled_date"],
                s.validated_data["product_type"].strip(),
            )
        except EngineError as exc:
            return error_response_for(exc)

        return Response(BatchSerializer(batches, many=True).data, status=status.HTTP_200_OK)


class BatchDispatchView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = ProductionSerializer

    @extend_schema(tags=["production"], request=None, responses={200: ProductionSerializer(many=True)})
    def post(self, request, batch_id):
        try:
            outputs = dispatch_batch(batch_id)
        except EngineError as exc:
            return error_response_for(exc)

        batch = Production.objects.prefetch_related("allocations").get(id=batch_id)
        return Response(
            {
                "batch": BatchSerializer(batch).data,
                "outputs": ProductionSerializer(outputs, many=True).data,
            },
            status=status.HTTP_200_OK,
        )


class AllocationDispatchView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = ProductionSerializer

    @extend_schema(tags=["production"], request=None, responses={200: ProductionSerializer})
    def post(self, request, batch_id, allocation_index):
        try:
            output = dispatch_allocation(batch_id, allocation_index)
        except EngineError as exc:
            return error_response_for(exc)

        batch = Production.objects.prefetch_related("allocations").get(id=batch_id)
        return Response(
            {
                "batch": BatchSerializer(batch).data,
                "output": ProductionSerializer(output).data,
            },
            status=status.HTTP_200_OK,
        )
