# production/views/production.py

"""
======================================================
PATH: production/views/production.py
======================================================
PRODUCTION API

- GET    /api/production/productions/               list non-batch productions
- POST   /api/production/productions/               produce (manual or from order)
- GET    /api/production/productions/<id>/          retrieve any production
- DELETE /api/production/productions/<id>/          delete + restore stock (staff only)
- POST   /api/production/productions/<id>/proceed/  pending -> in_process
- POST   /api/production/productions/<id>/complete/ in_process -> done
- POST   /api/production/productions/<id>/deploy/   dispatch with overflow split

proceed / complete / delete accept batch ids too.
"""

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.generics import GenericAPIView, ListAPIView
from rest_framework.permissions import IsAdminUser, IsAuthenticated
from rest_framework.response import Response

from common.api import error_response_for
from common.exceptions import EngineError
from production.models import Production
from production.serializers import DeploySerializer, ProduceSerializer, ProductionSerializer
from production.services.dispatch_service import deploy
from production.services.production_service import (
    complete,
    delete_production,
    get_production,
    proceed,
    produce,
)


class ProductionListCreateView(ListAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = ProductionSerializer
    queryset = Production.objects.filter(is_batch=False).order_by("-produced_at")
    filterset_fields = ["status", "product_type", "from_order", "original_production"]

    @extend_schema(tags=["production"])
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)

    @extend_schema(
        tags=["production"],
        request=ProduceSerializer,
        responses={201: ProductionSerializer},
    )
    def post(self, request):
        s = ProduceSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        try:
            production = produce(
                product_type=data["product_type"],
                quantity=data["quantity"],
                unit=data.get("unit") or "litres",
                order_id=data.get("order_id"),
            )
        except EngineError as exc:
            return error_response_for(exc)

        return Response(
            ProductionSerializer(production).data, status=status.HTTP_201_CREATED
        )


class ProductionDetailView(GenericAPIView):
    serializer_class = ProductionSerializer

    def get_permissions(self):
        # stock reversal is a staff-only action
        if self.request.method == "DELETE":
            return [IsAuthenticated(), IsAdminUser()]
        return [IsAuthenticated()]

    @extend_schema(tags=["production"], responses={200: ProductionSerializer})
    def get(self, request, production_id):
        try:
            production = get_production(production_id)
        except EngineError as exc:
            return error_response_for(exc)
        return Response(ProductionSerializer(production).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["production"], responses={200: ProductionSerializer})
    def delete(self, request, production_id):
        try:
            production = delete_production(production_id)
        except EngineError as exc:
            return error_response_for(exc)
        return Response(ProductionSerializer(production).data, status=status.HTTP_200_OK)


class ProductionProceedView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = ProductionSerializer

    @extend_schema(tags=["production"], request=None, responses={200: ProductionSerializer})
    def post(self, request, production_id):
        try:
            production = proceed(production_id)
        except EngineError as exc:
            return error_response_for(exc)
        return Response(ProductionSerializer(production).data, status=status.HTTP_200_OK)


class ProductionCompleteView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = ProductionSerializer

    @extend_schema(tags=["production"], request=None, responses={200: ProductionSerializer})
    def post(self, request, production_id):
        try:
            production = complete(production_id)
        except EngineError as exc:
            return error_response_for(exc)
        return Response(ProductionSerializer(production).data, status=status.HTTP_200_OK)


class ProductionDeployView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = DeploySerializer

    @extend_schema(tags=["production"], request=DeploySerializer)
    def post(self, request, production_id):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            result = deploy(production_id, s.validated_data["dispatch_quantity"])
        except EngineError as exc:
            return error_response_for(exc)

        overflow = result["overflow_record"]
        return Response(
            {
                "source": ProductionSerializer(result["source"]).data,
                "client_record": ProductionSerializer(result["client_record"]).data,
                "overflow_record": ProductionSerializer(overflow).data if overflow else None,
            },
            status=status.HTTP_200_OK,
        )
