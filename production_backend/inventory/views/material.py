# inventory/views/material.py

"""
======================================================
PATH: inventory/views/material.py
======================================================
RAW MATERIAL STOCK API

Endpoints:
- GET  /api/inventory/materials/          list stock records
- POST /api/inventory/materials/          register a material (zero stock)
- POST /api/inventory/materials/add/      receive stock (upsert + increment)
- PUT  /api/inventory/materials/modify/   set an absolute quantity
- GET  /api/inventory/materials/history/  paginated movement ledger

Views stay thin: validation in serializers, stock rules in stock_ledger.
"""

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.generics import GenericAPIView, ListAPIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from common.api import error_response_for
from common.exceptions import EngineError
from inventory.models import MaterialMovement, RawMaterial
from inventory.serializers import (
    MaterialModifySerializer,
    MaterialMovementSerializer,
    MaterialReceiveSerializer,
    RawMaterialSerializer,
)
from inventory.services.stock_ledger import (
    receive_material,
    register_material,
    set_material_quantity,
)


class MaterialListCreateView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = RawMaterialSerializer
    queryset = RawMaterial.objects.all().order_by("name")

    @extend_schema(tags=["inventory"], responses=RawMaterialSerializer(many=True))
    def get(self, request):
        qs = self.get_queryset()
        return Response(
            RawMaterialSerializer(qs, many=True).data, status=status.HTTP_200_OK
        )

    @extend_schema(
        tags=["inventory"],
        request=RawMaterialSerializer,
        responses={201: RawMaterialSerializer},
    )
    def post(self, request):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)

        material = register_material(
            name=s.validated_data["name"],
            unit=s.validated_data.get("unit") or "kg",
        )
        return Response(
            RawMaterialSerializer(material).data, status=status.HTTP_201_CREATED
        )


class MaterialReceiveView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = MaterialReceiveSerializer

    @extend_schema(
        tags=["inventory"],
        request=MaterialReceiveSerializer,
        responses={200: RawMaterialSerializer},
    )
    def post(self, request):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        try:
            material = receive_material(
                name=data["name"],
                quantity=data["quantity"],
                note=data.get("note", ""),
            )
        except EngineError as exc:
            return error_response_for(exc)

        return Response(RawMaterialSerializer(material).data, status=status.HTTP_200_OK)


class MaterialModifyView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = MaterialModifySerializer

    @extend_schema(
        tags=["inventory"],
        request=MaterialModifySerializer,
        responses={200: RawMaterialSerializer},
    )
    def put(self, request):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        try:
            material = set_material_quantity(
                name=data["name"],
                new_quantity=data["new_quantity"],
                note=data.get("note", ""),
            )
        except EngineError as exc:
            return error_response_for(exc)

        return Response(RawMaterialSerializer(material).data, status=status.HTTP_200_OK)


class MaterialHistoryView(ListAPIView):
    """
    Movement ledger, newest first.

    Filters: ?material__name=&reason=&movement_type=&production=
    """

    permission_classes = [IsAuthenticated]
    serializer_class = MaterialMovementSerializer
    queryset = MaterialMovement.objects.select_related("material").order_by("-created_at")
    filterset_fields = ["material__name", "reason", "movement_type", "production"]

    @extend_schema(tags=["inventory"])
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)
