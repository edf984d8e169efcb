# inventory/serializers/material.py
"""
======================================================
PATH: inventory/serializers/material.py
======================================================
RAW MATERIAL SERIALIZERS

Purpose:
- Read shape for stock records and the movement ledger.
- Command shapes for intake (add) and absolute correction (modify).

total_quantity is NEVER writable through a ModelSerializer; all stock changes
go through inventory.services.stock_ledger.
"""

from rest_framework import serializers

from inventory.models import MaterialMovement, RawMaterial


class RawMaterialSerializer(serializers.ModelSerializer):
    class Meta:
        model = RawMaterial
        fields = ["id", "name", "total_quantity", "unit", "created_at", "updated_at"]
        read_only_fields = ["id", "total_quantity", "created_at", "updated_at"]


class MaterialReceiveSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=128)
    quantity = serializers.FloatField()
    note = serializers.CharField(max_length=255, required=False, allow_blank=True)


class MaterialModifySerializer(serializers.Serializer):
    name = serializers.CharField(max_length=128)
    new_quantity = serializers.FloatField()
    note = serializers.CharField(max_length=255, required=False, allow_blank=True)


class MaterialMovementSerializer(serializers.ModelSerializer):
    material = serializers.CharField(source="material.name", read_only=True)
    production_id = serializers.UUIDField(read_only=True, allow_null=True)

    class Meta:
        model = MaterialMovement
        fields = [
            "id",
            "material",
            "movement_type",
            "reason",
            "quantity",
            "balance_after",
            "production_id",
            "note",
            "created_at",
        ]
        read_only_fields = fields
