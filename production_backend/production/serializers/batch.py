# production/serializers/batch.py

"""
BATCH SERIALIZERS

Batches are read-only through the API; they are built by the allocation
engine and moved by lifecycle / dispatch actions.
"""

from rest_framework import serializers

from production.models import BatchAllocation, BatchCapacitySetting, Production


class BatchAllocationSerializer(serializers.ModelSerializer):
    order_id = serializers.UUIDField(read_only=True)

    class Meta:
        model = BatchAllocation
        fields = [
            "id",
            "order_id",
            "client_name",
            "order_number",
            "quantity",
            "unit",
            "sequence",
            "display_order_code",
            "dispatched",
            "dispatched_at",
        ]
        read_only_fields = fields


class BatchSerializer(serializers.ModelSerializer):
    allocations = BatchAllocationSerializer(many=True, read_only=True)

    class Meta:
        model = Production
        fields = [
            "id",
            "batch_number",
            "product_type",
            "scheduled_date",
            "quantity",
            "unit",
            "status",
            "materials_consumed",
            "allocations",
            "produced_at",
            "proceeded_at",
            "completed_at",
            "deployed_at",
            "deleted_at",
        ]
        read_only_fields = fields


class AllocateBatchesSerializer(serializers.Serializer):
    scheduled_date = serializers.DateField()
    product_type = serializers.CharField(max_length=128)


class BatchCapacitySettingSerializer(serializers.ModelSerializer):
    class Meta:
        model = BatchCapacitySetting
        fields = ["product_type", "capacity", "updated_at"]
        read_only_fields = ["updated_at"]
        # upsert by product_type; uniqueness is handled by the service
        extra_kwargs = {"product_type": {"validators": []}}

    def validate_capacity(self, value):
        if value <= 0:
            raise serializers.ValidationError("capacity must be greater than zero")
        return value
