# production/serializers/production.py

from rest_framework import serializers

from production.models import Production


class ProductionSerializer(serializers.ModelSerializer):
    from_order_id = serializers.UUIDField(read_only=True, allow_null=True)
    original_production_id = serializers.UUIDField(read_only=True, allow_null=True)
    source_allocation_id = serializers.UUIDField(read_only=True, allow_null=True)

    class Meta:
        model = Production
        fields = [
            "id",
            "is_batch",
            "batch_number",
            "product_type",
            "scheduled_date",
            "quantity",
            "unit",
            "status",
            "materials_consumed",
            "from_order_id",
            "client_name",
            "order_number",
            "original_production_id",
            "source_allocation_id",
            "from_split",
            "split_into",
            "produced_at",
            "proceeded_at",
            "completed_at",
            "deployed_at",
            "deleted_at",
            "stock_deducted_at",
        ]
        read_only_fields = fields


class ProduceSerializer(serializers.Serializer):
    product_type = serializers.CharField(max_length=128)
    quantity = serializers.FloatField()
    unit = serializers.CharField(max_length=32, required=False, default="litres")
    order_id = serializers.UUIDField(required=False, allow_null=True)

    def validate_quantity(self, value):
        if value <= 0:
            raise serializers.ValidationError("quantity must be greater than zero")
        return value


class DeploySerializer(serializers.Serializer):
    dispatch_quantity = serializers.FloatField()
