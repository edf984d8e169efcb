# orders/serializers/order.py

"""
ORDER SERIALIZERS

Status, fulfilled_quantity and batch linkage are engine-managed and never
writable through the API.
"""

from rest_framework import serializers

from orders.models import Order


class OrderSerializer(serializers.ModelSerializer):
    outstanding_quantity = serializers.FloatField(read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "order_number",
            "client_name",
            "client_location",
            "product_type",
            "quantity",
            "unit",
            "scheduled_date",
            "status",
            "fulfilled_quantity",
            "outstanding_quantity",
            "batch_id",
            "batched_at",
            "completed_at",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class OrderCreateSerializer(serializers.Serializer):
    client_name = serializers.CharField(max_length=255)
    client_location = serializers.CharField(
        max_length=255, required=False, allow_blank=True, default=""
    )
    product_type = serializers.CharField(max_length=128)
    quantity = serializers.FloatField()
    unit = serializers.CharField(max_length=32, required=False, default="litres")
    scheduled_date = serializers.DateField()

    def validate_quantity(self, value):
        if value <= 0:
            raise serializers.ValidationError("quantity must be greater than zero")
        return value
