# production/models/allocation.py

import uuid

from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q


class BatchAllocation(models.Model):
    """
    One order's share of a batch.

    RULES:
    - sum(allocations.quantity) == batch.quantity (within tolerance)
    - sequence is 1-based and dense within a batch
    - display_order_code = order_number + "C" + sequence
    - an order appears at most once per batch
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    batch = models.ForeignKey(
        "production.Production",
        on_delete=models.CASCADE,
        related_name="allocations",
    )
    order = models.ForeignKey(
        "orders.Order",
        on_delete=models.PROTECT,
        related_name="allocations",
    )

    client_name = models.CharField(max_length=255)
    order_number = models.CharField(max_length=64)

    quantity = models.FloatField()
    unit = models.CharField(max_length=32, default="litres")

    sequence = models.PositiveIntegerField()
    display_order_code = models.CharField(max_length=80)

    dispatched = models.BooleanField(default=False)
    dispatched_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["batch_id", "sequence"]
        constraints = [
            models.UniqueConstraint(
                fields=["batch", "order"],
                name="unique_order_per_batch",
            ),
            models.CheckConstraint(
                condition=Q(quantity__gt=0),
                name="chk_allocation_quantity_gt_zero",
            ),
        ]

    @staticmethod
    def build_display_code(order_number: str, sequence: int) -> str:
        return f"{order_number}C{sequence}"

    def clean(self):
        if self.quantity is None or self.quantity <= 0:
            raise ValidationError({"quantity": "quantity must be greater than zero"})

    def __str__(self):
        flag = "dispatched" if self.dispatched else "open"
        return f"{self.display_order_code} | {self.quantity:g} {self.unit} | {flag}"
