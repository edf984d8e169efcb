# orders/models/order.py

import uuid

from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import F, Q

from common.quantities import EPSILON


class Order(models.Model):
    """
    A client's request for a quantity of one product type on a scheduled date.

    GUARANTEES:
    - 0 <= fulfilled_quantity <= quantity
    - Status changes ONLY through orders.services.order_lifecycle
    - Never physically deleted

    batch_id is a plain reference to a batch Production. It is not a foreign
    key: a dangling reference is repaired by re-allocation, never cascaded.
    """

    STATUS_PENDING = "pending"
    STATUS_IN_PROGRESS = "in_progress"
    STATUS_BATCHED = "batched"
    STATUS_PARTIALLY_DISPATCHED = "partially_dispatched"
    STATUS_COMPLETED = "completed"

    STATUS_CHOICES = [
        (STATUS_PENDING, "Pending"),
        (STATUS_IN_PROGRESS, "In Progress"),
        (STATUS_BATCHED, "Batched"),
        (STATUS_PARTIALLY_DISPATCHED, "Partially Dispatched"),
        (STATUS_COMPLETED, "Completed"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    order_number = models.CharField(
        max_length=64,
        unique=True,
        help_text="System-generated display code (PREFIX-LOC-DDMMYYYY-NNNNN)",
    )

    client_name = models.CharField(max_length=255)
    client_location = models.CharField(max_length=255, blank=True, default="")

    product_type = models.CharField(max_length=128, db_index=True)

    quantity = models.FloatField()
    unit = models.CharField(max_length=32, default="litres")

    scheduled_date = models.DateField(db_index=True)

    status = models.CharField(
        max_length=32,
        choices=STATUS_CHOICES,
        default=STATUS_PENDING,
        db_index=True,
    )

    fulfilled_quantity = models.FloatField(default=0.0)

    batch_id = models.UUIDField(null=True, blank=True, db_index=True)
    batched_at = models.DateTimeField(null=True, blank=True)
    completed_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["created_at", "id"]
        indexes = [
            models.Index(
                fields=["scheduled_date", "product_type", "status"],
                name="order_key_status_idx",
            ),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(quantity__gt=0),
                name="chk_order_quantity_gt_zero",
            ),
            models.CheckConstraint(
                condition=Q(fulfilled_quantity__gte=0),
                name="chk_order_fulfilled_gte_zero",
            ),
            models.CheckConstraint(
                condition=Q(fulfilled_quantity__lte=F("quantity")),
                name="chk_order_fulfilled_lte_quantity",
            ),
        ]

    # --------------------------------------------------
    # DERIVED
    # --------------------------------------------------

    @property
    def outstanding_quantity(self) -> float:
        return max(0.0, float(self.quantity) - float(self.fulfilled_quantity))

    @property
    def is_completed(self) -> bool:
        return self.status == self.STATUS_COMPLETED

    def clean(self):
        if self.quantity is None or self.quantity <= 0:
            raise ValidationError({"quantity": "quantity must be greater than zero"})

        fulfilled = self.fulfilled_quantity or 0.0
        if fulfilled < 0 or fulfilled > self.quantity + EPSILON:
            raise ValidationError(
                {"fulfilled_quantity": "fulfilled_quantity must be within [0, quantity]"}
            )

    def __str__(self):
        return f"{self.order_number} | {self.client_name} | {self.quantity:g} {self.unit}"
