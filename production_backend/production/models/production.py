# production/models/production.py

import uuid

from django.db import models
from django.db.models import Q
from django.utils import timezone


class Production(models.Model):
    """
    A production run: either a BATCH (many orders packed up to capacity) or a
    single non-batch production (manual, or produced for one order).

    Deployed output records are Production rows too (status deployed), linked
    to their source via original_production.

    GUARANTEES:
    - Status changes ONLY through production.services.production_lifecycle
    - materials_consumed is written once (stock deduction) and read on deletion
      (stock reversal)
    - Never physically deleted once started; provisional (pending) batches are
      rebuilt by the allocation engine
    """

    STATUS_PENDING = "pending"
    STATUS_IN_PROCESS = "in_process"
    STATUS_DONE = "done"
    STATUS_DEPLOYED = "deployed"
    STATUS_DELETED = "deleted"

    STATUS_CHOICES = [
        (STATUS_PENDING, "Pending"),
        (STATUS_IN_PROCESS, "In Process"),
        (STATUS_DONE, "Done"),
        (STATUS_DEPLOYED, "Deployed"),
        (STATUS_DELETED, "Deleted"),
    ]

    SPLIT_CLIENT_ONLY = "client-only"
    SPLIT_CLIENT_OVERFLOW = "client+overflow"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    is_batch = models.BooleanField(default=False, db_index=True)
    batch_number = models.CharField(
        max_length=32,
        null=True,
        blank=True,
        db_index=True,
        help_text="BT-YYYYMMDD-NNNNN, numbered per (scheduled_date, product_type)",
    )

    product_type = models.CharField(max_length=128, db_index=True)
    scheduled_date = models.DateField(null=True, blank=True, db_index=True)

    quantity = models.FloatField()
    unit = models.CharField(max_length=32, default="litres")

    status = models.CharField(
        max_length=16,
        choices=STATUS_CHOICES,
        default=STATUS_PENDING,
        db_index=True,
    )

    # [{"material": name, "required_quantity": float}, ...]; null = not deducted yet
    materials_consumed = models.JSONField(null=True, blank=True)

    # --------------------------------------------------
    # ORDER LINKAGE (non-batch / output records)
    # --------------------------------------------------

    from_order = models.ForeignKey(
        "orders.Order",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="productions",
    )
    client_name = models.CharField(max_length=255, blank=True, default="")
    order_number = models.CharField(
        max_length=80,
        blank=True,
        default="",
        help_text="Display code (order number, allocation code or split suffix)",
    )

    # --------------------------------------------------
    # DISPATCH LINEAGE
    # --------------------------------------------------

    original_production = models.ForeignKey(
        "self",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="outputs",
    )
    source_allocation = models.ForeignKey(
        "production.BatchAllocation",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="outputs",
    )
    from_split = models.BooleanField(default=False)
    split_into = models.CharField(max_length=32, blank=True, default="")

    # --------------------------------------------------
    # TIMESTAMPS
    # --------------------------------------------------

    produced_at = models.DateTimeField(default=timezone.now)
    proceeded_at = models.DateTimeField(null=True, blank=True)
    completed_at = models.DateTimeField(null=True, blank=True)
    deployed_at = models.DateTimeField(null=True, blank=True)
    deleted_at = models.DateTimeField(null=True, blank=True)
    stock_deducted_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-produced_at"]
        indexes = [
            models.Index(
                fields=["is_batch", "scheduled_date", "product_type", "status"],
                name="production_batch_key_idx",
            ),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(quantity__gte=0),
                name="chk_production_quantity_gte_zero",
            ),
        ]

    def __str__(self):
        label = self.batch_number or self.order_number or str(self.id)
        return f"{label} | {self.product_type} | {self.quantity:g} {self.unit} | {self.status}"
