# inventory/models/raw_material.py

"""
RAW MATERIAL (STOCK RECORD)

One row per material; total_quantity is the available stock.

RULES:
- total_quantity is mutated ONLY via inventory.services.stock_ledger
  (row-locked read-check-write).
- total_quantity is never negative (model + DB check constraint).
- Every mutation is mirrored by an append-only MaterialMovement.
"""

import uuid

from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q


class RawMaterial(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    name = models.CharField(max_length=128, unique=True, db_index=True)

    total_quantity = models.FloatField(
        default=0.0,
        help_text="Available quantity (service-managed only)",
    )

    unit = models.CharField(max_length=32, default="kg")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]
        constraints = [
            models.CheckConstraint(
                condition=Q(total_quantity__gte=0),
                name="chk_rawmaterial_total_quantity_gte_zero",
            ),
        ]

    def clean(self):
        if not (self.name or "").strip():
            raise ValidationError({"name": "name is required"})

        if self.total_quantity is None or self.total_quantity < 0:
            raise ValidationError(
                {"total_quantity": "total_quantity cannot be negative"}
            )

    def save(self, *args, **kwargs):
        if self.name is not None:
            self.name = self.name.strip()
        self.full_clean()
        return super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.name} ({self.total_quantity:g} {self.unit})"
