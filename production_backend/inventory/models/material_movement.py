# inventory/models/material_movement.py

"""
MATERIAL LEDGER

Immutable stock history entry.

GUARANTEES:
- Append-only (no updates, no deletes)
- Movement direction validated against reason
- PRODUCTION / REVERSAL movements reference the production they belong to
"""

import uuid

from django.core.exceptions import ValidationError
from django.db import models

from .raw_material import RawMaterial


class MaterialMovement(models.Model):
    class MovementType(models.TextChoices):
        IN = "IN", "Stock In"
        OUT = "OUT", "Stock Out"

    class Reason(models.TextChoices):
        RECEIPT = "RECEIPT", "Stock Receipt"
        ADJUSTMENT = "ADJUSTMENT", "Manual Adjustment"
        PRODUCTION = "PRODUCTION", "Consumed by Production"
        REVERSAL = "REVERSAL", "Production Deleted"

    REASON_TO_MOVEMENT = {
        Reason.RECEIPT: MovementType.IN,
        Reason.REVERSAL: MovementType.IN,
        Reason.PRODUCTION: MovementType.OUT,
        Reason.ADJUSTMENT: None,
    }

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    material = models.ForeignKey(
        RawMaterial, on_delete=models.PROTECT, related_name="movements"
    )

    movement_type = models.CharField(max_length=3, choices=MovementType.choices)
    reason = models.CharField(max_length=20, choices=Reason.choices)

    quantity = models.FloatField()

    # Stock level right after this movement (audit reconstruction).
    balance_after = models.FloatField()

    production = models.ForeignKey(
        "production.Production",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="material_movements",
    )

    note = models.CharField(max_length=255, blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["created_at"], name="movement_created_idx"),
            models.Index(fields=["reason"], name="movement_reason_idx"),
            models.Index(fields=["material", "created_at"], name="movement_material_idx"),
        ]

    def clean(self):
        if self.quantity is None or self.quantity <= 0:
            raise ValidationError("quantity must be greater than zero")

        expected_type = self.REASON_TO_MOVEMENT.get(self.reason)
        if expected_type and self.movement_type != expected_type:
            raise ValidationError(
                f"{self.reason} requires movement_type={expected_type}"
            )

        if (
            self.reason in {self.Reason.PRODUCTION, self.Reason.REVERSAL}
            and not self.production_id
        ):
            raise ValidationError("PRODUCTION / REVERSAL must reference a production")

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValidationError("MaterialMovement records are immutable")

        self.full_clean()
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError(
            "MaterialMovement records are immutable and cannot be deleted"
        )

    def __str__(self):
        return f"{self.material.name} | {self.reason} | {self.quantity:g}"
