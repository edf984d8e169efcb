# production/models/settings.py

"""
PRODUCTION CONFIGURATION + LOCK ROWS
"""

from django.core.exceptions import ValidationError
from django.db import models


class BatchCapacitySetting(models.Model):
    """
    Maximum quantity per batch for one product type.

    Missing or non-positive capacity falls back to settings.DEFAULT_BATCH_CAPACITY.
    """

    product_type = models.CharField(max_length=128, unique=True)
    capacity = models.FloatField()
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["product_type"]

    def __str__(self):
        return f"{self.product_type}: {self.capacity:g}"


class AllocationLock(models.Model):
    """
    One row per (scheduled_date, product_type) allocation key.

    Taken with SELECT ... FOR UPDATE so that re-batching of one key is
    serialized across workers.
    """

    scheduled_date = models.DateField()
    product_type = models.CharField(max_length=128)
    last_run_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["scheduled_date", "product_type"],
                name="unique_allocation_key",
            ),
        ]

    def clean(self):
        if not (self.product_type or "").strip():
            raise ValidationError({"product_type": "product_type is required"})

    def __str__(self):
        return f"{self.scheduled_date} / {self.product_type}"
