"""
======================================================
PATH: orders/migrations/0001_initial.py
======================================================
MIGRATION: CREATE Order
"""

from __future__ import annotations

import uuid

from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Order",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        primary_key=True,
                        default=uuid.uuid4,
                        editable=False,
                        serialize=False,
                    ),
                ),
                (
                    "order_number",
                    models.CharField(
                        max_length=64,
                        unique=True,
                        help_text="System-generated display code (PREFIX-LOC-DDMMYYYY-NNNNN)",
                    ),
                ),
                ("client_name", models.CharField(max_length=255)),
                (
                    "client_location",
                    models.CharField(max_length=255, blank=True, default=""),
                ),
                ("product_type", models.CharField(max_length=128, db_index=True)),
                ("quantity", models.FloatField()),
                ("unit", models.CharField(max_length=32, default="litres")),
                ("scheduled_date", models.DateField(db_index=True)),
                (
                    "status",
                    models.CharField(
                        max_length=32,
                        choices=[
                            ("pending", "Pending"),
                            ("in_progress", "In Progress"),
                            ("batched", "Batched"),
                            ("partially_dispatched", "Partially Dispatched"),
                            ("completed", "Completed"),
                        ],
                        default="pending",
                        db_index=True,
                    ),
                ),
                ("fulfilled_quantity", models.FloatField(default=0.0)),
                ("batch_id", models.UUIDField(null=True, blank=True, db_index=True)),
                ("batched_at", models.DateTimeField(null=True, blank=True)),
                ("completed_at", models.DateTimeField(null=True, blank=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["created_at", "id"],
                "indexes": [
                    models.Index(
                        fields=["scheduled_date", "product_type", "status"],
                        name="order_key_status_idx",
                    ),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(quantity__gt=0),
                        name="chk_order_quantity_gt_zero",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(fulfilled_quantity__gte=0),
                        name="chk_order_fulfilled_gte_zero",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(
                            fulfilled_quantity__lte=models.F("quantity")
                        ),
                        name="chk_order_fulfilled_lte_quantity",
                    ),
                ],
            },
        ),
    ]
