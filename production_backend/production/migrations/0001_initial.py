"""
======================================================
PATH: production/migrations/0001_initial.py
======================================================
MIGRATION: CREATE Production, BatchAllocation, BatchCapacitySetting,
AllocationLock
"""

from __future__ import annotations

import uuid

from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("orders", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Production",
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
                ("is_batch", models.BooleanField(default=False, db_index=True)),
                (
                    "batch_number",
                    models.CharField(
                        max_length=32,
                        null=True,
                        blank=True,
                        db_index=True,
                        help_text="BT-YYYYMMDD-NNNNN, numbered per (scheduled_date, product_type)",
                    ),
                ),
                ("product_type", models.CharField(max_length=128, db_index=True)),
                (
                    "scheduled_date",
                    models.DateField(null=True, blank=True, db_index=True),
                ),
                ("quantity", models.FloatField()),
                ("unit", models.CharField(max_length=32, default="litres")),
                (
                    "status",
                    models.CharField(
                        max_length=16,
                        choices=[
                            ("pending", "Pending"),
                            ("in_process", "In Process"),
                            ("done", "Done"),
                            ("deployed", "Deployed"),
                            ("deleted", "Deleted"),
                        ],
                        default="pending",
                        db_index=True,
                    ),
                ),
                ("materials_consumed", models.JSONField(null=True, blank=True)),
                (
                    "client_name",
                    models.CharField(max_length=255, blank=True, default=""),
                ),
                (
                    "order_number",
                    models.CharField(
                        max_length=80,
                        blank=True,
                        default="",
                        help_text="Display code (order number, allocation code or split suffix)",
                    ),
                ),
                ("from_split", models.BooleanField(default=False)),
                (
                    "split_into",
                    models.CharField(max_length=32, blank=True, default=""),
                ),
                (
                    "produced_at",
                    models.DateTimeField(default=django.utils.timezone.now),
                ),
                ("proceeded_at", models.DateTimeField(null=True, blank=True)),
                ("completed_at", models.DateTimeField(null=True, blank=True)),
                ("deployed_at", models.DateTimeField(null=True, blank=True)),
                ("deleted_at", models.DateTimeField(null=True, blank=True)),
                ("stock_deducted_at", models.DateTimeField(null=True, blank=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "from_order",
                    models.ForeignKey(
                        null=True,
                        blank=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="productions",
                        to="orders.order",
                    ),
                ),
                (
                    "original_production",
                    models.ForeignKey(
                        null=True,
                        blank=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="outputs",
                        to="production.production",
                    ),
                ),
            ],
            options={
                "ordering": ["-produced_at"],
                "indexes": [
                    models.Index(
                        fields=["is_batch", "scheduled_date", "product_type", "status"],
                        name="production_batch_key_idx",
                    ),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(quantity__gte=0),
                        name="chk_production_quantity_gte_zero",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="BatchAllocation",
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
                ("client_name", models.CharField(max_length=255)),
                ("order_number", models.CharField(max_length=64)),
                ("quantity", models.FloatField()),
                ("unit", models.CharField(max_length=32, default="litres")),
                ("sequence", models.PositiveIntegerField()),
                ("display_order_code", models.CharField(max_length=80)),
                ("dispatched", models.BooleanField(default=False)),
                ("dispatched_at", models.DateTimeField(null=True, blank=True)),
                (
                    "batch",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="allocations",
                        to="production.production",
                    ),
                ),
                (
                    "order",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="allocations",
                        to="orders.order",
                    ),
                ),
            ],
            options={
                "ordering": ["batch_id", "sequence"],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("batch", "order"),
                        name="unique_order_per_batch",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(quantity__gt=0),
                        name="chk_allocation_quantity_gt_zero",
                    ),
                ],
            },
        ),
        migrations.AddField(
            model_name="production",
            name="source_allocation",
            field=models.ForeignKey(
                null=True,
                blank=True,
                on_delete=django.db.models.deletion.SET_NULL,
                related_name="outputs",
                to="production.batchallocation",
            ),
        ),
        migrations.CreateModel(
            name="BatchCapacitySetting",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("product_type", models.CharField(max_length=128, unique=True)),
                ("capacity", models.FloatField()),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["product_type"],
            },
        ),
        migrations.CreateModel(
            name="AllocationLock",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("scheduled_date", models.DateField()),
                ("product_type", models.CharField(max_length=128)),
                ("last_run_at", models.DateTimeField(null=True, blank=True)),
            ],
            options={
                "constraints": [
                    models.UniqueConstraint(
                        fields=("scheduled_date", "product_type"),
                        name="unique_allocation_key",
                    ),
                ],
            },
        ),
    ]
