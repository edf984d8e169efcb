"""
======================================================
PATH: inventory/migrations/0001_initial.py
======================================================
MIGRATION: CREATE RawMaterial, MaterialMovement, ProductRecipe,
RecipeComponent
"""

from __future__ import annotations

import uuid

from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("production", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="RawMaterial",
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
                    "name",
                    models.CharField(max_length=128, unique=True, db_index=True),
                ),
                (
                    "total_quantity",
                    models.FloatField(
                        default=0.0,
                        help_text="Available quantity (service-managed only)",
                    ),
                ),
                ("unit", models.CharField(max_length=32, default="kg")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["name"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(total_quantity__gte=0),
                        name="chk_rawmaterial_total_quantity_gte_zero",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="MaterialMovement",
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
                    "movement_type",
                    models.CharField(
                        max_length=3,
                        choices=[("IN", "Stock In"), ("OUT", "Stock Out")],
                    ),
                ),
                (
                    "reason",
                    models.CharField(
                        max_length=20,
                        choices=[
                            ("RECEIPT", "Stock Receipt"),
                            ("ADJUSTMENT", "Manual Adjustment"),
                            ("PRODUCTION", "Consumed by Production"),
                            ("REVERSAL", "Production Deleted"),
                        ],
                    ),
                ),
                ("quantity", models.FloatField()),
                ("balance_after", models.FloatField()),
                (
                    "note",
                    models.CharField(max_length=255, blank=True, default=""),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "material",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="movements",
                        to="inventory.rawmaterial",
                    ),
                ),
                (
                    "production",
                    models.ForeignKey(
                        null=True,
                        blank=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="material_movements",
                        to="production.production",
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["created_at"], name="movement_created_idx"),
                    models.Index(fields=["reason"], name="movement_reason_idx"),
                    models.Index(
                        fields=["material", "created_at"],
                        name="movement_material_idx",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="ProductRecipe",
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
                    "name",
                    models.CharField(max_length=128, unique=True, db_index=True),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="RecipeComponent",
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
                ("ratio", models.FloatField()),
                (
                    "recipe",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="components",
                        to="inventory.productrecipe",
                    ),
                ),
                (
                    "material",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="recipe_components",
                        to="inventory.rawmaterial",
                    ),
                ),
            ],
            options={
                "ordering": ["id"],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("recipe", "material"),
                        name="unique_material_per_recipe",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(ratio__gt=0),
                        name="chk_recipecomponent_ratio_gt_zero",
                    ),
                ],
            },
        ),
    ]
