# inventory/models/recipe.py

"""
PRODUCT RECIPES

A recipe lists the input materials of one product type with relative ratios.
Ratios need not sum to any fixed total:

    required(material) = ratio / sum(all ratios) * produced quantity
"""

import uuid

from django.core.exceptions import ValidationError
from django.db import models

from .raw_material import RawMaterial


class ProductRecipe(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    # product_type on orders / productions refers to this name
    name = models.CharField(max_length=128, unique=True, db_index=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return self.name


class RecipeComponent(models.Model):
    recipe = models.ForeignKey(
        ProductRecipe, on_delete=models.CASCADE, related_name="components"
    )
    material = models.ForeignKey(
        RawMaterial, on_delete=models.PROTECT, related_name="recipe_components"
    )
    ratio = models.FloatField()

    class Meta:
        ordering = ["id"]
        constraints = [
            models.UniqueConstraint(
                fields=["recipe", "material"],
                name="unique_material_per_recipe",
            ),
            models.CheckConstraint(
                condition=models.Q(ratio__gt=0),
                name="chk_recipecomponent_ratio_gt_zero",
            ),
        ]

    def clean(self):
        if self.ratio is None or self.ratio <= 0:
            raise ValidationError({"ratio": "ratio must be greater than zero"})

    def __str__(self):
        return f"{self.recipe.name}: {self.material.name} x{self.ratio:g}"
