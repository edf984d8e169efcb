# inventory/services/recipes.py

"""
RECIPE SERVICE

Resolves a product type into the raw materials needed to produce a quantity of it.

    required(material) = ratio / sum(ratios) * quantity
"""

from __future__ import annotations

import logging

from django.db import IntegrityError, transaction

from common.exceptions import InvalidQuantityError, InvalidStateError, NotFoundError
from common.quantities import proportional_share, to_quantity
from inventory.models import ProductRecipe, RawMaterial, RecipeComponent

logger = logging.getLogger(__name__)


def get_recipe(product_type: str) -> ProductRecipe:
    try:
        return ProductRecipe.objects.prefetch_related("components__material").get(
            name=(product_type or "").strip()
        )
    except ProductRecipe.DoesNotExist as exc:
        raise NotFoundError(f"No recipe found for product type: {product_type}") from exc


def compute_required_materials(product_type: str, quantity) -> list[dict]:
    """
    Returns [{"material": name, "required_quantity": float}, ...] in component order.
    """
    try:
        qty = to_quantity(quantity)
    except ValueError as exc:
        raise InvalidQuantityError(str(exc)) from exc
    if qty <= 0:
        raise InvalidQuantityError("quantity must be greater than zero")

    recipe = get_recipe(product_type)
    components = list(recipe.components.all())
    if not components:
        raise NotFoundError(f"Recipe {recipe.name} has no components")

    total_ratio = sum(float(c.ratio) for c in components)

    return [
        {
            "material": c.material.name,
            "required_quantity": proportional_share(qty, c.ratio, total_ratio),
        }
        for c in components
    ]


@transaction.atomic
def create_recipe(*, name: str, components) -> ProductRecipe:
    """
    components: [{"material": name, "ratio": float}, ...]

    Unknown materials are registered with zero stock.
    """
    name = (name or "").strip()
    if not name:
        raise InvalidQuantityError("Recipe name is required")
    if not components:
        raise InvalidQuantityError("A recipe needs at least one component")

    try:
        recipe = ProductRecipe.objects.create(name=name)
    except IntegrityError as exc:
        raise InvalidStateError(f"Recipe already exists: {name}") from exc

    seen = set()
    for line in components:
        material_name = (line.get("material") or "").strip()
        if not material_name:
            raise InvalidQuantityError("Component is missing a material name")
        if material_name in seen:
            raise InvalidQuantityError(f"Duplicate component: {material_name}")
        seen.add(material_name)

        try:
            ratio = to_quantity(line.get("ratio"), field_name="ratio")
        except ValueError as exc:
            raise InvalidQuantityError(str(exc)) from exc
        if ratio <= 0:
            raise InvalidQuantityError(f"ratio for {material_name} must be greater than zero")

        material, _ = RawMaterial.objects.get_or_create(
            name=material_name, defaults={"total_quantity": 0.0}
        )
        RecipeComponent.objects.create(recipe=recipe, material=material, ratio=ratio)

    logger.info(
        "Created recipe",
        extra={"recipe": name, "components": sorted(seen)},
    )
    return recipe


@transaction.atomic
def delete_recipe(*, recipe_id) -> None:
    try:
        recipe = ProductRecipe.objects.get(id=recipe_id)
    except ProductRecipe.DoesNotExist as exc:
        raise NotFoundError(f"Recipe not found: {recipe_id}") from exc

    name = recipe.name
    recipe.delete()
    logger.info("Deleted recipe", extra={"recipe": name})
