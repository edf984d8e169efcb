"""
PATH: inventory/models/__init__.py

Inventory models export surface.
"""

from .raw_material import RawMaterial
from .material_movement import MaterialMovement
from .recipe import ProductRecipe, RecipeComponent

__all__ = [
    "RawMaterial",
    "MaterialMovement",
    "ProductRecipe",
    "RecipeComponent",
]
