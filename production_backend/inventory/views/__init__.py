# inventory/views/__init__.py

from .material import (
    MaterialHistoryView,
    MaterialListCreateView,
    MaterialModifyView,
    MaterialReceiveView,
)
from .recipe import RecipeDetailView, RecipeListCreateView

__all__ = [
    "MaterialHistoryView",
    "MaterialListCreateView",
    "MaterialModifyView",
    "MaterialReceiveView",
    "RecipeDetailView",
    "RecipeListCreateView",
]
