# inventory/serializers/__init__.py

from .material import (
    MaterialMovementSerializer,
    MaterialReceiveSerializer,
    MaterialModifySerializer,
    RawMaterialSerializer,
)
from .recipe import ProductRecipeCreateSerializer, ProductRecipeSerializer

__all__ = [
    "MaterialMovementSerializer",
    "MaterialReceiveSerializer",
    "MaterialModifySerializer",
    "RawMaterialSerializer",
    "ProductRecipeCreateSerializer",
    "ProductRecipeSerializer",
]
