# inventory/urls.py

"""
INVENTORY URLS

Mounted under /api/inventory/
"""

from django.urls import path

from inventory.views import (
    MaterialHistoryView,
    MaterialListCreateView,
    MaterialModifyView,
    MaterialReceiveView,
    RecipeDetailView,
    RecipeListCreateView,
)

urlpatterns = [
    path("materials/", MaterialListCreateView.as_view(), name="material-list"),
    path("materials/add/", MaterialReceiveView.as_view(), name="material-add"),
    path("materials/modify/", MaterialModifyView.as_view(), name="material-modify"),
    path("materials/history/", MaterialHistoryView.as_view(), name="material-history"),
    path("recipes/", RecipeListCreateView.as_view(), name="recipe-list"),
    path("recipes/<uuid:recipe_id>/", RecipeDetailView.as_view(), name="recipe-detail"),
]
