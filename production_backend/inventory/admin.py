# inventory/admin.py

from django.contrib import admin

from inventory.models import MaterialMovement, ProductRecipe, RawMaterial, RecipeComponent


# ======================================================
# RAW MATERIAL ADMIN
# ======================================================


@admin.register(RawMaterial)
class RawMaterialAdmin(admin.ModelAdmin):
    list_display = ("name", "total_quantity", "unit", "updated_at")
    # stock changes go through the ledger service only
    readonly_fields = ("total_quantity", "created_at", "updated_at")
    search_fields = ("name",)


# ======================================================
# MATERIAL LEDGER ADMIN (READ-ONLY)
# ======================================================


@admin.register(MaterialMovement)
class MaterialMovementAdmin(admin.ModelAdmin):
    list_display = (
        "material",
        "movement_type",
        "reason",
        "quantity",
        "balance_after",
        "production",
        "created_at",
    )
    list_filter = ("reason", "movement_type", "created_at")
    search_fields = ("material__name", "note")

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


# ======================================================
# RECIPE ADMIN
# ======================================================


class RecipeComponentInline(admin.TabularInline):
    model = RecipeComponent
    extra = 1


@admin.register(ProductRecipe)
class ProductRecipeAdmin(admin.ModelAdmin):
    list_display = ("name", "created_at")
    search_fields = ("name",)
    inlines = [RecipeComponentInline]
