# production/admin.py

from django.contrib import admin

from production.models import AllocationLock, BatchAllocation, BatchCapacitySetting, Production


# ======================================================
# PRODUCTION / BATCH ADMIN (READ-ONLY LIFECYCLE)
# ======================================================


class BatchAllocationInline(admin.TabularInline):
    model = BatchAllocation
    extra = 0
    can_delete = False
    readonly_fields = (
        "display_order_code",
        "client_name",
        "quantity",
        "unit",
        "sequence",
        "dispatched",
        "dispatched_at",
    )
    fields = readonly_fields

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Production)
class ProductionAdmin(admin.ModelAdmin):
    list_display = (
        "batch_number",
        "order_number",
        "product_type",
        "quantity",
        "status",
        "is_batch",
        "scheduled_date",
        "produced_at",
    )
    # status and stock fields move only through the services
    readonly_fields = (
        "status",
        "materials_consumed",
        "proceeded_at",
        "completed_at",
        "deployed_at",
        "deleted_at",
        "stock_deducted_at",
        "split_into",
    )
    search_fields = ("batch_number", "order_number", "client_name")
    list_filter = ("status", "is_batch", "product_type")
    inlines = [BatchAllocationInline]


@admin.register(BatchCapacitySetting)
class BatchCapacitySettingAdmin(admin.ModelAdmin):
    list_display = ("product_type", "capacity", "updated_at")


@admin.register(AllocationLock)
class AllocationLockAdmin(admin.ModelAdmin):
    list_display = ("scheduled_date", "product_type", "last_run_at")
    readonly_fields = ("scheduled_date", "product_type", "last_run_at")
