# orders/admin.py

from django.contrib import admin

from orders.models import Order


# ======================================================
# ORDER ADMIN
# ======================================================


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = (
        "order_number",
        "client_name",
        "product_type",
        "quantity",
        "fulfilled_quantity",
        "status",
        "scheduled_date",
    )
    # engine-managed fields
    readonly_fields = (
        "order_number",
        "status",
        "fulfilled_quantity",
        "batch_id",
        "batched_at",
        "completed_at",
        "created_at",
        "updated_at",
    )
    search_fields = ("order_number", "client_name")
    list_filter = ("status", "product_type", "scheduled_date")
