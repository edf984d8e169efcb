# inventory/apps.py

"""
INVENTORY APP CONFIG

Raw material stock ledger + product recipe lookup.
"""

from django.apps import AppConfig


class InventoryConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "inventory"
    verbose_name = "Raw Material Inventory"
