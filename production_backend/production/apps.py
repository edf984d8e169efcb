# production/apps.py

"""
PRODUCTION APP CONFIG

Batch allocation, production lifecycle and dispatch.
"""

from django.apps import AppConfig


class ProductionConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "production"
    verbose_name = "Production & Dispatch"
