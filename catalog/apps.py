"""Django app configuration for catalog."""

from django.apps import AppConfig


class CatalogConfig(AppConfig):
    """Products referenced by inventory balances and movements."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "catalog"
