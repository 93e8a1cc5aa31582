from django.apps import AppConfig


class TaxonomyConfig(AppConfig):
    """Configuration for the taxonomy app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "taxonomy"
