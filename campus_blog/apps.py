"""Django app configuration for campus_blog."""
from django.apps import AppConfig


class CampusBlogConfig(AppConfig):
    """Configuration for the campus blog app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "campus_blog"
    verbose_name = "Campus Blog"

    def ready(self):
        """Connect signal handlers."""
        from . import signals  # noqa: F401
