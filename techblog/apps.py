"""Django app configuration for techblog."""
from django.apps import AppConfig


class TechBlogConfig(AppConfig):
    """Configuration for the techblog app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "techblog"
    verbose_name = "Tech Blog"
