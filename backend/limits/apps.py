# limits/apps.py
"""Limits app configuration."""

from django.apps import AppConfig


class LimitsConfig(AppConfig):
    """Configuration for the limits app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "limits"
    verbose_name = "Revenue limits"
