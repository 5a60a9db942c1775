"""
Django app configuration for personnel-guard.
"""

import logging

from django.apps import AppConfig as BaseAppConfig

logger = logging.getLogger(__name__)


class AppConfig(BaseAppConfig):
    """Django app configuration for personnel-guard."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "personnel_guard"
    verbose_name = "Personnel Guard"
    label = "personnel_guard"

    def ready(self):
        """Connect the settings cache reset signal."""
        from . import config_proxy  # noqa: F401

        logger.debug("personnel_guard app ready")
