# navigation/apps.py
from django.apps import AppConfig
import logging

logger = logging.getLogger(__name__)


class NavigationConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'navigation'
    verbose_name = 'Navigation'

    def ready(self):
        """Register the configuration system checks."""
        from . import checks  # noqa: F401
        from .catalog import NAVIGATION_VERSION

        logger.info(f"Navigation app initialized (catalog version {NAVIGATION_VERSION})")
