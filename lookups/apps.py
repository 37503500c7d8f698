# lookups/apps.py
from django.apps import AppConfig
import logging

logger = logging.getLogger(__name__)


class LookupsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'lookups'
    verbose_name = 'Lookup Values'

    def ready(self):
        """Drop cached lookup data whenever a category or value is saved or deleted."""
        try:
            from . import signals  # noqa: F401
            logger.info("Lookups app initialized successfully")
        except ImportError as e:
            logger.error(f"Error initializing lookups app: {str(e)}")
