# lookups/signals.py
import logging

from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from .models import LookupCategory, LookupValue
from .services import get_lookup_service

logger = logging.getLogger(__name__)


@receiver([post_save, post_delete], sender=LookupCategory)
def invalidate_category_cache(sender, instance, **kwargs):
    logger.debug(f"Lookup category {instance.code} changed")
    get_lookup_service().invalidate_category(instance.code)


@receiver([post_save, post_delete], sender=LookupValue)
def invalidate_value_cache(sender, instance, **kwargs):
    logger.debug(f"Lookup value {instance.code} changed in {instance.category.code}")
    get_lookup_service().invalidate_category(instance.category.code)
