# lookups/services.py
"""
LOOKUP SERVICE - cached access to lookup categories and values.

Every read goes through one ``RequestCache`` so concurrent requests for the
same category share a single fetch. Failed fetches are logged and turned
into empty results; they are never cached, so the next call retries.
"""
import logging
from functools import lru_cache
from typing import Dict, List, Optional

from core.exceptions import LookupFetchError
from navigation.cache import CacheKeys, RequestCache

from .conf import get_setting
from .sources import LookupSource, get_lookup_source
from .types import LookupCategoryData, LookupValueData

logger = logging.getLogger(__name__)


class LookupCategories:
    HOUSEHOLD_STATUSES = 'household_statuses'
    HOUSEHOLD_MEMBER_RELATIONSHIPS = 'household_member_relationships'
    USER_ROLES = 'user_roles'
    VILLAGE_TENANT_STATUSES = 'village_tenant_statuses'


class LookupService:

    def __init__(self, source: LookupSource, cache: RequestCache = None):
        self.source = source
        self.cache = cache or RequestCache(
            max_size=get_setting('CACHE_MAX_ENTRIES'),
            default_ttl=get_setting('CACHE_TTL'),
        )

    def get_all_categories(self) -> List[LookupCategoryData]:
        try:
            return self.cache.execute(CacheKeys.lookup_categories(), self.source.fetch_categories)
        except LookupFetchError as e:
            logger.error(f"Failed to fetch lookup categories: {e.message}")
            return []

    def get_category_by_code(self, code: str) -> Optional[LookupCategoryData]:
        try:
            category = self.cache.execute(CacheKeys.lookup_category(code), lambda: self._fetch_category(code))
        except LookupFetchError as e:
            logger.error(f"Failed to fetch lookup category {code}: {e.message}")
            return None
        return category

    def _fetch_category(self, code):
        category = self.source.fetch_category(code)
        if category is None:
            # missing categories are not cached
            raise LookupFetchError(f"Category {code} not found", details={'code': code})
        return category

    def fetch_values_by_category_code(self, category_code: str) -> List[LookupValueData]:
        """Active values of a category, in ``sort_order``; ``[]`` when anything fails."""
        def fetch():
            category = self.get_category_by_code(category_code)
            if category is None:
                raise LookupFetchError(f"Category {category_code} not found",
                                       details={'code': category_code})
            return self.source.fetch_values(category.id)

        try:
            return self.cache.execute(CacheKeys.lookup_values(category_code), fetch)
        except LookupFetchError as e:
            logger.warning(f"Lookup values for {category_code} unavailable: {e.message}")
            return []

    def get_value_by_code(self, category_code: str, value_code: str) -> Optional[LookupValueData]:
        for value in self.fetch_values_by_category_code(category_code):
            if value.code == value_code:
                return value
        return None

    def get_common_lookups(self) -> Dict[str, List[LookupValueData]]:
        return {
            'household_statuses': self.fetch_values_by_category_code(LookupCategories.HOUSEHOLD_STATUSES),
            'relationship_types': self.fetch_values_by_category_code(
                LookupCategories.HOUSEHOLD_MEMBER_RELATIONSHIPS
            ),
            'user_roles': self.fetch_values_by_category_code(LookupCategories.USER_ROLES),
        }

    def invalidate_category(self, category_code: str):
        self.cache.invalidate(CacheKeys.lookup_category(category_code))
        self.cache.invalidate(CacheKeys.lookup_values(category_code))
        self.cache.invalidate(CacheKeys.lookup_categories())
        logger.info(f"Invalidated lookup cache for category {category_code}")

    def invalidate_all(self):
        removed = self.cache.invalidate_pattern(f"{CacheKeys.PREFIX_LOOKUP}:*")
        logger.info(f"Invalidated {removed} lookup cache entries")

    def get_cache_stats(self) -> dict:
        return self.cache.get_stats()


@lru_cache(maxsize=None)
def get_lookup_service() -> LookupService:
    return LookupService(source=get_lookup_source())


def reset_lookup_service():
    get_lookup_service.cache_clear()
