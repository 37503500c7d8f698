# navigation/services.py
"""
Process-wide navigation service wiring.

``get_navigation_resolver()`` builds the resolver, its cache and its
analytics once from ``settings.NAVIGATION``. Tests and settings changes
call ``reset_navigation_resolver()`` to start fresh.
"""
import logging
from functools import lru_cache

from .analytics import NavigationAnalytics
from .cache import NavigationCacheManager
from .conf import get_setting
from .resolver import NavigationResolver

logger = logging.getLogger(__name__)


@lru_cache(maxsize=None)
def get_navigation_resolver() -> NavigationResolver:
    cache = NavigationCacheManager(
        ttl=get_setting('CACHE_TTL'),
        permission_ttl=get_setting('PERMISSION_CACHE_TTL'),
        max_entries=get_setting('CACHE_MAX_ENTRIES'),
        enabled=get_setting('CACHE_ENABLED'),
    )
    analytics = NavigationAnalytics(
        enabled=get_setting('ANALYTICS_ENABLED'),
        max_events=get_setting('ANALYTICS_MAX_EVENTS'),
    )
    logger.info(f"Navigation resolver ready (cache {'on' if cache.enabled else 'off'}, "
                f"analytics {'on' if analytics.enabled else 'off'})")
    return NavigationResolver(cache=cache, analytics=analytics)


def reset_navigation_resolver():
    get_navigation_resolver.cache_clear()


# Shortcuts over the shared resolver

def get_navigation_for_role(role, permissions=None):
    return get_navigation_resolver().get_navigation_for_role(role, permissions)


def get_grouped_navigation(role, permissions=None):
    return get_navigation_resolver().get_grouped_navigation(role, permissions)


def resolve_navigation(role, current_path=None, permissions=None, user_id=None, tenant_id=None):
    return get_navigation_resolver().resolve(
        role, current_path=current_path, permissions=permissions, user_id=user_id, tenant_id=tenant_id
    )


def invalidate_navigation_cache(role=None):
    cache = get_navigation_resolver().cache
    if role is None:
        cache.clear_all()
    else:
        cache.invalidate_role(role)
