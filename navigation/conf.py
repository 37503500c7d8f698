# navigation/conf.py
"""Navigation settings, read from ``settings.NAVIGATION`` with defaults."""
from django.conf import settings

DEFAULTS = {
    'CACHE_ENABLED': True,
    'CACHE_TTL': 5 * 60,
    'CACHE_MAX_ENTRIES': 100,
    'PERMISSION_CACHE_TTL': 2 * 60,
    'ANALYTICS_ENABLED': True,
    'ANALYTICS_MAX_EVENTS': 1000,
    'VALIDATE_ON_STARTUP': True,
}


def get_setting(name):
    return getattr(settings, 'NAVIGATION', {}).get(name, DEFAULTS[name])
