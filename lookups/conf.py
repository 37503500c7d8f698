# lookups/conf.py
"""Lookup settings, read from ``settings.LOOKUPS`` with defaults."""
from django.conf import settings

DEFAULTS = {
    'SOURCE': 'orm',
    'CACHE_TTL': 15 * 60,
    'CACHE_MAX_ENTRIES': 200,
    'REST_URL': '',
    'REST_API_KEY': '',
    'REST_TIMEOUT': 10,
}


def get_setting(name):
    return getattr(settings, 'LOOKUPS', {}).get(name, DEFAULTS[name])
