# navigation/checks.py
"""
System checks that surface navigation misconfiguration at boot
(``manage.py check``, ``runserver``, ``migrate`` ...).
"""
from django.core.checks import Error, Tags, Warning, register

from .conf import get_setting
from .resolver import validate_navigation_config


@register(Tags.compatibility, 'navigation')
def check_navigation_config(app_configs=None, **kwargs):
    if not get_setting('VALIDATE_ON_STARTUP'):
        return []

    result = validate_navigation_config()
    messages = [
        Error(error, hint='Fix the role registry or the navigation catalog.', id='navigation.E001')
        for error in result.errors
    ]
    messages += [
        Warning(warning, hint='Navigation still renders; review the catalog and role registry.', id='navigation.W001')
        for warning in result.warnings
    ]
    return messages
