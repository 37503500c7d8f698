# settings/development.py
"""
Development settings for the VillageHub project.
"""
from .base import *

DEBUG = True
ALLOWED_HOSTS = ['localhost', '127.0.0.1', '0.0.0.0', 'testserver']

INTERNAL_IPS = [
    '127.0.0.1',
    'localhost',
]

DATABASES['default'].update({
    'ATOMIC_REQUESTS': True,
})

EMAIL_BACKEND = 'django.core.mail.backends.console.EmailBackend'

# Update existing logging config safely
if 'handlers' not in LOGGING:
    LOGGING['handlers'] = {}

LOGGING['handlers']['file'] = {
    'level': 'DEBUG',
    'class': 'logging.FileHandler',
    'filename': BASE_DIR / 'logs' / 'development.log',
    'formatter': 'verbose',
}

if 'loggers' not in LOGGING:
    LOGGING['loggers'] = {}

LOGGING['loggers']['django'] = LOGGING.get('loggers', {}).get('django', {})
LOGGING['loggers']['django']['handlers'] = ['console', 'file']
LOGGING['loggers']['django']['level'] = 'INFO'

for app_logger in ('navigation', 'lookups'):
    LOGGING['loggers'][app_logger] = {
        'handlers': ['console', 'file'],
        'level': 'DEBUG',
        'propagate': False,
    }

# Disable security settings for development
SESSION_COOKIE_SECURE = False
CSRF_COOKIE_SECURE = False
SECURE_SSL_REDIRECT = False

CORS_ALLOW_ALL_ORIGINS = True

# Allauth development settings
ACCOUNT_EMAIL_VERIFICATION = 'none'
