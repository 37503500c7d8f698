# config/views.py
"""
Project-level views: health check and JSON error handlers.
"""
import logging

from django.db import DatabaseError, connection
from django.http import JsonResponse
from django.utils import timezone

from navigation.catalog import NAVIGATION_VERSION
from navigation.resolver import validate_navigation_config

logger = logging.getLogger(__name__)


# ============================================================================
# HEALTH & STATUS
# ============================================================================

def health_check_view(request):
    """System health check endpoint."""
    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
        db_status = True
    except DatabaseError as e:
        logger.error(f"Health check database failure: {e}")
        db_status = False

    navigation_valid = validate_navigation_config().is_valid
    healthy = db_status and navigation_valid

    return JsonResponse({
        'status': 'healthy' if healthy else 'unhealthy',
        'database': 'connected' if db_status else 'disconnected',
        'navigation': 'valid' if navigation_valid else 'invalid',
        'navigation_version': NAVIGATION_VERSION,
        'timestamp': timezone.now().isoformat(),
    }, status=200 if healthy else 503)


# ============================================================================
# ERROR HANDLERS
# ============================================================================

def _error_response(status, message):
    return JsonResponse({'error': {'status': status, 'message': message}}, status=status)


def handler400(request, exception):
    return _error_response(400, 'Your request could not be processed.')


def handler403(request, exception):
    return _error_response(403, 'You do not have permission to access this page.')


def handler404(request, exception):
    return _error_response(404, 'The page you are looking for does not exist.')


def handler500(request):
    return _error_response(500, 'Something went wrong on our end.')
