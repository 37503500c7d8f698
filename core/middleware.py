# core/middleware.py
"""
Village (tenant) resolution for every request.
"""
import logging

from django.apps import apps

logger = logging.getLogger(__name__)


def _get_model(model_name: str, app_label: str):
    """Get model lazily to avoid circular imports."""
    try:
        return apps.get_model(app_label, model_name)
    except LookupError as e:
        logger.error(f"Model not found: {app_label}.{model_name} - {e}")
        raise


class VillageMiddleware:
    """
    Determines the active village using this order:
    1. Session:  session['current_village_id']
    2. User:     user.current_village, when active
    3. Profile:  the user's first active village profile
    """

    SESSION_KEY = 'current_village_id'

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        request.village = None

        try:
            request.village = (
                self._resolve_session(request)
                or self._resolve_current_village(request)
                or self._resolve_profile(request)
            )
        except Exception as e:
            logger.error(f"Village resolution failed: {e}")

        return self.get_response(request)

    def _resolve_session(self, request):
        session = getattr(request, 'session', None)
        if session is None:
            return None

        village_id = session.get(self.SESSION_KEY)
        if not village_id:
            return None

        Village = _get_model('Village', 'core')
        village = Village.objects.filter(id=village_id, status=Village.Status.ACTIVE).first()
        if village is None:
            logger.warning(f"Session village {village_id} not found or inactive, clearing")
            session.pop(self.SESSION_KEY, None)
        return village

    def _resolve_current_village(self, request):
        user = getattr(request, 'user', None)
        if not user or not user.is_authenticated:
            return None

        village = getattr(user, 'current_village', None)
        if village is not None and village.is_active:
            return village
        return None

    def _resolve_profile(self, request):
        user = getattr(request, 'user', None)
        if not user or not user.is_authenticated:
            return None

        Profile = _get_model('Profile', 'users')
        profile = (
            Profile.objects.select_related('village')
            .filter(user=user, is_active=True, village__isnull=False)
            .order_by('id')
            .first()
        )
        return profile.village if profile else None
