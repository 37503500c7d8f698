# navigation/context_processors.py
import logging

from core.exceptions import VillageManagementException
from users.services import PrincipalService

from .breadcrumbs import generate_smart_breadcrumbs
from .errors import from_exception
from .roles import get_role_display_name
from .services import resolve_navigation

logger = logging.getLogger(__name__)

EMPTY_CONTEXT = {
    'navigation': None,
    'navigation_sections': [],
    'navigation_ungrouped': [],
    'active_navigation_item': None,
    'breadcrumbs': [],
    'navigation_role': None,
    'navigation_role_display': '',
    'navigation_error': None,
}


def navigation_menu(request):
    """Role-based navigation for the requesting user, with the active item and breadcrumbs."""
    user = getattr(request, 'user', None)
    if not user or not user.is_authenticated:
        return dict(EMPTY_CONTEXT)

    try:
        principal = PrincipalService.get_request_principal(request)
        if principal is None:
            return dict(EMPTY_CONTEXT)

        resolved = resolve_navigation(
            principal.role,
            current_path=request.path,
            permissions=principal.permissions,
            user_id=principal.user_id,
            tenant_id=principal.tenant_id,
        )
    except VillageManagementException as e:
        logger.error(f"Navigation context failed for user {user.pk}: {e.message}")
        context = dict(EMPTY_CONTEXT)
        context['navigation_error'] = from_exception(e).to_dict()
        return context

    return {
        'navigation': resolved,
        'navigation_sections': resolved.sections,
        'navigation_ungrouped': resolved.ungrouped,
        'active_navigation_item': resolved.active_item,
        'breadcrumbs': generate_smart_breadcrumbs(request.path, resolved.items),
        'navigation_role': principal.role,
        'navigation_role_display': get_role_display_name(principal.role),
        'navigation_error': None,
    }
