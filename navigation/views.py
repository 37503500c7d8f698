# navigation/views.py
"""
JSON endpoints over the navigation engine (session-authenticated).
"""
import logging

from rest_framework import status
from rest_framework.permissions import IsAdminUser, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from core.exceptions import (
    AuthenticationError,
    LookupFetchError,
    RolePermissionError,
    VillageManagementException,
)
from users.services import PrincipalService

from .breadcrumbs import generate_smart_breadcrumbs, get_breadcrumb_schema
from .catalog import NAVIGATION_VERSION
from .errors import from_exception
from .roles import get_role_display_name
from .services import get_navigation_resolver

logger = logging.getLogger(__name__)


class NavigationAPIView(APIView):
    """Resolves the caller's principal and renders core exceptions as navigation errors."""
    permission_classes = [IsAuthenticated]

    def get_principal(self, request):
        principal = PrincipalService.get_request_principal(request)
        if principal is None:
            raise RolePermissionError("No active profile for the current village")
        return principal

    def handle_exception(self, exc):
        if isinstance(exc, VillageManagementException):
            if isinstance(exc, (RolePermissionError, AuthenticationError)):
                status_code = status.HTTP_403_FORBIDDEN
            elif isinstance(exc, LookupFetchError):
                status_code = status.HTTP_502_BAD_GATEWAY
            else:
                status_code = status.HTTP_400_BAD_REQUEST
            logger.warning(f"{self.__class__.__name__} failed [{exc.error_code}]: {exc.message}")
            return Response({'error': from_exception(exc).to_dict()}, status=status_code)
        return super().handle_exception(exc)


class NavigationView(NavigationAPIView):
    """GET /navigation/?path=/current/path"""

    def get(self, request):
        principal = self.get_principal(request)
        path = request.query_params.get('path')
        resolver = get_navigation_resolver()

        resolved = resolver.resolve(
            principal.role,
            current_path=path,
            permissions=principal.permissions,
            user_id=principal.user_id,
            tenant_id=principal.tenant_id,
        )
        data = resolved.to_dict()
        data['role_display'] = get_role_display_name(principal.role)
        data['version'] = NAVIGATION_VERSION
        data['categories'] = {
            category: [item.id for item in items]
            for category, items in resolver.get_grouped_navigation(principal.role, principal.permissions).items()
        }

        if path:
            access = resolver.check_path_access(
                principal.role, path, permissions=principal.permissions, user_id=principal.user_id
            )
            data['access'] = {
                'allowed': access.allowed,
                'reason': access.reason,
                'required_permission': access.required_permission,
            }
        return Response(data)


class NavigationSearchView(NavigationAPIView):
    """GET /navigation/search/?q=term"""

    def get(self, request):
        principal = self.get_principal(request)
        query = request.query_params.get('q', '').strip()
        if not query:
            return Response({'query': query, 'count': 0, 'results': []})

        results = get_navigation_resolver().search(principal.role, query, principal.permissions)
        return Response({
            'query': query,
            'count': len(results),
            'results': [item.to_dict() for item in results],
        })


class BreadcrumbView(NavigationAPIView):
    """GET /navigation/breadcrumbs/?path=/current/path"""

    def get(self, request):
        principal = self.get_principal(request)
        path = request.query_params.get('path', '/')

        nav_map = get_navigation_resolver().get_navigation_for_role(principal.role, principal.permissions)
        breadcrumbs = generate_smart_breadcrumbs(path, nav_map.items)
        return Response({
            'path': path,
            'breadcrumbs': [crumb.to_dict() for crumb in breadcrumbs],
            'schema': get_breadcrumb_schema(breadcrumbs),
        })


class NavigationValidationView(NavigationAPIView):
    """GET /navigation/validate/ (staff only)"""
    permission_classes = [IsAdminUser]

    def get(self, request):
        result = get_navigation_resolver().validate()
        data = result.to_dict()
        data['version'] = NAVIGATION_VERSION
        return Response(data)
