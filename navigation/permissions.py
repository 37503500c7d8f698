# navigation/permissions.py
"""
NAVIGATION PERMISSIONS
======================

Decides which navigation entries a principal may see. Access denial is not
an exception: denied items are simply left out of the filtered result.
"""
import logging
from dataclasses import dataclass, field, replace
from typing import Iterable, List, Optional, Sequence

from django.utils import timezone

from core.exceptions import ConfigError

from .catalog import get_navigation_item
from .roles import coerce_role, get_role_config
from .types import NavigationItem, Permission
from .utils import find_active_navigation_item, flatten_navigation_items

logger = logging.getLogger(__name__)


# ============================================================================
# 1. RESULT / CONTEXT TYPES
# ============================================================================

@dataclass(frozen=True)
class PermissionResult:
    allowed: bool
    reason: str
    required_permission: Optional[str] = None
    user_role: Optional[str] = None


@dataclass(frozen=True)
class PermissionContext:
    role: str
    permissions: tuple = ()
    user_id: Optional[str] = None
    tenant_id: Optional[str] = None


@dataclass
class SecurityAuditEntry:
    user_role: str
    action: str
    resource: str
    resource_type: str
    reason: str
    user_id: Optional[str] = None
    metadata: dict = field(default_factory=dict)
    timestamp: object = field(default_factory=timezone.now)


# ============================================================================
# 2. PERMISSION CHECKER - SINGLE SOURCE OF TRUTH
# ============================================================================

class PermissionChecker:
    """Centralized permission evaluation used by every navigation surface."""

    @staticmethod
    def has_permission(permission: str, principal_permissions: Iterable[str]) -> bool:
        principal_permissions = set(principal_permissions or ())
        return Permission.WILDCARD in principal_permissions or permission in principal_permissions

    @staticmethod
    def can_access_item(item: NavigationItem, principal_permissions: Iterable[str]) -> bool:
        if not item.permission:
            return True
        return PermissionChecker.has_permission(item.permission, principal_permissions)

    @staticmethod
    def check_item_access(item: NavigationItem, context: PermissionContext) -> PermissionResult:
        """Same decision as ``can_access_item`` with the reason attached."""
        if not item.permission:
            return PermissionResult(True, 'No permission required')

        if Permission.WILDCARD in context.permissions:
            return PermissionResult(True, 'Superadmin access', user_role=context.role)

        if item.permission in context.permissions:
            return PermissionResult(
                True,
                'User has required permission',
                required_permission=item.permission,
                user_role=context.role,
            )

        return PermissionResult(
            False,
            'Insufficient permissions',
            required_permission=item.permission,
            user_role=context.role,
        )


def has_permission(permission: str, principal_permissions: Iterable[str]) -> bool:
    return PermissionChecker.has_permission(permission, principal_permissions)


def can_access_item(item: NavigationItem, principal_permissions: Iterable[str]) -> bool:
    return PermissionChecker.can_access_item(item, principal_permissions)


def check_item_access(item: NavigationItem, context: PermissionContext) -> PermissionResult:
    return PermissionChecker.check_item_access(item, context)


# ============================================================================
# 3. LIST OPERATIONS
# ============================================================================

def filter_by_permissions(items: Sequence[NavigationItem],
                          principal_permissions: Iterable[str]) -> List[NavigationItem]:
    """
    Keep accessible items, pruning inaccessible children.

    A parent stays visible when it is accessible itself, even if every one
    of its children was filtered out.
    """
    principal_permissions = frozenset(principal_permissions or ())
    filtered = []
    for item in items:
        if not can_access_item(item, principal_permissions):
            continue
        if item.children:
            children = tuple(filter_by_permissions(item.children, principal_permissions))
            if children != item.children:
                item = replace(item, children=children)
        filtered.append(item)
    return filtered


def get_required_permissions(items: Sequence[NavigationItem]) -> List[str]:
    """Unique permissions required anywhere in the tree, in first-seen order."""
    seen = []
    for item in flatten_navigation_items(items):
        if item.permission and item.permission not in seen:
            seen.append(item.permission)
    return seen


def validate_user_permissions(items: Sequence[NavigationItem],
                              principal_permissions: Iterable[str]) -> dict:
    """
    Report which permissions would unlock more of ``items``.

    Missing permissions are informational: ``valid`` is False only to flag
    that some entries are hidden from this principal.
    """
    principal_permissions = list(principal_permissions or ())
    required = get_required_permissions(items)

    if Permission.WILDCARD in principal_permissions:
        missing = []
    else:
        missing = [perm for perm in required if perm not in principal_permissions]

    if missing:
        logger.debug(f"Principal lacks navigation permissions: {', '.join(missing)}")

    return {
        'valid': not missing,
        'missing_permissions': missing,
        'accessible_items': filter_by_permissions(items, principal_permissions),
    }


def validate_multiple_items(items: Sequence[NavigationItem], context: PermissionContext) -> List[dict]:
    return [
        {'item': item, 'result': check_item_access(item, context)}
        for item in items
    ]


# ============================================================================
# 4. ROLE-AWARE CHECKS
# ============================================================================

def create_permission_context(role, permissions=None, user_id=None, tenant_id=None) -> PermissionContext:
    """Build a context, defaulting to the role's registry permissions."""
    role = coerce_role(role)
    if permissions is None:
        permissions = get_role_config(role).permissions

    return PermissionContext(
        role=role,
        permissions=tuple(permissions),
        user_id=str(user_id) if user_id is not None else None,
        tenant_id=str(tenant_id) if tenant_id is not None else None,
    )


def can_access_path(path: str, context: PermissionContext) -> PermissionResult:
    """
    Both gates apply: the role's restricted route names and the item-level
    permission of the navigation entry that owns ``path``.
    """
    try:
        role_config = get_role_config(context.role)
    except ConfigError:
        return PermissionResult(False, 'Invalid user role', user_role=context.role)

    route_name = path.strip('/').split('/', 1)[0]
    if route_name in role_config.restricted_routes:
        return PermissionResult(False, f"Route '{route_name}' is restricted for this role",
                                user_role=context.role)

    items = [item for item in map(get_navigation_item, role_config.navigation) if item]
    item = find_active_navigation_item(items, path)
    if item is None:
        return PermissionResult(False, 'Route not found in navigation configuration',
                                user_role=context.role)

    return check_item_access(item, context)


def can_access_role_navigation(user_role, target_role, principal_permissions) -> PermissionResult:
    if str(user_role) == str(target_role):
        return PermissionResult(True, 'User accessing own role navigation')

    if Permission.WILDCARD in (principal_permissions or ()):
        return PermissionResult(True, 'Superadmin can access all role navigation')

    return PermissionResult(
        False,
        f"Cross-role navigation access denied: {user_role} cannot access {target_role} navigation",
        user_role=user_role,
    )


def create_security_audit_entry(result: PermissionResult, context: PermissionContext,
                                resource: str, resource_type: str = 'navigation_item') -> SecurityAuditEntry:
    return SecurityAuditEntry(
        user_id=context.user_id,
        user_role=context.role,
        action='access_granted' if result.allowed else 'access_denied',
        resource=resource,
        resource_type=resource_type,
        reason=result.reason or 'Unknown',
        metadata={
            'required_permission': result.required_permission,
            'user_permissions': list(context.permissions),
        },
    )
