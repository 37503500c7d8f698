# navigation/roles.py
"""
ROLE REGISTRY - which navigation entries and permissions each role gets.
"""
import logging
from types import MappingProxyType
from typing import List, Mapping

from core.exceptions import ConfigError

from .types import Permission, RoleConfig, UserRole

logger = logging.getLogger(__name__)


ROLE_REGISTRY: Mapping[str, RoleConfig] = MappingProxyType({
    UserRole.SUPERADMIN: RoleConfig(
        role=UserRole.SUPERADMIN,
        permissions=(Permission.WILDCARD,),
        navigation=(
            'dashboard',
            'villages',
            'users',
            'superadmin-payments',
            'reports',
        ),
        restricted_routes=(),
    ),

    UserRole.ADMIN_HEAD: RoleConfig(
        role=UserRole.ADMIN_HEAD,
        permissions=(
            'manage_households',
            'manage_fees',
            'manage_security',
            'manage_rules',
            'manage_announcements',
            'manage_permits',
            'view_reports',
            'manage_settings',
        ),
        navigation=(
            'dashboard',
            'household-approvals',
            'active-households',
            'fees-management',
            'payment-status',
            'rules',
            'announcements',
            'construction-permits',
        ),
        restricted_routes=('villages', 'users'),
    ),

    UserRole.ADMIN_OFFICER: RoleConfig(
        role=UserRole.ADMIN_OFFICER,
        permissions=(
            'manage_households',
            'manage_fees',
            'manage_stickers',
            'manage_permits',
            'handle_inquiries',
            'view_rules',
            'basic_settings',
        ),
        navigation=(
            'dashboard',
            'household-records',
            'sticker-requests',
            'active-stickers',
            'officer-construction-permits',
            'manual-payments',
            'resident-inquiries',
        ),
        restricted_routes=('villages', 'users', 'security', 'announcements', 'reports'),
    ),

    UserRole.HOUSEHOLD_HEAD: RoleConfig(
        role=UserRole.HOUSEHOLD_HEAD,
        permissions=(
            'manage_household',
            'submit_requests',
            'view_fees',
            'view_deliveries',
            'view_rules',
        ),
        navigation=(
            'dashboard',
            'members',
            'visitor-management',
            'active-guest-passes',
            'household-sticker-requests',
            'service-requests',
            'announcements-rules',
            'fee-status',
        ),
        restricted_routes=(
            'villages', 'users', 'households', 'fees', 'security',
            'announcements', 'settings', 'reports',
        ),
    ),

    UserRole.SECURITY_OFFICER: RoleConfig(
        role=UserRole.SECURITY_OFFICER,
        permissions=(
            'manage_gate_logs',
            'manage_visitors',
            'validate_stickers',
            'log_deliveries',
            'report_incidents',
            'view_incidents',
        ),
        navigation=(
            'dashboard',
            'sticker-validation',
            'guest-registration',
            'guest-approval-status',
            'guest-pass-scan',
            'delivery-logging',
            'construction-worker-entry',
            'incident-report',
            'shift-history',
        ),
        restricted_routes=(
            'villages', 'users', 'households', 'fees', 'security', 'rules',
            'announcements', 'settings', 'reports', 'guards',
        ),
    ),
})

ROLE_LEVELS = {
    UserRole.SUPERADMIN: 100,
    UserRole.ADMIN_HEAD: 80,
    UserRole.ADMIN_OFFICER: 60,
    UserRole.SECURITY_OFFICER: 50,
    UserRole.HOUSEHOLD_HEAD: 40,
}


def coerce_role(role) -> UserRole:
    """Turn a role string into ``UserRole``; unknown roles raise ConfigError."""
    try:
        return UserRole(role)
    except ValueError:
        raise ConfigError(f"Unknown role: {role!r}", details={'role': role})


def get_role_config(role, registry: Mapping[str, RoleConfig] = None) -> RoleConfig:
    registry = ROLE_REGISTRY if registry is None else registry
    role = coerce_role(role)
    config = registry.get(role)
    if config is None:
        raise ConfigError(f"No configuration registered for role: {role}", details={'role': str(role)})
    return config


def get_all_roles() -> List[UserRole]:
    return list(UserRole)


def get_role_navigation(role) -> List[str]:
    return list(get_role_config(role).navigation)


def role_has_permission(role, permission: str) -> bool:
    permissions = get_role_config(role).permissions
    return Permission.WILDCARD in permissions or permission in permissions


def can_access_route(role, route: str) -> bool:
    """Coarse route-name denylist, independent of item permissions."""
    return route not in get_role_config(role).restricted_routes


def get_role_display_name(role) -> str:
    try:
        return coerce_role(role).label
    except ConfigError:
        return str(role)


def get_role_level(role) -> int:
    """Hierarchy level, higher means more privileged."""
    try:
        return ROLE_LEVELS.get(coerce_role(role), 0)
    except ConfigError:
        return 0
