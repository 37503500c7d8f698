# navigation/resolver.py
"""
NAVIGATION RESOLVER
===================

Composes the role registry, the catalog and the permission filter into the
navigation a role actually sees, and marks what is active for a request.

Runtime resolution degrades instead of raising: unknown roles resolve to an
empty navigation and dangling item ids are dropped, both with a warning.
``validate_navigation_config`` is where those problems surface as errors.
"""
import logging
import time
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional

from core.exceptions import ConfigError, ValidationError

from .analytics import NavigationAnalytics, PerformanceMetrics
from .cache import NavigationCacheManager
from .catalog import NAVIGATION_GROUPS, NAVIGATION_ITEMS
from .permissions import PermissionResult, can_access_path, create_permission_context, filter_by_permissions
from .roles import ROLE_REGISTRY, coerce_role, get_role_config
from .types import (
    NavigationGroup,
    NavigationItem,
    Permission,
    RoleConfig,
    RoleNavigationMap,
    UserRole,
    ValidationResult,
)
from .utils import (
    MAX_NAVIGATION_DEPTH,
    flatten_navigation_items,
    group_navigation_items_with_metadata,
    mark_active_items,
    search_navigation_items,
    sort_navigation_groups,
)

logger = logging.getLogger(__name__)


# ============================================================================
# COARSE CATEGORIES
# ============================================================================

NAVIGATION_CATEGORIES = ('main', 'management', 'personal', 'security', 'system')

ITEM_CATEGORIES = {
    'dashboard': 'main',

    'villages': 'management',
    'users': 'management',
    'household-approvals': 'management',
    'active-households': 'management',
    'household-records': 'management',
    'rules': 'management',
    'announcements': 'management',
    'members': 'management',
    'construction-permits': 'management',
    'officer-construction-permits': 'management',
    'sticker-requests': 'management',
    'active-stickers': 'management',
    'resident-inquiries': 'management',

    'visitor-management': 'personal',
    'active-guest-passes': 'personal',
    'household-sticker-requests': 'personal',
    'service-requests': 'personal',
    'announcements-rules': 'personal',
    'fee-status': 'personal',

    'sticker-validation': 'security',
    'guest-registration': 'security',
    'guest-approval-status': 'security',
    'guest-pass-scan': 'security',
    'delivery-logging': 'security',
    'construction-worker-entry': 'security',
    'incident-report': 'security',
    'shift-history': 'security',

    'superadmin-payments': 'system',
    'reports': 'system',
    'fees-management': 'system',
    'payment-status': 'system',
    'manual-payments': 'system',
}


def get_item_category(item_id: str) -> str:
    return ITEM_CATEGORIES.get(item_id, 'main')


# ============================================================================
# RESULT TYPES
# ============================================================================

@dataclass(frozen=True)
class NavigationConfig:
    """The three static tables validated together."""
    items: Mapping[str, NavigationItem] = field(default_factory=lambda: NAVIGATION_ITEMS)
    groups: Mapping[str, NavigationGroup] = field(default_factory=lambda: NAVIGATION_GROUPS)
    roles: Mapping[str, RoleConfig] = field(default_factory=lambda: ROLE_REGISTRY)


@dataclass
class ResolvedNavigation:
    role: str
    items: List[NavigationItem] = field(default_factory=list)
    groups: List[NavigationGroup] = field(default_factory=list)
    sections: List[dict] = field(default_factory=list)
    ungrouped: List[NavigationItem] = field(default_factory=list)
    active_item: Optional[NavigationItem] = None
    permissions: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            'role': self.role,
            'items': [item.to_dict() for item in self.items],
            'groups': [group.to_dict() for group in self.groups],
            'sections': [
                {
                    'group': section['group'].to_dict(),
                    'items': [item.to_dict() for item in section['items']],
                }
                for section in self.sections
            ],
            'ungrouped': [item.to_dict() for item in self.ungrouped],
            'active_item': self.active_item.to_dict() if self.active_item else None,
            'permissions': list(self.permissions),
        }


# ============================================================================
# RESOLVER
# ============================================================================

class NavigationResolver:

    def __init__(self, catalog: Mapping[str, NavigationItem] = None,
                 groups: Mapping[str, NavigationGroup] = None,
                 registry: Mapping[str, RoleConfig] = None,
                 cache: NavigationCacheManager = None,
                 analytics: NavigationAnalytics = None):
        self.catalog = NAVIGATION_ITEMS if catalog is None else catalog
        self.groups = NAVIGATION_GROUPS if groups is None else groups
        self.registry = ROLE_REGISTRY if registry is None else registry
        self.cache = cache or NavigationCacheManager(enabled=False)
        self.analytics = analytics

    def get_role_config(self, role) -> RoleConfig:
        return self.cache.get_role_config(role, lambda: get_role_config(role, self.registry))

    def get_navigation_for_role(self, role, permissions=None) -> RoleNavigationMap:
        """
        Access-filtered navigation for ``role``, top-level items in registry order.

        ``permissions`` overrides the role's registry permissions (e.g. for a
        principal with extra grants).
        """
        try:
            role = coerce_role(role)
            config = self.get_role_config(role)
        except ConfigError as e:
            logger.warning(f"Cannot resolve navigation: {e.message}")
            if self.analytics:
                self.analytics.track_error('invalid_role', e.message, code=e.error_code, user_role=str(role))
            return RoleNavigationMap(role=str(role))

        principal_permissions = tuple(config.permissions if permissions is None else permissions)
        return self.cache.get_filtered_items(
            role, principal_permissions,
            lambda: self._build_role_map(role, config, principal_permissions),
        )

    def _build_role_map(self, role, config: RoleConfig, permissions) -> RoleNavigationMap:
        items = []
        for item_id in config.navigation:
            item = self.catalog.get(item_id)
            if item is None:
                logger.warning(f"Role '{role}' references unknown navigation item '{item_id}', skipping")
                continue
            items.append(item)

        items = filter_by_permissions(items, permissions)

        group_ids = {item.group for item in flatten_navigation_items(items) if item.group}
        groups = sort_navigation_groups(
            self.groups[group_id] for group_id in group_ids if group_id in self.groups
        )

        logger.debug(f"Built navigation for role {role}: {len(items)} items, {len(groups)} groups")
        return RoleNavigationMap(
            role=str(role),
            groups=tuple(groups),
            items=tuple(items),
            permissions=tuple(permissions),
        )

    def get_grouped_navigation(self, role, permissions=None) -> Dict[str, List[NavigationItem]]:
        """Role items bucketed into the coarse categories, empty ones dropped."""
        nav_map = self.get_navigation_for_role(role, permissions)
        if not nav_map.items:
            return {}
        return self.cache.get_grouped_navigation(
            nav_map.role, nav_map.permissions, lambda: self._categorize(nav_map.items)
        )

    def _categorize(self, items) -> Dict[str, List[NavigationItem]]:
        buckets = {category: [] for category in NAVIGATION_CATEGORIES}
        for item in items:
            buckets[get_item_category(item.id)].append(item)
        return {category: bucket for category, bucket in buckets.items() if bucket}

    def resolve(self, role, current_path: str = None, permissions=None,
                user_id=None, tenant_id=None) -> ResolvedNavigation:
        """Navigation for one request, with the active item marked."""
        started = time.perf_counter()
        nav_map = self.get_navigation_for_role(role, permissions)
        filtered_at = time.perf_counter()

        if current_path:
            items, active_item = mark_active_items(nav_map.items, current_path)
        else:
            items, active_item = list(nav_map.items), None

        known_groups = {group.id for group in nav_map.groups}
        resolved = ResolvedNavigation(
            role=nav_map.role,
            items=items,
            groups=list(nav_map.groups),
            sections=group_navigation_items_with_metadata(items, nav_map.groups),
            ungrouped=[item for item in items if item.group not in known_groups],
            active_item=active_item,
            permissions=list(nav_map.permissions),
        )

        if self.analytics:
            finished = time.perf_counter()
            self.analytics.track_render_performance(
                PerformanceMetrics(
                    render_time=(finished - started) * 1000,
                    filter_time=(filtered_at - started) * 1000,
                    total_items=len(self._declared_ids(nav_map.role)),
                    filtered_items=len(items),
                ),
                user_role=nav_map.role,
                user_id=user_id,
                tenant_id=tenant_id,
            )
        return resolved

    def _declared_ids(self, role):
        try:
            return self.get_role_config(role).navigation
        except ConfigError:
            return ()

    def search(self, role, query: str, permissions=None) -> List[NavigationItem]:
        return search_navigation_items(self.get_navigation_for_role(role, permissions).items, query)

    def check_path_access(self, role, path: str, permissions=None, user_id=None) -> PermissionResult:
        """Both the restricted-route and item-permission gates, cached per user."""
        try:
            context = create_permission_context(role, permissions, user_id=user_id)
        except ConfigError:
            return PermissionResult(False, 'Invalid user role', user_role=str(role))

        result = self.cache.get_permission_check(
            user_id, context.role, path, context.permissions, lambda: can_access_path(path, context)
        )
        if self.analytics:
            self.analytics.track_permission_check(
                path, result.allowed, user_role=context.role, user_id=user_id,
                required_permission=result.required_permission,
            )
        return result

    def validate(self) -> ValidationResult:
        return validate_navigation_config(NavigationConfig(self.catalog, self.groups, self.registry))


# ============================================================================
# VALIDATION
# ============================================================================

def validate_navigation_config(config: NavigationConfig = None) -> ValidationResult:
    """
    Consistency check across roles, items and groups.

    Missing roles, unknown roles, dangling item ids, bad permission strings
    and over-deep nesting are errors. Unknown group references and
    duplicate ids in a role's list are warnings.
    """
    config = config or NavigationConfig()
    result = ValidationResult()
    declared_roles = {str(role) for role in config.roles}

    for role in UserRole:
        if role.value not in declared_roles:
            result.add_error(f"Missing navigation configuration for role '{role.value}'")

    for role_key, role_config in config.roles.items():
        role_name = str(role_key)
        if role_name not in UserRole.values:
            result.add_error(f"Unknown role '{role_name}' in navigation configuration")
        if str(role_config.role) != role_name:
            result.add_warning(f"Role '{role_name}' is registered with mismatched role '{role_config.role}'")

        seen = set()
        for item_id in role_config.navigation:
            if item_id not in config.items:
                result.add_error(f"Role '{role_name}' references unknown navigation item '{item_id}'")
            if item_id in seen:
                result.add_warning(f"Role '{role_name}' lists navigation item '{item_id}' more than once")
            seen.add(item_id)

        for permission in role_config.permissions:
            try:
                Permission(permission)
            except ValidationError:
                result.add_error(f"Role '{role_name}' declares invalid permission '{permission}'")

    for item in config.items.values():
        if item.depth > MAX_NAVIGATION_DEPTH:
            result.add_error(
                f"Navigation item '{item.id}' is nested {item.depth} levels deep "
                f"(maximum {MAX_NAVIGATION_DEPTH})"
            )
        for node in flatten_navigation_items([item]):
            if node.group and node.group not in config.groups:
                result.add_warning(f"Navigation item '{node.id}' references unknown group '{node.group}'")

    if result.errors:
        logger.error(f"Navigation configuration invalid: {len(result.errors)} error(s)")
    for warning in result.warnings:
        logger.warning(f"Navigation configuration: {warning}")
    return result
