# navigation/types.py
"""
Value types shared by the navigation engine.

Items and groups are frozen so the catalog can be shared across requests
and threads; per-request state (``is_active``) is applied to copies made
with ``dataclasses.replace``.
"""
import re
from dataclasses import dataclass, field, asdict
from typing import Optional, Tuple, Union

from django.db import models

from core.exceptions import ValidationError


class UserRole(models.TextChoices):
    SUPERADMIN = 'superadmin', 'Super Administrator'
    ADMIN_HEAD = 'admin_head', 'Administrative Head'
    ADMIN_OFFICER = 'admin_officer', 'Administrative Officer'
    HOUSEHOLD_HEAD = 'household_head', 'Household Head'
    SECURITY_OFFICER = 'security_officer', 'Security Officer'


class Permission(str):
    """A validated permission identifier, or the ``*`` wildcard."""

    WILDCARD = '*'
    PATTERN = re.compile(r'^[a-z][a-z0-9_]*$')

    def __new__(cls, value):
        value = str(value).strip()
        if value != cls.WILDCARD and not cls.PATTERN.match(value):
            raise ValidationError(
                f"Invalid permission identifier: {value!r}",
                details={'permission': value},
            )
        return super().__new__(cls, value)

    @property
    def is_wildcard(self) -> bool:
        return self == self.WILDCARD


DEFAULT_GROUP = 'default'


@dataclass(frozen=True)
class ItemMetadata:
    description: Optional[str] = None
    badge: Optional[Union[str, int]] = None
    external: bool = False


@dataclass(frozen=True)
class NavigationItem:
    id: str
    label: str
    href: str
    icon: Optional[str] = None
    permission: Optional[str] = None
    group: Optional[str] = None
    order: int = 0
    children: Tuple['NavigationItem', ...] = ()
    metadata: Optional[ItemMetadata] = None
    parent_id: Optional[str] = None
    is_active: bool = False

    def __post_init__(self):
        if not isinstance(self.children, tuple):
            object.__setattr__(self, 'children', tuple(self.children or ()))

    @property
    def has_children(self) -> bool:
        return bool(self.children)

    @property
    def depth(self) -> int:
        """Number of levels in this subtree (1 for a leaf)."""
        if not self.children:
            return 1
        return 1 + max(child.depth for child in self.children)

    def to_dict(self) -> dict:
        data = asdict(self)
        data['children'] = [child.to_dict() for child in self.children]
        return data


@dataclass(frozen=True)
class NavigationGroup:
    id: str
    label: str
    icon: Optional[str] = None
    order: int = 0
    collapsible: bool = True
    collapsed: bool = False

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class RoleConfig:
    role: str
    permissions: Tuple[str, ...]
    navigation: Tuple[str, ...]
    restricted_routes: Tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {
            'role': self.role,
            'permissions': list(self.permissions),
            'navigation_item_ids': list(self.navigation),
            'restricted_routes': list(self.restricted_routes),
        }


@dataclass(frozen=True)
class RoleNavigationMap:
    """The materialized, access-filtered navigation of one role."""
    role: str
    groups: Tuple[NavigationGroup, ...] = ()
    items: Tuple[NavigationItem, ...] = ()
    permissions: Tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {
            'role': self.role,
            'groups': [group.to_dict() for group in self.groups],
            'items': [item.to_dict() for item in self.items],
            'permissions': list(self.permissions),
        }


@dataclass
class ValidationResult:
    is_valid: bool = True
    errors: list = field(default_factory=list)
    warnings: list = field(default_factory=list)

    def add_error(self, message: str):
        self.errors.append(message)
        self.is_valid = False

    def add_warning(self, message: str):
        self.warnings.append(message)

    def to_dict(self) -> dict:
        return asdict(self)
