# users/services.py
"""
PRINCIPAL SERVICE - who is asking, and with which role/permissions.

The navigation engine never looks at users or sessions itself; it is handed
the ``Principal`` resolved here.
"""
import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from django.apps import apps

from core.exceptions import AuthenticationError, ConfigError, ValidationError
from navigation.roles import get_role_config
from navigation.types import Permission, UserRole

logger = logging.getLogger(__name__)


def _get_model(model_name, app_label='users'):
    """Get model lazily to avoid circular imports."""
    try:
        return apps.get_model(app_label, model_name)
    except LookupError as e:
        logger.error(f"Model not found: {app_label}.{model_name} - {e}")
        raise


@dataclass(frozen=True)
class Principal:
    role: str
    permissions: Tuple[str, ...]
    user_id: Optional[str] = None
    tenant_id: Optional[str] = None

    @property
    def is_superadmin(self) -> bool:
        return Permission.WILDCARD in self.permissions


class PrincipalService:
    """Resolves the ``(role, permissions)`` pair for an authenticated user."""

    @staticmethod
    def get_profile(user, village=None):
        """
        The user's active profile for ``village``.

        Without a village the platform-level (village-less) profile is
        preferred, then the user's first active profile.
        """
        Profile = _get_model('Profile')
        profiles = Profile.objects.filter(user=user, is_active=True).select_related('village')

        if village is not None:
            return profiles.filter(village=village).first()

        return (
            profiles.filter(village__isnull=True).first()
            or profiles.order_by('id').first()
        )

    @staticmethod
    def get_permissions(role, extra_permissions=()) -> Tuple[str, ...]:
        """Role defaults plus valid extras, first-seen order, no duplicates."""
        try:
            permissions = list(get_role_config(role).permissions)
        except ConfigError as e:
            logger.warning(f"Profile role has no configuration: {e.message}")
            permissions = []

        for permission in extra_permissions or ():
            try:
                permission = Permission(permission)
            except ValidationError as e:
                logger.warning(f"Ignoring invalid extra permission {permission!r}: {e.message}")
                continue
            if permission not in permissions:
                permissions.append(str(permission))
        return tuple(permissions)

    @classmethod
    def get_principal(cls, user, village=None) -> Optional[Principal]:
        """
        Principal for ``user`` in ``village``.

        Superusers are always superadmins. Returns None for an authenticated
        user with no matching profile.

        Raises:
            AuthenticationError: the user is anonymous
        """
        if user is None or not user.is_authenticated:
            raise AuthenticationError("Authentication required to resolve navigation")

        tenant_id = str(village.pk) if village is not None else None

        if user.is_superuser:
            return Principal(
                role=UserRole.SUPERADMIN.value,
                permissions=(Permission.WILDCARD,),
                user_id=str(user.pk),
                tenant_id=tenant_id,
            )

        profile = cls.get_profile(user, village)
        if profile is None:
            logger.info(f"No active profile for user {user.pk} in village {tenant_id}")
            return None

        return Principal(
            role=profile.role,
            permissions=cls.get_permissions(profile.role, profile.extra_permissions),
            user_id=str(user.pk),
            tenant_id=str(profile.village_id) if profile.village_id else tenant_id,
        )

    @classmethod
    def get_request_principal(cls, request) -> Optional[Principal]:
        """Principal for ``request.user`` in ``request.village``; None when anonymous."""
        user = getattr(request, 'user', None)
        if user is None or not user.is_authenticated:
            return None
        return cls.get_principal(user, getattr(request, 'village', None))
