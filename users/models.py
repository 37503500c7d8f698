# users/models.py
from django.contrib.auth.models import AbstractUser
from django.db import models
from django.conf import settings
from django.utils.translation import gettext_lazy as _
import logging

from navigation.types import Permission, UserRole

from .managers import UserManager

logger = logging.getLogger(__name__)


class User(AbstractUser):
    """Custom user model for multi-tenant support."""

    username = models.CharField(
        _("username"),
        max_length=150,
        blank=True,
        null=True,
        help_text=_("Optional. 150 characters or fewer."),
    )

    email = models.EmailField(_("email address"), unique=True)
    phone_number = models.CharField(max_length=20, blank=True, null=True)

    # Use string reference to avoid circular import
    current_village = models.ForeignKey(
        "core.Village",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='current_users'
    )

    objects = UserManager()

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = []

    class Meta:
        db_table = 'auth_user'
        indexes = [
            models.Index(fields=['email'], name='users_user_email_idx'),
            models.Index(fields=['phone_number'], name='users_user_phone_idx'),
        ]

    def __str__(self):
        return self.email


class Profile(models.Model):
    """A user's role inside one village. Superadmin profiles have no village."""
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='profiles')
    village = models.ForeignKey(
        "core.Village",
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='profiles'
    )
    role = models.CharField(max_length=32, choices=UserRole.choices)
    extra_permissions = models.JSONField(
        default=list,
        blank=True,
        help_text="Permissions granted on top of the role's defaults"
    )
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'users_profile'
        unique_together = ['user', 'village']
        indexes = [
            models.Index(fields=['user', 'village'], name='users_profile_user_village_idx'),
        ]

    def __str__(self):
        village = self.village.name if self.village else 'Platform'
        return f"{self.user.email} - {village} ({self.get_role_display()})"

    def clean(self):
        from django.core.exceptions import ValidationError as DjangoValidationError
        from core.exceptions import ValidationError

        if self.role != UserRole.SUPERADMIN and not self.village_id:
            raise DjangoValidationError({'village': 'Village is required for this role.'})

        for permission in self.extra_permissions or []:
            try:
                Permission(permission)
            except ValidationError as e:
                raise DjangoValidationError({'extra_permissions': e.message})
