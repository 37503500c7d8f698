# users/adapters.py
"""
Account adapter: signup gate, email domain allow-list and village context on login.
"""
import logging

from allauth.account.adapter import DefaultAccountAdapter
from django.apps import apps
from django.conf import settings
from django.core.exceptions import ValidationError

logger = logging.getLogger(__name__)


class VillageAccountAdapter(DefaultAccountAdapter):
    """Custom account adapter for village management system."""

    def is_open_for_signup(self, request):
        """Residents are onboarded by village admins unless registration is opened."""
        return getattr(settings, 'ACCOUNT_ALLOW_REGISTRATION', True)

    def clean_email(self, email):
        """Validate email with additional checks."""
        email = super().clean_email(email).lower()

        allowed_domains = getattr(settings, 'ALLOWED_EMAIL_DOMAINS', [])
        if allowed_domains:
            domain = email.split('@')[-1]
            if domain not in allowed_domains:
                raise ValidationError(
                    f"Email domain {domain} is not allowed. "
                    f"Please use an email from: {', '.join(allowed_domains)}"
                )

        return email

    def pre_login(self, request, user, **kwargs):
        """Default the user's current village to their first active village profile."""
        response = super().pre_login(request, user, **kwargs)

        if not user.current_village_id:
            Profile = apps.get_model('users', 'Profile')
            profile = (
                Profile.objects.filter(user=user, is_active=True, village__isnull=False)
                .order_by('id')
                .first()
            )
            if profile:
                user.current_village = profile.village
                user.save(update_fields=['current_village'])
                logger.info(f"Set current village {profile.village_id} for user {user.pk}")

        return response
