# users/tests/test_services.py
from django.contrib.auth.models import AnonymousUser
from django.core.exceptions import ValidationError as DjangoValidationError
from django.test import RequestFactory, TestCase, override_settings

from core.exceptions import AuthenticationError
from core.models import Village
from navigation.types import UserRole
from users.adapters import VillageAccountAdapter
from users.models import Profile, User
from users.services import Principal, PrincipalService


class PrincipalServiceTest(TestCase):
    def setUp(self):
        self.village = Village.objects.create(name='Green Valley', status=Village.Status.ACTIVE)
        self.other_village = Village.objects.create(name='Blue Ridge', status=Village.Status.ACTIVE)
        self.user = User.objects.create_user(email='head@example.com', password='testpass123')

    def test_role_permissions_come_from_registry(self):
        Profile.objects.create(user=self.user, village=self.village, role=UserRole.ADMIN_OFFICER)

        principal = PrincipalService.get_principal(self.user, self.village)

        self.assertEqual(principal.role, 'admin_officer')
        self.assertIn('manage_stickers', principal.permissions)
        self.assertEqual(principal.tenant_id, str(self.village.pk))
        self.assertEqual(principal.user_id, str(self.user.pk))
        self.assertFalse(principal.is_superadmin)

    def test_profile_is_chosen_per_village(self):
        Profile.objects.create(user=self.user, village=self.village, role=UserRole.ADMIN_HEAD)
        Profile.objects.create(user=self.user, village=self.other_village, role=UserRole.HOUSEHOLD_HEAD)

        self.assertEqual(PrincipalService.get_principal(self.user, self.village).role, 'admin_head')
        self.assertEqual(PrincipalService.get_principal(self.user, self.other_village).role, 'household_head')

    def test_extra_permissions_are_merged(self):
        Profile.objects.create(
            user=self.user,
            village=self.village,
            role=UserRole.HOUSEHOLD_HEAD,
            extra_permissions=['view_reports', 'view_fees', 'Not Valid'],
        )

        with self.assertLogs('users.services', 'WARNING'):
            principal = PrincipalService.get_principal(self.user, self.village)

        self.assertEqual(principal.permissions.count('view_fees'), 1)
        self.assertEqual(principal.permissions[-1], 'view_reports')
        self.assertNotIn('Not Valid', principal.permissions)

    def test_inactive_profile_is_ignored(self):
        Profile.objects.create(user=self.user, village=self.village, role=UserRole.ADMIN_HEAD, is_active=False)
        self.assertIsNone(PrincipalService.get_principal(self.user, self.village))

    def test_superuser_is_superadmin_everywhere(self):
        root = User.objects.create_superuser(email='root@example.com', password='x')

        principal = PrincipalService.get_principal(root, self.village)

        self.assertEqual(principal, Principal(
            role='superadmin',
            permissions=('*',),
            user_id=str(root.pk),
            tenant_id=str(self.village.pk),
        ))
        self.assertTrue(principal.is_superadmin)

    def test_platform_profile_is_preferred_without_village(self):
        Profile.objects.create(user=self.user, village=self.village, role=UserRole.ADMIN_HEAD)
        Profile.objects.create(user=self.user, village=None, role=UserRole.SUPERADMIN)

        principal = PrincipalService.get_principal(self.user)

        self.assertEqual(principal.role, 'superadmin')
        self.assertIsNone(principal.tenant_id)

    def test_anonymous_user_raises(self):
        with self.assertRaises(AuthenticationError):
            PrincipalService.get_principal(AnonymousUser())

    def test_request_principal(self):
        Profile.objects.create(user=self.user, village=self.village, role=UserRole.SECURITY_OFFICER)
        request = RequestFactory().get('/')
        request.user = self.user
        request.village = self.village

        self.assertEqual(PrincipalService.get_request_principal(request).role, 'security_officer')

        request.user = AnonymousUser()
        self.assertIsNone(PrincipalService.get_request_principal(request))

    def test_unknown_role_has_no_permissions(self):
        with self.assertLogs('users.services', 'WARNING'):
            self.assertEqual(PrincipalService.get_permissions('mayor', ['view_fees']), ('view_fees',))


class VillageAccountAdapterTest(TestCase):
    def setUp(self):
        self.adapter = VillageAccountAdapter()

    @override_settings(ALLOWED_EMAIL_DOMAINS=['greenvalley.ph'])
    def test_email_domain_allow_list(self):
        self.assertEqual(self.adapter.clean_email('Head@GreenValley.ph'), 'head@greenvalley.ph')
        with self.assertRaises(DjangoValidationError):
            self.adapter.clean_email('someone@gmail.com')

    @override_settings(ACCOUNT_ALLOW_REGISTRATION=False)
    def test_signup_can_be_closed(self):
        self.assertFalse(self.adapter.is_open_for_signup(RequestFactory().get('/')))
