# navigation/tests/test_views.py
from io import StringIO
from unittest import mock

from django.contrib.auth import get_user_model
from django.contrib.auth.models import AnonymousUser
from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import RequestFactory, TestCase, override_settings
from django.urls import reverse

from core.exceptions import LookupFetchError
from core.models import Village
from navigation.checks import check_navigation_config
from navigation.context_processors import navigation_menu
from navigation.services import get_navigation_resolver, reset_navigation_resolver
from navigation.types import UserRole, ValidationResult
from users.models import Profile

User = get_user_model()


class NavigationTestMixin:

    def setUp(self):
        reset_navigation_resolver()
        self.village = Village.objects.create(
            name="Green Valley",
            slug="green-valley",
            status=Village.Status.ACTIVE,
        )

    def tearDown(self):
        reset_navigation_resolver()

    def create_member(self, email, role, **profile_fields):
        user = User.objects.create_user(email=email, password="testpass123")
        Profile.objects.create(user=user, village=self.village, role=role, **profile_fields)
        return user


class NavigationViewTest(NavigationTestMixin, TestCase):

    def test_admin_head_navigation(self):
        self.client.force_login(self.create_member("head@example.com", UserRole.ADMIN_HEAD))

        response = self.client.get(reverse('navigation:navigation'), {'path': '/fees-management'})

        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual(data['role'], 'admin_head')
        self.assertEqual(data['role_display'], 'Administrative Head')
        self.assertEqual([item['id'] for item in data['items']][:3],
                         ['dashboard', 'household-approvals', 'active-households'])
        self.assertEqual(data['active_item']['id'], 'fees-management')
        self.assertTrue(data['access']['allowed'])
        self.assertIn('system', data['categories'])

    def test_restricted_path_is_reported(self):
        self.client.force_login(self.create_member("head@example.com", UserRole.ADMIN_HEAD))

        response = self.client.get(reverse('navigation:navigation'), {'path': '/villages'})

        self.assertEqual(response.status_code, 200)
        self.assertFalse(response.json()['access']['allowed'])
        self.assertIsNone(response.json()['active_item'])

    def test_extra_permissions_are_applied(self):
        user = self.create_member("head@example.com", UserRole.HOUSEHOLD_HEAD,
                                  extra_permissions=['handle_inquiries'])
        self.client.force_login(user)

        data = self.client.get(reverse('navigation:navigation')).json()

        self.assertIn('handle_inquiries', data['permissions'])
        self.assertNotIn('access', data)

    def test_superuser_is_superadmin(self):
        self.client.force_login(User.objects.create_superuser(email="root@example.com", password="x"))

        data = self.client.get(reverse('navigation:navigation')).json()

        self.assertEqual(data['role'], 'superadmin')
        self.assertEqual([item['id'] for item in data['items']],
                         ['dashboard', 'villages', 'users', 'superadmin-payments', 'reports'])

    def test_user_without_profile_is_forbidden(self):
        self.client.force_login(User.objects.create_user(email="nobody@example.com", password="x"))

        response = self.client.get(reverse('navigation:navigation'))

        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.json()['error']['type'], 'permission_denied')

    def test_anonymous_is_rejected(self):
        response = self.client.get(reverse('navigation:navigation'))
        self.assertEqual(response.status_code, 403)


class NavigationSearchAndBreadcrumbViewTest(NavigationTestMixin, TestCase):

    def setUp(self):
        super().setUp()
        self.client.force_login(self.create_member("home@example.com", UserRole.HOUSEHOLD_HEAD))

    def test_search(self):
        data = self.client.get(reverse('navigation:search'), {'q': 'guest'}).json()

        self.assertEqual(data['count'], 1)
        self.assertEqual(data['results'][0]['id'], 'active-guest-passes')

    def test_empty_search(self):
        data = self.client.get(reverse('navigation:search'), {'q': '  '}).json()
        self.assertEqual(data['count'], 0)

    def test_breadcrumbs(self):
        data = self.client.get(reverse('navigation:breadcrumbs'), {'path': '/members/7'}).json()

        self.assertEqual([crumb['label'] for crumb in data['breadcrumbs']], ['Home', 'Members'])
        self.assertEqual(data['schema']['@type'], 'BreadcrumbList')


class NavigationValidationViewTest(NavigationTestMixin, TestCase):

    def test_staff_can_validate(self):
        self.client.force_login(User.objects.create_superuser(email="root@example.com", password="x"))

        data = self.client.get(reverse('navigation:validate')).json()

        self.assertTrue(data['is_valid'])
        self.assertEqual(data['errors'], [])
        self.assertIn('version', data)

    def test_non_staff_is_forbidden(self):
        self.client.force_login(self.create_member("head@example.com", UserRole.ADMIN_HEAD))
        response = self.client.get(reverse('navigation:validate'))
        self.assertEqual(response.status_code, 403)


class NavigationContextProcessorTest(NavigationTestMixin, TestCase):

    def setUp(self):
        super().setUp()
        self.factory = RequestFactory()

    def make_request(self, path, user):
        request = self.factory.get(path)
        request.user = user
        request.village = self.village
        return request

    def test_authenticated_member(self):
        user = self.create_member("guard@example.com", UserRole.SECURITY_OFFICER)

        context = navigation_menu(self.make_request('/incident-report', user))

        self.assertEqual(context['navigation_role'], 'security_officer')
        self.assertEqual(context['active_navigation_item'].id, 'incident-report')
        self.assertEqual([s['group'].id for s in context['navigation_sections']], ['overview', 'security'])
        self.assertEqual([crumb.id for crumb in context['breadcrumbs']], ['home', 'incident-report'])
        self.assertIsNone(context['navigation_error'])

    def test_anonymous_gets_empty_context(self):
        context = navigation_menu(self.make_request('/', AnonymousUser()))

        self.assertIsNone(context['navigation'])
        self.assertEqual(context['navigation_sections'], [])

    def test_user_without_profile_gets_empty_context(self):
        user = User.objects.create_user(email="nobody@example.com", password="x")
        context = navigation_menu(self.make_request('/dashboard', user))
        self.assertIsNone(context['navigation'])

    def test_resolution_failure_is_reported(self):
        user = self.create_member("head@example.com", UserRole.ADMIN_HEAD)
        with mock.patch('navigation.context_processors.resolve_navigation',
                        side_effect=LookupFetchError("backend unavailable")):
            with self.assertLogs('navigation.context_processors', 'ERROR'):
                context = navigation_menu(self.make_request('/dashboard', user))

        self.assertIsNone(context['navigation'])
        self.assertEqual(context['navigation_error']['type'], 'network_error')


class ValidateNavigationCommandTest(TestCase):

    def test_valid_configuration(self):
        out = StringIO()
        call_command('validate_navigation', '--stats', stdout=out)

        output = out.getvalue()
        self.assertIn("Navigation configuration is valid", output)
        self.assertIn("Administrative Head: 8 items", output)
        self.assertIn("Super Administrator: 7 items", output)

    def test_json_output(self):
        out = StringIO()
        call_command('validate_navigation', '--json', stdout=out)
        self.assertIn('"is_valid": true', out.getvalue())

    def test_errors_fail_the_command(self):
        broken = ValidationResult()
        broken.add_error("Role 'admin_head' references unknown navigation item 'nonexistent'")

        with mock.patch('navigation.management.commands.validate_navigation.validate_navigation_config',
                        return_value=broken):
            with self.assertRaises(CommandError):
                call_command('validate_navigation', stdout=StringIO())

    def test_warnings_fail_only_when_asked(self):
        warned = ValidationResult()
        warned.add_warning("Navigation item 'dashboard' references unknown group 'ghost'")

        with mock.patch('navigation.management.commands.validate_navigation.validate_navigation_config',
                        return_value=warned):
            call_command('validate_navigation', stdout=StringIO())
            with self.assertRaises(CommandError):
                call_command('validate_navigation', '--fail-on-warnings', stdout=StringIO())


class NavigationSystemCheckTest(TestCase):

    def test_shipped_configuration_passes(self):
        self.assertEqual(check_navigation_config(), [])

    def test_problems_become_check_messages(self):
        result = ValidationResult()
        result.add_error("Missing navigation configuration for role 'security_officer'")
        result.add_warning("Navigation item 'dashboard' references unknown group 'ghost'")

        with mock.patch('navigation.checks.validate_navigation_config', return_value=result):
            messages = check_navigation_config()

        self.assertEqual([m.id for m in messages], ['navigation.E001', 'navigation.W001'])

    @override_settings(NAVIGATION={'VALIDATE_ON_STARTUP': False})
    def test_check_can_be_disabled(self):
        with mock.patch('navigation.checks.validate_navigation_config') as validate:
            self.assertEqual(check_navigation_config(), [])
        validate.assert_not_called()


class NavigationServiceTest(TestCase):

    def test_resolver_is_shared_until_reset(self):
        resolver = get_navigation_resolver()
        self.assertIs(get_navigation_resolver(), resolver)

        reset_navigation_resolver()
        self.assertIsNot(get_navigation_resolver(), resolver)
