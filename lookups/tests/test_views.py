# lookups/tests/test_views.py
from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse

from lookups.models import LookupCategory, LookupValue
from lookups.services import reset_lookup_service

User = get_user_model()


class LookupViewsTest(TestCase):
    def setUp(self):
        reset_lookup_service()
        category = LookupCategory.objects.create(code='user_roles', name='User Roles')
        LookupValue.objects.create(category=category, code='admin_head', name='Administrative Head', sort_order=1)
        LookupValue.objects.create(category=category, code='household_head', name='Household Head', sort_order=2)

        self.user = User.objects.create_user(email="resident@example.com", password="testpass123")
        self.client.force_login(self.user)

    def tearDown(self):
        reset_lookup_service()

    def test_category_list(self):
        response = self.client.get(reverse('lookups:categories'))

        self.assertEqual(response.status_code, 200)
        self.assertEqual([c['code'] for c in response.json()['categories']], ['user_roles'])

    def test_values(self):
        response = self.client.get(reverse('lookups:values', args=['user_roles']))

        self.assertEqual(response.status_code, 200)
        self.assertEqual([v['code'] for v in response.json()['values']], ['admin_head', 'household_head'])

    def test_unknown_category_is_empty_not_an_error(self):
        with self.assertLogs('lookups.services', 'WARNING'):
            response = self.client.get(reverse('lookups:values', args=['unknown']))

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['values'], [])

    def test_common(self):
        with self.assertLogs('lookups.services', 'WARNING'):
            data = self.client.get(reverse('lookups:common')).json()

        self.assertEqual(len(data['user_roles']), 2)
        self.assertEqual(data['household_statuses'], [])

    def test_login_required(self):
        self.client.logout()
        self.assertEqual(self.client.get(reverse('lookups:categories')).status_code, 403)
