# users/tests/test_models.py
from django.core.exceptions import ValidationError
from django.db import IntegrityError
from django.test import TestCase

from core.models import Village
from navigation.types import UserRole
from users.models import Profile, User


class UserModelTest(TestCase):
    def test_create_user_with_email(self):
        user = User.objects.create_user(email='Resident@Example.COM', password='testpass123')

        self.assertEqual(user.email, 'Resident@example.com')
        self.assertTrue(user.check_password('testpass123'))
        self.assertFalse(user.is_staff)
        self.assertEqual(str(user), 'Resident@example.com')

    def test_create_user_requires_email(self):
        with self.assertRaises(ValueError):
            User.objects.create_user(email='', password='x')

    def test_create_superuser(self):
        user = User.objects.create_superuser(email='root@example.com', password='x')
        self.assertTrue(user.is_staff)
        self.assertTrue(user.is_superuser)

    def test_user_without_password_cannot_log_in(self):
        user = User.objects.create_user(email='invite@example.com')
        self.assertFalse(user.has_usable_password())


class ProfileModelTest(TestCase):
    def setUp(self):
        self.village = Village.objects.create(name='Green Valley', status=Village.Status.ACTIVE)
        self.user = User.objects.create_user(email='head@example.com', password='x')

    def test_profile_str(self):
        profile = Profile.objects.create(user=self.user, village=self.village, role=UserRole.ADMIN_HEAD)
        self.assertEqual(str(profile), 'head@example.com - Green Valley (Administrative Head)')

    def test_village_required_for_village_roles(self):
        profile = Profile(user=self.user, role=UserRole.HOUSEHOLD_HEAD)
        with self.assertRaises(ValidationError):
            profile.full_clean()

    def test_superadmin_profile_without_village(self):
        profile = Profile(user=self.user, role=UserRole.SUPERADMIN)
        profile.full_clean()
        profile.save()
        self.assertEqual(str(profile), 'head@example.com - Platform (Super Administrator)')

    def test_invalid_extra_permission_rejected(self):
        profile = Profile(user=self.user, village=self.village, role=UserRole.ADMIN_HEAD,
                          extra_permissions=['Manage Everything'])
        with self.assertRaises(ValidationError):
            profile.full_clean()

    def test_one_profile_per_village(self):
        Profile.objects.create(user=self.user, village=self.village, role=UserRole.ADMIN_HEAD)
        with self.assertRaises(IntegrityError):
            Profile.objects.create(user=self.user, village=self.village, role=UserRole.ADMIN_OFFICER)
