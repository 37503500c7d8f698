# core/tests/test_middleware.py
from django.contrib.auth import get_user_model
from django.contrib.auth.models import AnonymousUser
from django.test import TestCase, RequestFactory

from core.middleware import VillageMiddleware
from core.models import Village
from navigation.types import UserRole
from users.models import Profile

User = get_user_model()


class VillageMiddlewareTest(TestCase):
    def setUp(self):
        self.factory = RequestFactory()
        self.middleware = VillageMiddleware(lambda r: None)

        self.village = Village.objects.create(
            name="Green Valley",
            slug="green-valley",
            status=Village.Status.ACTIVE,
        )
        self.other_village = Village.objects.create(
            name="Blue Ridge",
            slug="blue-ridge",
            status=Village.Status.ACTIVE,
        )
        self.user = User.objects.create_user(
            email="test@example.com",
            password="testpass123"
        )

    def make_request(self, user=None, session=None):
        request = self.factory.get('/')
        request.user = user or AnonymousUser()
        request.session = session if session is not None else {}
        return request

    def test_anonymous_request_has_no_village(self):
        request = self.make_request()
        self.middleware(request)
        self.assertIsNone(request.village)

    def test_session_village_wins(self):
        self.user.current_village = self.village
        self.user.save()
        request = self.make_request(self.user, {'current_village_id': self.other_village.pk})

        self.middleware(request)
        self.assertEqual(request.village, self.other_village)

    def test_inactive_session_village_is_cleared(self):
        self.other_village.status = Village.Status.INACTIVE
        self.other_village.save()
        session = {'current_village_id': self.other_village.pk}
        request = self.make_request(self.user, session)

        with self.assertLogs('core.middleware', 'WARNING'):
            self.middleware(request)

        self.assertIsNone(request.village)
        self.assertNotIn('current_village_id', session)

    def test_current_village_used_when_active(self):
        self.user.current_village = self.village
        self.user.save()

        request = self.make_request(self.user)
        self.middleware(request)
        self.assertEqual(request.village, self.village)

    def test_falls_back_to_first_profile_village(self):
        Profile.objects.create(user=self.user, village=self.other_village, role=UserRole.HOUSEHOLD_HEAD)
        Profile.objects.create(user=self.user, village=self.village, role=UserRole.ADMIN_HEAD)

        request = self.make_request(self.user)
        self.middleware(request)
        self.assertEqual(request.village, self.other_village)

    def test_inactive_current_village_falls_through(self):
        self.village.status = Village.Status.PENDING
        self.village.save()
        self.user.current_village = self.village
        self.user.save()

        request = self.make_request(self.user)
        self.middleware(request)
        self.assertIsNone(request.village)
