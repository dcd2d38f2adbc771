"""
Test suite for Core module
Tests: Registration, Login, Token refresh, Current user, Agency scoping, create_system_admin command, Test runner labels
"""
from io import StringIO
from django.core.management import call_command
from django.core.management.base import CommandError
from django.conf import settings
from django.test import SimpleTestCase, TestCase, RequestFactory
from rest_framework import status
from rest_framework_simplejwt.tokens import AccessToken, RefreshToken
from fieldops.core.models import Agency, User
from fieldops.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from fieldops.core.utils import get_effective_agency_id
from fieldops.run_tests import resolve_labels


class RegisterTests(TestCase):
    """Test agency registration"""

    def setUp(self):
        self.client = AuthenticatedAPIClient()
        self.payload = {
            'username': 'acme_owner',
            'email': 'owner@acme.test',
            'password': 'Str0ng-pass-42',
            'agency_name': 'Acme Field Marketing',
            'admin_name': 'Dana',
        }

    def test_register_creates_agency_and_user(self):
        """Test registration returns the new user, agency and tokens"""
        response = self.client.post('/api/v1/auth/register/', self.payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertIn('access', response.data)
        self.assertIn('refresh', response.data)

        user = User.objects.get(username='acme_owner')
        self.assertEqual(user.role, User.ROLE_AGENCY)
        self.assertEqual(user.agency.name, 'Acme Field Marketing')
        self.assertEqual(response.data['agency']['id'], user.agency_id)

    def test_register_duplicate_username(self):
        """Test registering an existing username is rejected"""
        TestDataFactory.create_user(username='acme_owner')
        response = self.client.post('/api/v1/auth/register/', self.payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('username', response.data)
        self.assertFalse(Agency.objects.filter(name='Acme Field Marketing').exists())

    def test_register_missing_fields(self):
        response = self.client.post('/api/v1/auth/register/', {'username': 'x'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class AuthTests(TestCase):
    """Test login, refresh and current user"""

    def setUp(self):
        self.user = TestDataFactory.create_user(username='agency_user', password='testpass123')
        self.client = AuthenticatedAPIClient()

    def test_login(self):
        """Test login returns tokens carrying role and agency claims"""
        response = self.client.post('/api/v1/auth/login/', {
            'username': 'agency_user', 'password': 'testpass123',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['user']['username'], 'agency_user')

        token = AccessToken(response.data['access'])
        self.assertEqual(token['role'], User.ROLE_AGENCY)
        self.assertEqual(token['agency_id'], self.user.agency_id)

    def test_login_wrong_password(self):
        response = self.client.post('/api/v1/auth/login/', {
            'username': 'agency_user', 'password': 'nope',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_login_disabled_user(self):
        self.user.is_active = False
        self.user.save()
        response = self.client.post('/api/v1/auth/login/', {
            'username': 'agency_user', 'password': 'testpass123',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_refresh(self):
        refresh = RefreshToken.for_user(self.user)
        response = self.client.post('/api/v1/auth/refresh/', {'refresh': str(refresh)}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('access', response.data)

    def test_refresh_invalid_token(self):
        response = self.client.post('/api/v1/auth/refresh/', {'refresh': 'not-a-token'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_me(self):
        """Test current user endpoint"""
        self.client.authenticate_user(self.user)
        response = self.client.get('/api/v1/auth/me/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['role'], User.ROLE_AGENCY)
        self.assertEqual(response.data['agency']['id'], self.user.agency_id)
        self.assertFalse(response.data['is_system_admin'])

    def test_me_system_admin(self):
        admin = TestDataFactory.create_system_admin()
        self.client.authenticate_user(admin)
        response = self.client.get('/api/v1/auth/me/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIsNone(response.data['agency'])
        self.assertTrue(response.data['is_system_admin'])

    def test_me_unauthenticated(self):
        response = self.client.get('/api/v1/auth/me/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


class AgencyScopeTests(TestCase):
    """Test agency scope resolution"""

    def setUp(self):
        self.factory = RequestFactory()

    def _request(self, user):
        request = self.factory.get('/')
        request.user = user
        return request

    def test_agency_user_ignores_requested_agency(self):
        user = TestDataFactory.create_user()
        other = TestDataFactory.create_agency()
        self.assertEqual(get_effective_agency_id(self._request(user), str(other.id)), user.agency_id)

    def test_system_admin_uses_requested_agency(self):
        admin = TestDataFactory.create_system_admin()
        self.assertEqual(get_effective_agency_id(self._request(admin), '42'), 42)
        self.assertIsNone(get_effective_agency_id(self._request(admin), None))
        self.assertIsNone(get_effective_agency_id(self._request(admin), 'abc'))


class CreateSystemAdminCommandTests(TestCase):
    """Test the create_system_admin management command"""

    def test_creates_system_admin(self):
        out = StringIO()
        call_command('create_system_admin', '--username', 'root', '--password', 'S3cure-pass', stdout=out)
        admin = User.objects.get(username='root')
        self.assertEqual(admin.role, User.ROLE_SYSTEM_ADMIN)
        self.assertIsNone(admin.agency)
        self.assertTrue(admin.is_staff)
        self.assertTrue(admin.check_password('S3cure-pass'))
        self.assertIn('System admin created', out.getvalue())

    def test_existing_user_is_left_alone(self):
        TestDataFactory.create_user(username='root')
        out = StringIO()
        call_command('create_system_admin', '--username', 'root', '--password', 'S3cure-pass', stdout=out)
        self.assertEqual(User.objects.get(username='root').role, User.ROLE_AGENCY)
        self.assertIn('already exists', out.getvalue())

    def test_password_required(self):
        with self.assertRaises(CommandError):
            call_command('create_system_admin', '--username', 'root', '--password', '', stdout=StringIO())


class RunTestsLabelTests(SimpleTestCase):
    """Test app label resolution in the standalone test runner"""

    def test_defaults_to_project_apps(self):
        labels = resolve_labels([], settings.INSTALLED_APPS)
        self.assertIn('fieldops.visits', labels)
        self.assertIn('fieldops.allocations', labels)
        self.assertNotIn('rest_framework', labels)

    def test_short_names(self):
        self.assertEqual(
            resolve_labels(['visits', 'fieldops.reports', 'fieldops.allocations.tests'], settings.INSTALLED_APPS),
            ['fieldops.visits', 'fieldops.reports', 'fieldops.allocations.tests'],
        )
