"""
Test suite for Promoters module
Tests: Promoter creation with login, availability validation, authorization, agency scoping
"""
from django.test import TestCase
from rest_framework import status
from fieldops.core.models import User
from fieldops.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from fieldops.promoters.models import Promoter


class PromoterAPITests(TestCase):
    """Test Promoter API endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.agency = self.user.agency
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.store = TestDataFactory.create_store(self.agency)
        self.brand = TestDataFactory.create_brand(self.agency, stores=[self.store])

    def _payload(self, **overrides):
        data = {
            'username': 'promo_jane',
            'email': 'jane@promo.test',
            'password': 'Field-w0rk-77',
            'name': 'Jane',
            'phone': '5550001',
            'city': 'Springfield',
            'availability_days': [5, 1, 3, 3],
            'brand_ids': [self.brand.id],
            'store_ids': [self.store.id],
        }
        data.update(overrides)
        return data

    def test_create_promoter(self):
        """Test creating a promoter also creates its promoter-role login"""
        response = self.client.post('/api/v1/promoters/', self._payload(), format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['availability_days'], [1, 3, 5])
        self.assertEqual(response.data['brand_ids'], [self.brand.id])
        self.assertEqual(response.data['agency_id'], self.agency.id)

        user = User.objects.get(username='promo_jane')
        self.assertEqual(user.role, User.ROLE_PROMOTER)
        self.assertEqual(user.agency_id, self.agency.id)
        self.assertTrue(user.check_password('Field-w0rk-77'))

    def test_create_without_availability_leaves_it_unset(self):
        payload = self._payload()
        del payload['availability_days']
        response = self.client.post('/api/v1/promoters/', payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertIsNone(Promoter.objects.get(pk=response.data['id']).availability_days)

    def test_create_invalid_availability(self):
        response = self.client.post('/api/v1/promoters/', self._payload(availability_days=[0, 7]), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('availability_days', response.data)
        self.assertFalse(User.objects.filter(username='promo_jane').exists())

    def test_create_duplicate_username(self):
        TestDataFactory.create_user(username='promo_jane')
        response = self.client.post('/api/v1/promoters/', self._payload(), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('username', response.data)

    def test_create_with_foreign_brand(self):
        foreign_brand = TestDataFactory.create_brand(TestDataFactory.create_agency())
        response = self.client.post('/api/v1/promoters/', self._payload(brand_ids=[foreign_brand.id]), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('brand_ids', response.data)

    def test_update_availability(self):
        promoter = TestDataFactory.create_promoter(self.agency, availability_days=[1, 2])
        response = self.client.patch(f'/api/v1/promoters/{promoter.id}/', {'availability_days': [6, 0]}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        promoter.refresh_from_db()
        self.assertEqual(promoter.availability_days, [0, 6])

    def test_update_visit_frequency_per_brand(self):
        promoter = TestDataFactory.create_promoter(self.agency)
        response = self.client.patch(f'/api/v1/promoters/{promoter.id}/', {
            'visit_frequency_per_brand': {str(self.brand.id): 3},
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        promoter.refresh_from_db()
        self.assertEqual(promoter.visit_frequency_per_brand, {str(self.brand.id): 3})

        response = self.client.patch(f'/api/v1/promoters/{promoter.id}/', {
            'visit_frequency_per_brand': {str(self.brand.id): -1},
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_list_filter_active(self):
        active = TestDataFactory.create_promoter(self.agency)
        TestDataFactory.create_promoter(self.agency, active=False)
        TestDataFactory.create_promoter(TestDataFactory.create_agency())
        response = self.client.get('/api/v1/promoters/?active=true')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([p['id'] for p in response.data], [active.id])

    def test_foreign_promoter_not_found(self):
        foreign = TestDataFactory.create_promoter(TestDataFactory.create_agency())
        response = self.client.get(f'/api/v1/promoters/{foreign.id}/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_delete_removes_login(self):
        promoter = TestDataFactory.create_promoter(self.agency)
        user_id = promoter.user_id
        response = self.client.delete(f'/api/v1/promoters/{promoter.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Promoter.objects.filter(pk=promoter.id).exists())
        self.assertFalse(User.objects.filter(pk=user_id).exists())
