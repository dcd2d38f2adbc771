"""
Test suite for Locations module
Tests: Store CRUD, agency scoping
"""
from django.test import TestCase
from rest_framework import status
from fieldops.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from fieldops.locations.models import Store


class StoreAPITests(TestCase):
    """Test Store API endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.agency = self.user.agency
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_create_store(self):
        """Test creating a store in the caller's agency"""
        response = self.client.post('/api/v1/stores/', {
            'chain_name': 'Fresh Mart',
            'address': '1 Market St',
            'gps_latitude': '40.712800',
            'gps_longitude': '-74.006000',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['agency'], self.agency.id)
        self.assertEqual(response.data['type'], 'retail')
        self.assertEqual(response.data['radius_meters'], 100)

    def test_create_store_invalid_type(self):
        response = self.client.post('/api/v1/stores/', {'chain_name': 'X', 'type': 'kiosk'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_system_admin_needs_agency_to_create(self):
        admin = TestDataFactory.create_system_admin()
        self.client.authenticate_user(admin)
        response = self.client.post('/api/v1/stores/', {'chain_name': 'Fresh Mart'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        response = self.client.post('/api/v1/stores/', {'chain_name': 'Fresh Mart', 'agency_id': self.agency.id}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(Store.objects.get(pk=response.data['id']).agency_id, self.agency.id)

    def test_list_is_scoped_to_agency(self):
        """Test listing only returns the caller's stores"""
        own = TestDataFactory.create_store(self.agency)
        TestDataFactory.create_store(TestDataFactory.create_agency())
        response = self.client.get('/api/v1/stores/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([store['id'] for store in response.data], [own.id])

    def test_update_store(self):
        store = TestDataFactory.create_store(self.agency)
        response = self.client.patch(f'/api/v1/stores/{store.id}/', {'radius_meters': 250}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        store.refresh_from_db()
        self.assertEqual(store.radius_meters, 250)

    def test_foreign_store_not_found(self):
        foreign = TestDataFactory.create_store(TestDataFactory.create_agency())
        response = self.client.get(f'/api/v1/stores/{foreign.id}/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_delete_store(self):
        store = TestDataFactory.create_store(self.agency)
        response = self.client.delete(f'/api/v1/stores/{store.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Store.objects.filter(pk=store.id).exists())
