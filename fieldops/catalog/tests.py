"""
Test suite for Catalog module
Tests: Brand CRUD, store presence
"""
from django.test import TestCase
from rest_framework import status
from fieldops.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from fieldops.catalog.models import Brand, BrandStore


class BrandAPITests(TestCase):
    """Test Brand API endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.agency = self.user.agency
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.store_a = TestDataFactory.create_store(self.agency, chain_name='Alpha')
        self.store_b = TestDataFactory.create_store(self.agency, chain_name='Beta')

    def test_create_brand_with_stores(self):
        """Test creating a brand present in two stores"""
        response = self.client.post('/api/v1/brands/', {
            'name': 'Sunny Juice',
            'visit_frequency': 2,
            'store_ids': [self.store_b.id, self.store_a.id],
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['agency'], self.agency.id)
        self.assertEqual(
            sorted(store['store_name'] for store in response.data['stores']),
            ['Alpha', 'Beta'],
        )

    def test_create_brand_with_foreign_store(self):
        foreign = TestDataFactory.create_store(TestDataFactory.create_agency())
        response = self.client.post('/api/v1/brands/', {'name': 'Sunny Juice', 'store_ids': [foreign.id]}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('store_ids', response.data)
        self.assertFalse(Brand.objects.filter(name='Sunny Juice').exists())

    def test_update_replaces_store_presence(self):
        brand = TestDataFactory.create_brand(self.agency, stores=[self.store_a])
        response = self.client.patch(f'/api/v1/brands/{brand.id}/', {'store_ids': [self.store_b.id]}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(
            list(BrandStore.objects.filter(brand=brand).values_list('store_id', flat=True)),
            [self.store_b.id],
        )

    def test_update_without_store_ids_keeps_stores(self):
        brand = TestDataFactory.create_brand(self.agency, stores=[self.store_a])
        response = self.client.patch(f'/api/v1/brands/{brand.id}/', {'visit_frequency': 3}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['visit_frequency'], 3)
        self.assertTrue(BrandStore.objects.filter(brand=brand, store=self.store_a).exists())

    def test_list_is_scoped_to_agency(self):
        own = TestDataFactory.create_brand(self.agency)
        TestDataFactory.create_brand(TestDataFactory.create_agency())
        response = self.client.get('/api/v1/brands/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([brand['id'] for brand in response.data], [own.id])

    def test_delete_brand(self):
        brand = TestDataFactory.create_brand(self.agency, stores=[self.store_a])
        response = self.client.delete(f'/api/v1/brands/{brand.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(BrandStore.objects.filter(brand_id=brand.id).exists())

    def test_promoter_role_is_forbidden(self):
        promoter = TestDataFactory.create_promoter(self.agency)
        self.client.authenticate_user(promoter.user)
        response = self.client.get('/api/v1/brands/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
