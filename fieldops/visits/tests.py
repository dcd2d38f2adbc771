"""
Test suite for Visits module
Tests: GPS radius check, visit check-in, agency visit list and filters, notes edits, my visits
"""
from datetime import datetime, timezone as dt_timezone
from decimal import Decimal

from django.test import SimpleTestCase, TestCase
from rest_framework import status
from fieldops.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from fieldops.locations.models import Store
from fieldops.visits.gps import distance_meters, is_within_store_radius
from fieldops.visits.models import Visit


class GPSTests(SimpleTestCase):
    """Test check-in distance checks"""

    def test_distance(self):
        self.assertAlmostEqual(distance_meters(40.7128, -74.006, 40.7128, -74.006), 0.0)
        # 0.001 degree of latitude is about 111 meters
        self.assertAlmostEqual(distance_meters(0, 0, 0.001, 0), 111.19, delta=0.5)

    def test_within_radius(self):
        store = Store(gps_latitude=Decimal('40.712800'), gps_longitude=Decimal('-74.006000'), radius_meters=100)
        self.assertTrue(is_within_store_radius(Decimal('40.713000'), Decimal('-74.006000'), store))
        self.assertFalse(is_within_store_radius(Decimal('40.720000'), Decimal('-74.006000'), store))

    def test_store_without_location_accepts_any_point(self):
        store = Store(radius_meters=100)
        self.assertTrue(is_within_store_radius(Decimal('1.0'), Decimal('1.0'), store))


class VisitCheckInTests(TestCase):
    """Test promoters recording visits"""

    def setUp(self):
        self.agency = TestDataFactory.create_agency()
        self.store = TestDataFactory.create_store(self.agency)
        Store.objects.filter(pk=self.store.pk).update(
            gps_latitude=Decimal('40.712800'), gps_longitude=Decimal('-74.006000'), radius_meters=100,
        )
        self.brand = TestDataFactory.create_brand(self.agency, stores=[self.store])
        self.promoter = TestDataFactory.create_promoter(self.agency, brands=[self.brand], stores=[self.store])
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.promoter.user)

    def _payload(self, **overrides):
        data = {
            'store_id': self.store.id,
            'brand_id': self.brand.id,
            'gps_latitude': '40.713000',
            'gps_longitude': '-74.006000',
            'notes': 'Shelf restocked',
        }
        data.update(overrides)
        return data

    def test_check_in(self):
        """Test a check-in inside the store radius is recorded as completed"""
        response = self.client.post('/api/v1/visits/', self._payload(), format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['status'], Visit.STATUS_COMPLETED)
        self.assertEqual(response.data['promoter_id'], self.promoter.id)
        self.assertEqual(Visit.objects.filter(promoter=self.promoter).count(), 1)

    def test_check_in_outside_radius(self):
        response = self.client.post('/api/v1/visits/', self._payload(gps_latitude='40.720000'), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'GPS coordinates are not within store radius')
        self.assertFalse(Visit.objects.exists())

    def test_check_in_unauthorized_brand(self):
        other_brand = TestDataFactory.create_brand(self.agency, stores=[self.store])
        response = self.client.post('/api/v1/visits/', self._payload(brand_id=other_brand.id), format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_check_in_unauthorized_store(self):
        other_store = TestDataFactory.create_store(self.agency)
        response = self.client.post('/api/v1/visits/', self._payload(store_id=other_store.id), format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_check_in_missing_gps(self):
        payload = self._payload()
        del payload['gps_latitude']
        response = self.client.post('/api/v1/visits/', payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('gps_latitude', response.data)

    def test_promoter_user_without_record(self):
        user = TestDataFactory.create_user(role='promoter', agency=self.agency)
        self.client.authenticate_user(user)
        response = self.client.post('/api/v1/visits/', self._payload(), format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_agency_user_cannot_check_in(self):
        self.client.authenticate_user(TestDataFactory.create_user(agency=self.agency))
        response = self.client.post('/api/v1/visits/', self._payload(), format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_my_visits(self):
        """Test promoters only see their own visits, newest first"""
        older = TestDataFactory.create_visit(self.promoter, self.brand, self.store,
                                             datetime(2024, 3, 1, 9, 0, tzinfo=dt_timezone.utc))
        newer = TestDataFactory.create_visit(self.promoter, self.brand, self.store,
                                             datetime(2024, 3, 2, 9, 0, tzinfo=dt_timezone.utc))
        someone_else = TestDataFactory.create_promoter(self.agency, brands=[self.brand], stores=[self.store])
        TestDataFactory.create_visit(someone_else, self.brand, self.store)

        response = self.client.get('/api/v1/visits/my-visits/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([visit['id'] for visit in response.data], [newer.id, older.id])

    def test_promoter_cannot_list_agency_visits(self):
        response = self.client.get('/api/v1/visits/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


class VisitAgencyAPITests(TestCase):
    """Test agency visit list, detail and edits"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.agency = self.user.agency
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

        self.store = TestDataFactory.create_store(self.agency)
        self.brand = TestDataFactory.create_brand(self.agency, stores=[self.store])
        self.promoter = TestDataFactory.create_promoter(self.agency, brands=[self.brand], stores=[self.store])
        self.march = TestDataFactory.create_visit(self.promoter, self.brand, self.store,
                                                  datetime(2024, 3, 10, 18, 0, tzinfo=dt_timezone.utc))
        self.april = TestDataFactory.create_visit(self.promoter, self.brand, self.store,
                                                  datetime(2024, 4, 2, 8, 0, tzinfo=dt_timezone.utc))

        other_agency = TestDataFactory.create_agency()
        other_store = TestDataFactory.create_store(other_agency)
        other_brand = TestDataFactory.create_brand(other_agency, stores=[other_store])
        other_promoter = TestDataFactory.create_promoter(other_agency, brands=[other_brand], stores=[other_store])
        self.foreign = TestDataFactory.create_visit(other_promoter, other_brand, other_store)

    def test_list_is_scoped_to_agency(self):
        response = self.client.get('/api/v1/visits/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([visit['id'] for visit in response.data], [self.april.id, self.march.id])

    def test_list_date_range_is_inclusive(self):
        """Test an end date includes visits later that same day"""
        response = self.client.get('/api/v1/visits/?start_date=2024-03-01&end_date=2024-03-10')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([visit['id'] for visit in response.data], [self.march.id])

    def test_list_filter_by_status(self):
        Visit.objects.filter(pk=self.march.pk).update(status=Visit.STATUS_EDITED)
        response = self.client.get('/api/v1/visits/?status=edited')
        self.assertEqual([visit['id'] for visit in response.data], [self.march.id])

    def test_list_invalid_filter(self):
        response = self.client.get('/api/v1/visits/?start_date=March')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_get_visit(self):
        response = self.client.get(f'/api/v1/visits/{self.march.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['brand_name'], self.brand.name)

    def test_foreign_visit_not_found(self):
        response = self.client.get(f'/api/v1/visits/{self.foreign.id}/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_edit_notes_marks_visit_edited(self):
        response = self.client.put(f'/api/v1/visits/{self.march.id}/', {'notes': 'Display was damaged'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.march.refresh_from_db()
        self.assertEqual(self.march.notes, 'Display was damaged')
        self.assertEqual(self.march.status, Visit.STATUS_EDITED)
