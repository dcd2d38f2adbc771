"""
Test suite for Allocations module
Tests: day suggestion heuristic, suggestion data reads, allocation API and suggestions endpoint
"""
import itertools
from unittest import mock

from django.test import SimpleTestCase, TestCase, override_settings
from rest_framework import status
from fieldops.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from fieldops.allocations.models import Allocation
from fieldops.allocations.services import get_active_allocations, get_promoter_availability, get_suggested_days
from fieldops.allocations.suggestions import (
    ConflictingAllocation, DaySet, distribute_days_evenly, suggest_days,
)

WEEKDAYS = [1, 2, 3, 4, 5]


class DaySetTests(SimpleTestCase):
    """Test the ordered weekday set"""

    def test_sorted_and_unique(self):
        self.assertEqual(list(DaySet([5, 1, 3, 1, 5])), [1, 3, 5])

    def test_set_operations(self):
        days = DaySet([1, 2, 3, 4, 5])
        self.assertEqual(days.difference([2, 4, 6]), DaySet([1, 3, 5]))
        self.assertEqual(days.intersection([2, 4, 6]), DaySet([2, 4]))
        self.assertEqual(days.union([0, 6]), DaySet(range(7)))


class DistributeDaysEvenlyTests(SimpleTestCase):
    """Test fixed-step day distribution"""

    def test_two_of_five(self):
        self.assertEqual(list(distribute_days_evenly([1, 2, 3, 4, 5], 2)), [1, 3])

    def test_three_of_five(self):
        # floor(0 * 5/3), floor(1 * 5/3), floor(2 * 5/3) -> indices 0, 1, 3
        self.assertEqual(list(distribute_days_evenly([1, 2, 3, 4, 5], 3)), [1, 2, 4])

    def test_two_of_three(self):
        self.assertEqual(list(distribute_days_evenly([3, 4, 5], 2)), [3, 4])

    def test_count_covering_all_days_returns_them_all(self):
        self.assertEqual(list(distribute_days_evenly([0, 2, 6], 3)), [0, 2, 6])
        self.assertEqual(list(distribute_days_evenly([0, 2, 6], 7)), [0, 2, 6])

    def test_non_positive_count(self):
        self.assertEqual(list(distribute_days_evenly([1, 2, 3], 0)), [])
        self.assertEqual(list(distribute_days_evenly([1, 2, 3], -1)), [])

    def test_empty_days(self):
        self.assertEqual(list(distribute_days_evenly([], 2)), [])


class SuggestDaysTests(SimpleTestCase):
    """Test the allocation day suggestion heuristic"""

    def test_no_conflicts_three_days(self):
        suggestion = suggest_days(WEEKDAYS, [], 3)
        self.assertEqual(list(suggestion.suggested_days), [1, 2, 4])
        self.assertEqual(list(suggestion.available_days), WEEKDAYS)
        self.assertEqual(suggestion.conflicting_allocations, ())

    def test_prefers_days_free_of_other_brands(self):
        conflicts = [ConflictingAllocation(brand_id=7, brand_name='Other', days=(1, 2))]
        suggestion = suggest_days(WEEKDAYS, conflicts, 2)
        self.assertEqual(list(suggestion.suggested_days), [3, 4])

    def test_fills_from_claimed_days_when_free_days_run_out(self):
        conflicts = [ConflictingAllocation(brand_id=7, brand_name='Other', days=(1, 2, 3))]
        suggestion = suggest_days(WEEKDAYS, conflicts, 4)
        # free 4, 5 plus two of the claimed 1, 2, 3 spread evenly
        self.assertEqual(list(suggestion.suggested_days), [1, 2, 4, 5])

    def test_short_availability_gives_short_result(self):
        conflicts = [ConflictingAllocation(brand_id=7, brand_name='Other', days=(1,))]
        suggestion = suggest_days([1, 2], conflicts, 3)
        self.assertEqual(list(suggestion.suggested_days), [1, 2])

    def test_unset_availability_uses_default_days(self):
        suggestion = suggest_days(None, [], 3, default_days=WEEKDAYS)
        self.assertEqual(list(suggestion.available_days), WEEKDAYS)
        self.assertEqual(list(suggestion.suggested_days), [1, 2, 4])

    def test_declared_empty_availability_is_not_replaced(self):
        suggestion = suggest_days([], [], 2, default_days=WEEKDAYS)
        self.assertEqual(list(suggestion.suggested_days), [])
        self.assertEqual(list(suggestion.available_days), [])

    def test_zero_and_negative_frequency(self):
        self.assertEqual(list(suggest_days(WEEKDAYS, [], 0).suggested_days), [])
        self.assertEqual(list(suggest_days(WEEKDAYS, [], -2).suggested_days), [])

    def test_as_dict_shape(self):
        conflicts = [ConflictingAllocation(brand_id=7, brand_name='Other', days=(1, 2))]
        data = suggest_days(WEEKDAYS, conflicts, 2).as_dict()
        self.assertEqual(data, {
            'suggestedDays': [3, 4],
            'availableDays': WEEKDAYS,
            'conflictingAllocations': [{'brand_id': 7, 'brand_name': 'Other', 'days': [1, 2]}],
        })

    def test_invariants_over_small_inputs(self):
        """Subset, cap, sortedness, shortfall and free-day preference for every small case"""
        week = range(7)
        availabilities = [[], [3], [1, 2], [0, 6], [1, 3, 5], WEEKDAYS, list(week)]
        conflict_sets = [(), (1,), (1, 2), (2, 4, 6), (0, 1, 2, 3, 4, 5, 6)]

        for available, claimed, frequency in itertools.product(availabilities, conflict_sets, range(0, 8)):
            conflicts = [ConflictingAllocation(brand_id=1, brand_name='B', days=claimed)] if claimed else []
            suggested = list(suggest_days(available, conflicts, frequency).suggested_days)
            free = [day for day in available if day not in claimed]

            with self.subTest(available=available, claimed=claimed, frequency=frequency):
                self.assertTrue(set(suggested) <= set(available))
                self.assertLessEqual(len(suggested), max(frequency, 0))
                self.assertEqual(suggested, sorted(set(suggested)))
                if len(suggested) < frequency:
                    self.assertLess(len(available), frequency)
                if frequency > 0 and len(free) >= frequency:
                    self.assertFalse(set(suggested) & set(claimed))


class SuggestionServiceTests(TestCase):
    """Test the database reads behind suggestions"""

    def setUp(self):
        self.agency = TestDataFactory.create_agency()
        self.store = TestDataFactory.create_store(self.agency)
        self.other_store = TestDataFactory.create_store(self.agency)
        self.brand = TestDataFactory.create_brand(self.agency, name='Planned', stores=[self.store])
        self.sibling = TestDataFactory.create_brand(self.agency, name='Sibling', stores=[self.store])
        self.inactive = TestDataFactory.create_brand(self.agency, name='Paused', stores=[self.store])
        self.promoter = TestDataFactory.create_promoter(
            self.agency, availability_days=[1, 2, 3, 4, 5],
            brands=[self.brand, self.sibling, self.inactive], stores=[self.store, self.other_store],
        )

    def test_availability(self):
        self.assertEqual(get_promoter_availability(self.promoter.id), [1, 2, 3, 4, 5])

    def test_missing_promoter_has_no_availability(self):
        self.assertIsNone(get_promoter_availability(999999))

    def test_unset_availability(self):
        promoter = TestDataFactory.create_promoter(self.agency, availability_days=None)
        self.assertIsNone(get_promoter_availability(promoter.id))

    def test_active_allocations_exclude_own_brand_inactive_and_other_stores(self):
        TestDataFactory.create_allocation(self.promoter, self.brand, self.store, [1])
        TestDataFactory.create_allocation(self.promoter, self.sibling, self.store, [2, 3])
        TestDataFactory.create_allocation(self.promoter, self.inactive, self.store, [4], active=False)
        TestDataFactory.create_allocation(self.promoter, self.sibling, self.other_store, [5])

        conflicts = get_active_allocations(self.promoter.id, self.store.id, self.brand.id)
        self.assertEqual(conflicts, [
            ConflictingAllocation(brand_id=self.sibling.id, brand_name='Sibling', days=(2, 3)),
        ])

    def test_get_suggested_days(self):
        TestDataFactory.create_allocation(self.promoter, self.sibling, self.store, [1, 2])
        suggestion = get_suggested_days(self.promoter.id, self.brand.id, self.store.id, 2, default_days=WEEKDAYS)
        self.assertEqual(list(suggestion.suggested_days), [3, 4])

    def test_get_suggested_days_default_availability(self):
        promoter = TestDataFactory.create_promoter(self.agency, availability_days=None)
        suggestion = get_suggested_days(promoter.id, self.brand.id, self.store.id, 3, default_days=WEEKDAYS)
        self.assertEqual(list(suggestion.available_days), WEEKDAYS)
        self.assertEqual(list(suggestion.suggested_days), [1, 2, 4])


class AllocationAPITests(TestCase):
    """Test Allocation API endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.agency = self.user.agency
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

        self.store = TestDataFactory.create_store(self.agency)
        self.brand = TestDataFactory.create_brand(self.agency, stores=[self.store])
        self.promoter = TestDataFactory.create_promoter(
            self.agency, availability_days=[1, 2, 3, 4, 5], brands=[self.brand], stores=[self.store],
        )

    def _payload(self, **overrides):
        data = {
            'promoter_id': self.promoter.id,
            'brand_id': self.brand.id,
            'store_id': self.store.id,
            'days_of_week': [5, 1, 3],
        }
        data.update(overrides)
        return data

    def test_create_allocation(self):
        response = self.client.post('/api/v1/allocations/', self._payload(), format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['days_of_week'], [1, 3, 5])
        self.assertEqual(response.data['frequency_per_week'], 3)
        self.assertTrue(response.data['active'])
        self.assertEqual(response.data['brand_name'], self.brand.name)

    def test_create_rejects_frequency_mismatch(self):
        response = self.client.post('/api/v1/allocations/', self._payload(frequency_per_week=2), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('frequency_per_week', response.data)

    def test_create_zero_frequency_uses_day_count(self):
        response = self.client.post('/api/v1/allocations/', self._payload(days_of_week=[1, 3], frequency_per_week=0),
                                    format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['frequency_per_week'], 2)

    def test_create_rejects_invalid_days(self):
        response = self.client.post('/api/v1/allocations/', self._payload(days_of_week=[1, 7]), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        response = self.client.post('/api/v1/allocations/', self._payload(days_of_week=[]), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_create_rejects_unauthorized_brand(self):
        other_brand = TestDataFactory.create_brand(self.agency, stores=[self.store])
        response = self.client.post('/api/v1/allocations/', self._payload(brand_id=other_brand.id), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Promoter is not authorized for this brand')

    def test_create_rejects_brand_missing_from_store(self):
        other_store = TestDataFactory.create_store(self.agency)
        self.promoter.stores.add(other_store)
        response = self.client.post('/api/v1/allocations/', self._payload(store_id=other_store.id), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Brand is not present in this store')

    def test_create_rejects_duplicate(self):
        TestDataFactory.create_allocation(self.promoter, self.brand, self.store, [1])
        response = self.client.post('/api/v1/allocations/', self._payload(), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_create_with_foreign_promoter_is_not_found(self):
        other_agency = TestDataFactory.create_agency()
        stranger = TestDataFactory.create_promoter(other_agency)
        response = self.client.post('/api/v1/allocations/', self._payload(promoter_id=stranger.id), format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_list_is_scoped_to_agency(self):
        TestDataFactory.create_allocation(self.promoter, self.brand, self.store, [1, 2])
        other_agency = TestDataFactory.create_agency()
        other_store = TestDataFactory.create_store(other_agency)
        other_brand = TestDataFactory.create_brand(other_agency, stores=[other_store])
        other_promoter = TestDataFactory.create_promoter(other_agency, brands=[other_brand], stores=[other_store])
        TestDataFactory.create_allocation(other_promoter, other_brand, other_store, [3])

        response = self.client.get('/api/v1/allocations/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]['promoter_id'], self.promoter.id)

    def test_list_filter_by_active(self):
        TestDataFactory.create_allocation(self.promoter, self.brand, self.store, [1, 2], active=False)
        response = self.client.get('/api/v1/allocations/?active=true')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, [])

    def test_update_days_resets_frequency(self):
        allocation = TestDataFactory.create_allocation(self.promoter, self.brand, self.store, [1, 2])
        response = self.client.patch(f'/api/v1/allocations/{allocation.id}/', {'days_of_week': [6, 0, 3]}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        allocation.refresh_from_db()
        self.assertEqual(allocation.days_of_week, [0, 3, 6])
        self.assertEqual(allocation.frequency_per_week, 3)

    def test_update_frequency_must_match_days(self):
        allocation = TestDataFactory.create_allocation(self.promoter, self.brand, self.store, [1, 2])
        response = self.client.patch(f'/api/v1/allocations/{allocation.id}/', {'frequency_per_week': 3}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_deactivate(self):
        allocation = TestDataFactory.create_allocation(self.promoter, self.brand, self.store, [1, 2])
        response = self.client.patch(f'/api/v1/allocations/{allocation.id}/', {'active': False}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        allocation.refresh_from_db()
        self.assertFalse(allocation.active)
        self.assertEqual(allocation.frequency_per_week, 2)

    def test_delete(self):
        allocation = TestDataFactory.create_allocation(self.promoter, self.brand, self.store, [1])
        response = self.client.delete(f'/api/v1/allocations/{allocation.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(Allocation.objects.filter(pk=allocation.id).exists())

    def test_promoter_role_is_forbidden(self):
        self.client.authenticate_user(self.promoter.user)
        response = self.client.get('/api/v1/allocations/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_unauthenticated(self):
        self.client.logout()
        response = self.client.get('/api/v1/allocations/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


class AllocationSuggestionAPITests(TestCase):
    """Test the suggestions endpoint"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.agency = self.user.agency
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

        self.store = TestDataFactory.create_store(self.agency)
        self.brand = TestDataFactory.create_brand(self.agency, stores=[self.store])
        self.sibling = TestDataFactory.create_brand(self.agency, name='Sibling', stores=[self.store])
        self.promoter = TestDataFactory.create_promoter(
            self.agency, availability_days=[1, 2, 3, 4, 5],
            brands=[self.brand, self.sibling], stores=[self.store],
        )

    def _url(self, promoter_id=None, brand_id=None, store_id=None, frequency=None):
        url = (f'/api/v1/allocations/suggestions/{promoter_id or self.promoter.id}/'
               f'{brand_id or self.brand.id}/{store_id or self.store.id}/')
        if frequency is not None:
            url += f'?frequency={frequency}'
        return url

    def test_suggestions_avoid_sibling_days(self):
        TestDataFactory.create_allocation(self.promoter, self.sibling, self.store, [1, 2])
        response = self.client.get(self._url(frequency=2))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['suggestedDays'], [3, 4])
        self.assertEqual(response.data['availableDays'], [1, 2, 3, 4, 5])
        self.assertEqual(response.data['conflictingAllocations'], [
            {'brand_id': self.sibling.id, 'brand_name': 'Sibling', 'days': [1, 2]},
        ])

    def test_frequency_defaults_to_one(self):
        for frequency in (None, 'abc', 0):
            with self.subTest(frequency=frequency):
                response = self.client.get(self._url(frequency=frequency))
                self.assertEqual(response.status_code, status.HTTP_200_OK)
                self.assertEqual(response.data['suggestedDays'], [1])

    @override_settings(FIELDOPS_DEFAULT_AVAILABILITY_DAYS=[2, 4, 6])
    def test_unset_availability_uses_configured_default(self):
        promoter = TestDataFactory.create_promoter(self.agency, availability_days=None)
        response = self.client.get(self._url(promoter_id=promoter.id, frequency=3))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['availableDays'], [2, 4, 6])
        self.assertEqual(response.data['suggestedDays'], [2, 4, 6])

    def test_foreign_entities_are_not_found(self):
        other_agency = TestDataFactory.create_agency()
        foreign_store = TestDataFactory.create_store(other_agency)
        response = self.client.get(self._url(store_id=foreign_store.id))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['error'], 'Store not found')

    def test_data_layer_failure_is_reported(self):
        with mock.patch('fieldops.allocations.views.get_suggested_days', side_effect=RuntimeError('db down')):
            response = self.client.get(self._url(frequency=2))
        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertIn('db down', response.data['error'])

    def test_system_admin_unscoped(self):
        admin = TestDataFactory.create_system_admin()
        self.client.authenticate_user(admin)
        response = self.client.get(self._url(frequency=2))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['suggestedDays'], [1, 3])
