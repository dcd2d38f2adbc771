"""
Test suite for Reports module
Tests: Planned visits, Brands without allocations, Financial reports and CSV export
"""
from datetime import date, datetime, timezone as dt_timezone
from decimal import Decimal

from django.test import TestCase
from rest_framework import status
from fieldops.catalog.models import Brand, BrandStore
from fieldops.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from fieldops.locations.models import Store
from fieldops.promoters.models import Promoter
from fieldops.reports.financial import (
    calculate_financial_report, city_from_address, get_brand_report, get_promoter_report,
    get_store_report, get_to_be_paid_report, get_to_be_received_report,
)
from fieldops.reports.services import calculate_planned_visits, get_brands_without_allocations


class PlannedVisitsTests(TestCase):
    """Test planned versus executed visits"""

    def setUp(self):
        self.agency = TestDataFactory.create_agency()
        self.store_a = TestDataFactory.create_store(self.agency, chain_name='Alpha')
        self.store_b = TestDataFactory.create_store(self.agency, chain_name='Beta')
        self.brand = TestDataFactory.create_brand(self.agency, name='Cola', visit_frequency=2,
                                                  stores=[self.store_a, self.store_b])
        # Authorized for one of the brand's two stores
        self.first = TestDataFactory.create_promoter(self.agency, name='Ann', brands=[self.brand], stores=[self.store_a])
        self.second = TestDataFactory.create_promoter(self.agency, name='Bob', brands=[self.brand],
                                                      stores=[self.store_a, self.store_b])
        self.second.visit_frequency_per_brand = {str(self.brand.id): 3}
        self.second.save()

    def test_planned_and_executed(self):
        """Two weeks: Ann plans 2*2*1, Bob plans 3*2*2"""
        TestDataFactory.create_visit(self.first, self.brand, self.store_a,
                                     datetime(2024, 1, 5, 12, 0, tzinfo=dt_timezone.utc))
        TestDataFactory.create_visit(self.first, self.brand, self.store_a,
                                     datetime(2024, 1, 20, 12, 0, tzinfo=dt_timezone.utc))

        report = calculate_planned_visits(self.agency.id, date(2024, 1, 1), date(2024, 1, 14))
        self.assertEqual(report['period_days'], 14)
        self.assertEqual(report['planned'], 16)
        self.assertEqual(report['executed'], 1)
        self.assertEqual(report['completion_rate'], 6.3)
        self.assertEqual(
            [(row['promoter_name'], row['planned'], row['executed']) for row in report['by_promoter']],
            [('Ann', 4, 1), ('Bob', 12, 0)],
        )
        self.assertEqual(report['by_brand'][0]['planned'], 16)

    def test_inactive_promoters_are_ignored(self):
        self.second.active = False
        self.second.save()
        report = calculate_planned_visits(self.agency.id, date(2024, 1, 1), date(2024, 1, 14))
        self.assertEqual(report['planned'], 4)
        self.assertEqual(len(report['by_promoter']), 1)

    def test_empty_agency(self):
        report = calculate_planned_visits(TestDataFactory.create_agency().id, date(2024, 1, 1), date(2024, 1, 7))
        self.assertEqual(report['planned'], 0)
        self.assertEqual(report['completion_rate'], 0)
        self.assertEqual(report['period_days'], 7)


class BrandsWithoutAllocationsTests(TestCase):
    """Test brands that still need allocations"""

    def setUp(self):
        self.agency = TestDataFactory.create_agency()
        self.store = TestDataFactory.create_store(self.agency)
        self.promoter = TestDataFactory.create_promoter(self.agency, stores=[self.store])

    def test_report(self):
        unallocated = TestDataFactory.create_brand(self.agency, name='A Unallocated', stores=[self.store])
        allocated = TestDataFactory.create_brand(self.agency, name='B Allocated', stores=[self.store])
        paused = TestDataFactory.create_brand(self.agency, name='C Paused', stores=[self.store])
        TestDataFactory.create_brand(self.agency, name='D No stores')
        TestDataFactory.create_brand(self.agency, name='E No visits', visit_frequency=0, stores=[self.store])
        store_override = TestDataFactory.create_brand(self.agency, name='F Store override', visit_frequency=0)
        BrandStore.objects.create(brand=store_override, store=self.store, visit_frequency=2)

        TestDataFactory.create_allocation(self.promoter, allocated, self.store, [1, 3])
        TestDataFactory.create_allocation(self.promoter, paused, self.store, [2], active=False)

        result = get_brands_without_allocations(self.agency.id)
        self.assertEqual(
            [row['brand_id'] for row in result],
            [unallocated.id, paused.id, store_override.id],
        )
        self.assertEqual(result[0]['stores_count'], 1)
        self.assertEqual(result[0]['stores'][0]['store_id'], self.store.id)


class ReportsAPITests(TestCase):
    """Test report endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_planned_visits(self):
        """Test planned visits report with default range"""
        response = self.client.get('/api/v1/reports/planned-visits/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIsInstance(response.data, dict)
        self.assertIn('completion_rate', response.data)

    def test_planned_visits_with_date_range(self):
        response = self.client.get('/api/v1/reports/planned-visits/?start_date=2024-01-01&end_date=2024-01-31')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['period_days'], 31)

    def test_planned_visits_bad_dates(self):
        response = self.client.get('/api/v1/reports/planned-visits/?start_date=01-01-2024')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        response = self.client.get('/api/v1/reports/planned-visits/?start_date=2024-02-01&end_date=2024-01-01')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_brands_without_allocations(self):
        """Test brands without allocations report"""
        response = self.client.get('/api/v1/reports/brands-without-allocations/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIsInstance(response.data, list)

    def test_system_admin_needs_agency(self):
        self.client.authenticate_user(TestDataFactory.create_system_admin())
        response = self.client.get('/api/v1/reports/brands-without-allocations/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        response = self.client.get(f'/api/v1/reports/brands-without-allocations/?agency_id={self.user.agency_id}')
        self.assertEqual(response.status_code, status.HTTP_200_OK)


class FinancialReportTests(TestCase):
    """Test visit-based payment and charge reports"""

    def setUp(self):
        self.agency = TestDataFactory.create_agency()
        self.store_a = TestDataFactory.create_store(self.agency, chain_name='Alpha', address='12 Main St, Springfield, IL')
        self.store_b = TestDataFactory.create_store(self.agency, chain_name='Beta')
        Store.objects.filter(pk=self.store_b.pk).update(address='')

        self.cola = TestDataFactory.create_brand(self.agency, name='Cola', stores=[self.store_a])
        self.soap = TestDataFactory.create_brand(self.agency, name='Soap', stores=[self.store_b])
        self.idle = TestDataFactory.create_brand(self.agency, name='Idle')
        Brand.objects.filter(pk=self.cola.pk).update(price_per_visit=Decimal('10.00'))
        Brand.objects.filter(pk=self.soap.pk).update(price_per_visit=Decimal('4.50'))

        self.ann = TestDataFactory.create_promoter(self.agency, name='Ann', brands=[self.cola, self.soap],
                                                   stores=[self.store_a, self.store_b])
        self.bob = TestDataFactory.create_promoter(self.agency, name='Bob', brands=[self.cola], stores=[self.store_a])
        TestDataFactory.create_promoter(self.agency, name='Cy', active=False)
        Promoter.objects.filter(pk=self.ann.pk).update(payment_per_visit=Decimal('6.00'))
        Promoter.objects.filter(pk=self.bob.pk).update(payment_per_visit=Decimal('3.00'))

        def at(day, month=1):
            return datetime(2024, month, day, 10, 0, tzinfo=dt_timezone.utc)

        TestDataFactory.create_visit(self.ann, self.cola, self.store_a, at(5))
        TestDataFactory.create_visit(self.ann, self.soap, self.store_b, at(6))
        TestDataFactory.create_visit(self.bob, self.cola, self.store_a, at(7))
        TestDataFactory.create_visit(self.bob, self.cola, self.store_a, at(1, month=2))

        other_agency = TestDataFactory.create_agency()
        other_store = TestDataFactory.create_store(other_agency)
        other_brand = TestDataFactory.create_brand(other_agency, stores=[other_store])
        other_promoter = TestDataFactory.create_promoter(other_agency, brands=[other_brand], stores=[other_store])
        TestDataFactory.create_visit(other_promoter, other_brand, other_store, at(5))

        self.january = (date(2024, 1, 1), date(2024, 1, 31))

    def test_city_from_address(self):
        self.assertEqual(city_from_address('12 Main St, Springfield, IL'), 'Springfield')
        self.assertEqual(city_from_address('Springfield'), 'Springfield')
        self.assertEqual(city_from_address(''), 'Unknown')

    def test_totals(self):
        """Test payments use the promoter rate and charges the brand price"""
        report = calculate_financial_report(self.agency.id, *self.january)
        self.assertEqual(report['total_visits'], 3)
        self.assertEqual(report['total_promoter_payments'], 15.0)
        self.assertEqual(report['total_brand_charges'], 24.5)
        self.assertEqual(report['gross_margin'], 9.5)
        self.assertEqual(report['grouped_data'], [])

    def test_without_dates_counts_every_visit(self):
        report = calculate_financial_report(self.agency.id)
        self.assertEqual(report['total_visits'], 4)

    def test_group_by_brand(self):
        report = calculate_financial_report(self.agency.id, *self.january, group_by='brand')
        self.assertEqual(report['grouped_data'], [
            {'group_key': self.cola.id, 'visits': 2, 'promoter_payments': 9.0, 'brand_charges': 20.0, 'gross_margin': 11.0},
            {'group_key': self.soap.id, 'visits': 1, 'promoter_payments': 6.0, 'brand_charges': 4.5, 'gross_margin': -1.5},
        ])

    def test_group_by_city_falls_back_to_promoter_city(self):
        report = calculate_financial_report(self.agency.id, *self.january, group_by='city')
        self.assertEqual(
            [(row['group_key'], row['visits']) for row in report['grouped_data']],
            [('Springfield', 2), ('Test City', 1)],
        )

    def test_promoter_report(self):
        """Test active promoters are listed by earnings, including those without visits"""
        rows = get_promoter_report(self.agency.id, *self.january)
        self.assertEqual(
            [(row['promoter_name'], row['total_visits'], row['total_payment']) for row in rows],
            [('Ann', 2, 12.0), ('Bob', 1, 3.0)],
        )

    def test_brand_report_skips_brands_without_visits(self):
        rows = get_brand_report(self.agency.id, *self.january)
        self.assertEqual(
            [(row['brand_name'], row['total_visits'], row['total_charge']) for row in rows],
            [('Cola', 2, 20.0), ('Soap', 1, 4.5)],
        )

    def test_store_report(self):
        rows = get_store_report(self.agency.id, *self.january)
        self.assertEqual(rows[0]['store_id'], self.store_a.id)
        self.assertEqual(rows[0]['total_visits'], 2)
        self.assertEqual(rows[0]['total_promoter_payments'], 9.0)
        self.assertEqual(rows[0]['gross_margin'], 11.0)
        self.assertEqual(rows[1]['gross_margin'], -1.5)

    def test_to_be_paid_and_received(self):
        paid = get_to_be_paid_report(self.agency.id, *self.january)
        self.assertEqual(paid[0]['promoter_id'], self.ann.id)
        self.assertEqual(paid[0]['total_amount'], 12.0)
        self.assertEqual(paid[0]['promoter_phone'], '1234567890')

        received = get_to_be_received_report(self.agency.id, *self.january)
        self.assertEqual(received[0]['brand_id'], self.cola.id)
        self.assertEqual(received[0]['total_amount'], 20.0)


class FinancialReportAPITests(TestCase):
    """Test financial report endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.agency = self.user.agency
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

        store = TestDataFactory.create_store(self.agency)
        brand = TestDataFactory.create_brand(self.agency, stores=[store])
        Brand.objects.filter(pk=brand.pk).update(price_per_visit=Decimal('8.00'))
        promoter = TestDataFactory.create_promoter(self.agency, brands=[brand], stores=[store])
        Promoter.objects.filter(pk=promoter.pk).update(payment_per_visit=Decimal('5.00'))
        TestDataFactory.create_visit(promoter, brand, store, datetime(2024, 1, 5, 10, 0, tzinfo=dt_timezone.utc))

    def test_financial_report(self):
        response = self.client.get('/api/v1/reports/financial/?start_date=2024-01-01&end_date=2024-01-31&group_by=store')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['total_visits'], 1)
        self.assertEqual(response.data['gross_margin'], 3.0)
        self.assertEqual(len(response.data['grouped_data']), 1)

    def test_financial_report_invalid_group_by(self):
        response = self.client.get('/api/v1/reports/financial/?group_by=promoter')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_export_csv(self):
        """Test CSV export carries a header, one row per group and a total row"""
        response = self.client.get('/api/v1/reports/financial/export/?group_by=city')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response['Content-Type'], 'text/csv')
        self.assertIn('attachment; filename=financial-report.csv', response['Content-Disposition'])
        lines = response.content.decode().strip().splitlines()
        self.assertEqual(lines[0], 'Group,Visits,Promoter Payments,Brand Charges,Gross Margin')
        self.assertEqual(len(lines), 3)
        self.assertEqual(lines[-1], 'Total,1,5.0,8.0,3.0')

    def test_export_unsupported_formats(self):
        response = self.client.get('/api/v1/reports/financial/export/?file_format=pdf')
        self.assertEqual(response.status_code, status.HTTP_501_NOT_IMPLEMENTED)
        response = self.client.get('/api/v1/reports/financial/export/?file_format=xlsx')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_period_reports(self):
        for url in ('promoters', 'brands', 'stores', 'to-be-paid', 'to-be-received'):
            with self.subTest(report=url):
                response = self.client.get(f'/api/v1/reports/{url}/?start_date=2024-01-01&end_date=2024-01-31')
                self.assertEqual(response.status_code, status.HTTP_200_OK)
                self.assertEqual(len(response.data), 1)

    def test_period_report_bad_dates(self):
        response = self.client.get('/api/v1/reports/brands/?start_date=2024-02-01&end_date=2024-01-01')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_promoter_role_is_forbidden(self):
        promoter = TestDataFactory.create_promoter(self.agency)
        self.client.authenticate_user(promoter.user)
        response = self.client.get('/api/v1/reports/financial/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
