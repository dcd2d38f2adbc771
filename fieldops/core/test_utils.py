"""
Test utilities and factories for creating test data
"""
from django.contrib.auth import get_user_model
from django.utils import timezone
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from fieldops.core.models import Agency
from fieldops.locations.models import Store
from fieldops.catalog.models import Brand, BrandStore
from fieldops.promoters.models import Promoter
from fieldops.allocations.models import Allocation
from fieldops.visits.models import Visit
import random
import string

User = get_user_model()


class TestDataFactory:
    """Factory class for creating test data"""

    @staticmethod
    def random_string(length=10):
        """Generate a random string"""
        return ''.join(random.choices(string.ascii_letters + string.digits, k=length))

    @staticmethod
    def create_agency(name=None):
        """Create a test agency"""
        if not name:
            name = f'Agency_{TestDataFactory.random_string(6)}'
        return Agency.objects.create(name=name)

    @staticmethod
    def create_user(username=None, email=None, password='testpass123', role=User.ROLE_AGENCY, agency=None):
        """Create a test user; agency users get a fresh agency unless one is given"""
        if not username:
            username = f'testuser_{TestDataFactory.random_string(6)}'
        if not email:
            email = f'{username}@test.com'
        if agency is None and role != User.ROLE_SYSTEM_ADMIN:
            agency = TestDataFactory.create_agency()
        return User.objects.create_user(
            username=username,
            email=email,
            password=password,
            role=role,
            agency=agency,
        )

    @staticmethod
    def create_system_admin(username=None):
        """Create a test system admin (no agency)"""
        return TestDataFactory.create_user(username=username, role=User.ROLE_SYSTEM_ADMIN)

    @staticmethod
    def create_store(agency, chain_name=None, address=None):
        """Create a test store"""
        if not chain_name:
            chain_name = f'Store_{TestDataFactory.random_string(6)}'
        return Store.objects.create(
            agency=agency,
            chain_name=chain_name,
            address=address or f'Test Address {chain_name}',
        )

    @staticmethod
    def create_brand(agency, name=None, visit_frequency=1, stores=None):
        """Create a test brand present in ``stores``"""
        if not name:
            name = f'Brand_{TestDataFactory.random_string(6)}'
        brand = Brand.objects.create(agency=agency, name=name, visit_frequency=visit_frequency)
        for store in stores or []:
            BrandStore.objects.create(brand=brand, store=store)
        return brand

    @staticmethod
    def create_promoter(agency, name=None, availability_days=None, brands=None, stores=None, active=True):
        """Create a test promoter with its login, authorized for ``brands`` and ``stores``"""
        user = TestDataFactory.create_user(role=User.ROLE_PROMOTER, agency=agency)
        if not name:
            name = f'Promoter_{TestDataFactory.random_string(6)}'
        promoter = Promoter.objects.create(
            user=user,
            name=name,
            phone='1234567890',
            city='Test City',
            availability_days=availability_days,
            active=active,
        )
        promoter.brands.set(brands or [])
        promoter.stores.set(stores or [])
        return promoter

    @staticmethod
    def create_allocation(promoter, brand, store, days_of_week, active=True):
        """Create a test allocation"""
        days = sorted(days_of_week)
        return Allocation.objects.create(
            promoter=promoter,
            brand=brand,
            store=store,
            days_of_week=days,
            frequency_per_week=len(days),
            active=active,
        )

    @staticmethod
    def create_visit(promoter, brand, store, timestamp=None):
        """Create a test visit"""
        return Visit.objects.create(
            promoter=promoter,
            brand=brand,
            store=store,
            timestamp=timestamp or timezone.now(),
        )


class AuthenticatedAPIClient(APIClient):
    """APIClient with authentication helper"""

    def authenticate_user(self, user):
        """Authenticate the client with a user"""
        refresh = RefreshToken.for_user(user)
        self.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
        return self

    def logout(self):
        """Remove authentication"""
        self.credentials()
