import django_filters
from .models import Allocation


class AllocationFilter(django_filters.FilterSet):
    """Filters for the allocation list"""
    promoter = django_filters.NumberFilter(field_name='promoter_id', lookup_expr='exact')
    brand = django_filters.NumberFilter(field_name='brand_id', lookup_expr='exact')
    store = django_filters.NumberFilter(field_name='store_id', lookup_expr='exact')
    active = django_filters.CharFilter(method='filter_active', label='Active')

    class Meta:
        model = Allocation
        fields = ['promoter', 'brand', 'store', 'active']

    def filter_active(self, queryset, name, value):
        """Filter by active status (handles string 'true'/'false')"""
        if value is None or value == '':
            return queryset
        return queryset.filter(active=value.lower() == 'true')
