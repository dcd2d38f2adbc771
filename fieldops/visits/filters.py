import django_filters
from .models import Visit


class VisitFilter(django_filters.FilterSet):
    """Filters for the agency visit list; date bounds are inclusive whole days"""
    start_date = django_filters.DateFilter(field_name='timestamp', lookup_expr='date__gte')
    end_date = django_filters.DateFilter(field_name='timestamp', lookup_expr='date__lte')
    promoter = django_filters.NumberFilter(field_name='promoter_id', lookup_expr='exact')
    store = django_filters.NumberFilter(field_name='store_id', lookup_expr='exact')
    brand = django_filters.NumberFilter(field_name='brand_id', lookup_expr='exact')
    status = django_filters.ChoiceFilter(choices=Visit.STATUS_CHOICES)

    class Meta:
        model = Visit
        fields = ['start_date', 'end_date', 'promoter', 'store', 'brand', 'status']
