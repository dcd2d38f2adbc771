"""Database reads feeding the allocation day suggester"""
import logging
from typing import List, Optional

from fieldops.promoters.models import Promoter
from .models import Allocation
from .suggestions import ConflictingAllocation, DaySuggestion, suggest_days

logger = logging.getLogger('fieldops.allocations')


def get_promoter_availability(promoter_id) -> Optional[List[int]]:
    """Declared availability of a promoter, or None when missing or never set"""
    availability = (
        Promoter.objects.filter(pk=promoter_id)
        .values_list('availability_days', flat=True)
        .first()
    )
    return availability


def get_active_allocations(promoter_id, store_id, exclude_brand_id) -> List[ConflictingAllocation]:
    """Other active allocations of the promoter at the store, one per brand"""
    allocations = (
        Allocation.objects.filter(promoter_id=promoter_id, store_id=store_id, active=True)
        .exclude(brand_id=exclude_brand_id)
        .select_related('brand')
        .order_by('brand__name', 'brand_id')
    )
    return [
        ConflictingAllocation(
            brand_id=alloc.brand_id,
            brand_name=alloc.brand.name,
            days=tuple(alloc.days_of_week or ()),
        )
        for alloc in allocations
    ]


def get_suggested_days(promoter_id, brand_id, store_id, frequency_per_week, default_days) -> DaySuggestion:
    """Read availability and sibling allocations, then suggest weekdays"""
    availability = get_promoter_availability(promoter_id)
    conflicts = get_active_allocations(promoter_id, store_id, brand_id)
    suggestion = suggest_days(availability, conflicts, frequency_per_week, default_days=default_days)
    logger.debug(
        f"Suggested {list(suggestion.suggested_days)} for promoter {promoter_id}, brand {brand_id}, "
        f"store {store_id} (frequency {frequency_per_week}, {len(conflicts)} conflicting allocations)"
    )
    return suggestion
