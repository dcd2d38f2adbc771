"""Allocation planning reports"""
import math
from collections import defaultdict

from fieldops.allocations.models import Allocation
from fieldops.catalog.models import Brand, BrandStore
from fieldops.promoters.models import Promoter
from fieldops.visits.models import Visit


def _round_half_up(value):
    return int(math.floor(value + 0.5))


def _empty_planned_report(period_days):
    return {
        'planned': 0,
        'executed': 0,
        'completion_rate': 0,
        'period_days': period_days,
        'by_promoter': [],
        'by_brand': [],
    }


def calculate_planned_visits(agency_id, start_date, end_date):
    """
    Planned versus executed visits for an agency over an inclusive date range.

    A promoter plans, for each authorized brand, ``frequency * weeks`` visits
    at every store where the brand is present and the promoter is authorized.
    The weekly frequency comes from the promoter's per-brand override, then
    the brand's own frequency, then 1.
    """
    period_days = (end_date - start_date).days + 1
    weeks_in_period = period_days / 7

    promoters = list(
        Promoter.objects.filter(user__agency_id=agency_id, active=True)
        .prefetch_related('brands', 'stores')
        .order_by('name', 'id')
    )
    if not promoters:
        return _empty_planned_report(period_days)

    brands = list(Brand.objects.filter(agency_id=agency_id).order_by('name', 'id'))
    if not brands:
        return _empty_planned_report(period_days)
    brand_map = {brand.id: brand for brand in brands}

    stores_by_brand = defaultdict(set)
    for brand_id, store_id in BrandStore.objects.filter(brand_id__in=brand_map).values_list('brand_id', 'store_id'):
        stores_by_brand[brand_id].add(store_id)

    planned_by_promoter = defaultdict(float)
    planned_by_brand = defaultdict(float)
    total_planned = 0.0

    for promoter in promoters:
        authorized_store_ids = {store.id for store in promoter.stores.all()}
        frequency_overrides = promoter.visit_frequency_per_brand or {}

        for authorized_brand in promoter.brands.all():
            brand = brand_map.get(authorized_brand.id)
            if brand is None:
                continue

            valid_store_ids = stores_by_brand[brand.id] & authorized_store_ids
            if not valid_store_ids:
                continue

            frequency_per_week = frequency_overrides.get(str(brand.id)) or brand.visit_frequency or 1
            planned = frequency_per_week * weeks_in_period * len(valid_store_ids)

            planned_by_promoter[promoter.id] += planned
            planned_by_brand[brand.id] += planned
            total_planned += planned

    executed_visits = Visit.objects.filter(
        promoter_id__in=[promoter.id for promoter in promoters],
        timestamp__date__gte=start_date,
        timestamp__date__lte=end_date,
    ).values_list('promoter_id', 'brand_id')

    executed_by_promoter = defaultdict(int)
    executed_by_brand = defaultdict(int)
    total_executed = 0
    for promoter_id, brand_id in executed_visits:
        total_executed += 1
        executed_by_promoter[promoter_id] += 1
        executed_by_brand[brand_id] += 1

    rounded_planned = _round_half_up(total_planned)
    completion_rate = (total_executed / rounded_planned) * 100 if rounded_planned > 0 else 0

    return {
        'planned': rounded_planned,
        'executed': total_executed,
        'completion_rate': math.floor(completion_rate * 10 + 0.5) / 10,
        'period_days': period_days,
        'by_promoter': [
            {
                'promoter_id': promoter.id,
                'promoter_name': promoter.name,
                'planned': _round_half_up(planned_by_promoter[promoter.id]),
                'executed': executed_by_promoter[promoter.id],
            }
            for promoter in promoters
        ],
        'by_brand': [
            {
                'brand_id': brand.id,
                'brand_name': brand.name,
                'planned': _round_half_up(planned_by_brand[brand.id]),
                'executed': executed_by_brand[brand.id],
            }
            for brand in brands
        ],
    }


def get_brands_without_allocations(agency_id):
    """
    Brands that need visits but have no active allocation at any of their stores.

    A brand needs visits when its own weekly frequency is positive or any of
    its stores sets a positive frequency. Brands without stores are skipped.
    """
    brands = list(Brand.objects.filter(agency_id=agency_id).order_by('name', 'id'))
    if not brands:
        return []

    brand_stores = defaultdict(list)
    for brand_store in BrandStore.objects.filter(brand__in=brands).select_related('store').order_by('store__chain_name', 'store_id'):
        brand_stores[brand_store.brand_id].append(brand_store)

    allocated = set(
        Allocation.objects.filter(active=True, brand__in=brands).values_list('brand_id', 'store_id')
    )

    result = []
    for brand in brands:
        stores = brand_stores.get(brand.id)
        if not stores:
            continue

        has_allocations = any((brand.id, bs.store_id) in allocated for bs in stores)
        needs_visits = brand.visit_frequency > 0 or any((bs.visit_frequency or 0) > 0 for bs in stores)

        if needs_visits and not has_allocations:
            result.append({
                'brand_id': brand.id,
                'brand_name': brand.name,
                'visit_frequency': brand.visit_frequency,
                'stores_count': len(stores),
                'stores': [
                    {
                        'store_id': bs.store_id,
                        'store_name': bs.store.chain_name,
                        'visit_frequency': bs.visit_frequency,
                    }
                    for bs in stores
                ],
            })
    return result
