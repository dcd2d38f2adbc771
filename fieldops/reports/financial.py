"""
Money reports built from executed visits.

Every visit earns its promoter ``Promoter.payment_per_visit`` and is
charged to its brand at ``Brand.price_per_visit``; the gross margin is
charges minus payments. Date bounds are optional and cover whole days.
"""
from collections import OrderedDict
from decimal import Decimal

from fieldops.catalog.models import Brand
from fieldops.locations.models import Store
from fieldops.promoters.models import Promoter
from fieldops.visits.models import Visit

ZERO = Decimal('0.00')
UNKNOWN_CITY = 'Unknown'
GROUP_BY_CHOICES = ('brand', 'store', 'city')


def _in_range(visits, start_date=None, end_date=None):
    if start_date:
        visits = visits.filter(timestamp__date__gte=start_date)
    if end_date:
        visits = visits.filter(timestamp__date__lte=end_date)
    return visits


def city_from_address(address):
    """Best-effort city from a "street, city, state" style address"""
    if not address:
        return UNKNOWN_CITY
    parts = [part.strip() for part in address.split(',')]
    if len(parts) >= 2:
        return parts[-2] or parts[-1] or UNKNOWN_CITY
    return parts[0] or UNKNOWN_CITY


def _visit_city(visit):
    if visit.store.address:
        return city_from_address(visit.store.address)
    return visit.promoter.city or UNKNOWN_CITY


def _group_key(visit, group_by):
    if group_by == 'brand':
        return visit.brand_id
    if group_by == 'store':
        return visit.store_id
    return _visit_city(visit)


def calculate_financial_report(agency_id, start_date=None, end_date=None, group_by=None):
    """
    Visit totals, promoter payments, brand charges and gross margin.

    With ``group_by`` set to brand, store or city the same figures are also
    broken down per group, in order of first visit.
    """
    visits = _in_range(
        Visit.objects.filter(promoter__user__agency_id=agency_id)
        .select_related('promoter', 'brand', 'store')
        .order_by('timestamp', 'id'),
        start_date, end_date,
    )

    total_visits = 0
    total_payments = ZERO
    total_charges = ZERO
    groups = OrderedDict()

    for visit in visits:
        payment = visit.promoter.payment_per_visit or ZERO
        charge = visit.brand.price_per_visit or ZERO
        total_visits += 1
        total_payments += payment
        total_charges += charge

        if group_by:
            group = groups.setdefault(_group_key(visit, group_by), {'visits': 0, 'payments': ZERO, 'charges': ZERO})
            group['visits'] += 1
            group['payments'] += payment
            group['charges'] += charge

    return {
        'total_visits': total_visits,
        'total_promoter_payments': float(total_payments),
        'total_brand_charges': float(total_charges),
        'gross_margin': float(total_charges - total_payments),
        'grouped_data': [
            {
                'group_key': key,
                'visits': group['visits'],
                'promoter_payments': float(group['payments']),
                'brand_charges': float(group['charges']),
                'gross_margin': float(group['charges'] - group['payments']),
            }
            for key, group in groups.items()
        ],
    }


def _visit_counts(visits, field):
    counts = {}
    for key in visits.values_list(field, flat=True):
        counts[key] = counts.get(key, 0) + 1
    return counts


def get_promoter_report(agency_id, start_date=None, end_date=None):
    """Visits and earnings of every active promoter, highest earnings first"""
    promoters = list(
        Promoter.objects.filter(user__agency_id=agency_id, active=True)
        .select_related('user')
        .order_by('name', 'id')
    )
    counts = _visit_counts(
        _in_range(Visit.objects.filter(promoter__in=promoters), start_date, end_date), 'promoter_id'
    )

    rows = []
    for promoter in promoters:
        visits = counts.get(promoter.id, 0)
        rate = promoter.payment_per_visit or ZERO
        rows.append({
            'promoter_id': promoter.id,
            'promoter_name': promoter.name,
            'promoter_email': promoter.user.email,
            'promoter_phone': promoter.phone,
            'total_visits': visits,
            'total_payment': float(rate * visits),
            'payment_per_visit': float(rate),
        })
    rows.sort(key=lambda row: -row['total_payment'])
    return rows


def get_brand_report(agency_id, start_date=None, end_date=None):
    """Visits and charges per brand that had visits, highest charge first"""
    brands = list(Brand.objects.filter(agency_id=agency_id).order_by('name', 'id'))
    counts = _visit_counts(
        _in_range(Visit.objects.filter(brand__in=brands), start_date, end_date), 'brand_id'
    )

    rows = []
    for brand in brands:
        visits = counts.get(brand.id, 0)
        if not visits:
            continue
        price = brand.price_per_visit or ZERO
        rows.append({
            'brand_id': brand.id,
            'brand_name': brand.name,
            'total_visits': visits,
            'total_charge': float(price * visits),
            'price_per_visit': float(price),
        })
    rows.sort(key=lambda row: -row['total_charge'])
    return rows


def get_store_report(agency_id, start_date=None, end_date=None):
    """Visits, payments, charges and margin per store that had visits, busiest first"""
    stores = list(Store.objects.filter(agency_id=agency_id).order_by('chain_name', 'id'))
    payment_rates = dict(
        Promoter.objects.filter(user__agency_id=agency_id, active=True).values_list('id', 'payment_per_visit')
    )
    visits = _in_range(
        Visit.objects.filter(store__in=stores).select_related('brand'), start_date, end_date
    )

    stats = {}
    for visit in visits:
        entry = stats.setdefault(visit.store_id, {'visits': 0, 'payments': ZERO, 'charges': ZERO})
        entry['visits'] += 1
        entry['payments'] += payment_rates.get(visit.promoter_id) or ZERO
        entry['charges'] += visit.brand.price_per_visit or ZERO

    rows = []
    for store in stores:
        entry = stats.get(store.id)
        if entry is None:
            continue
        rows.append({
            'store_id': store.id,
            'store_name': store.chain_name,
            'store_address': store.address,
            'total_visits': entry['visits'],
            'total_promoter_payments': float(entry['payments']),
            'total_brand_charges': float(entry['charges']),
            'gross_margin': float(entry['charges'] - entry['payments']),
        })
    rows.sort(key=lambda row: -row['total_visits'])
    return rows


def get_to_be_paid_report(agency_id, start_date=None, end_date=None):
    """What each active promoter is owed for the period"""
    return [
        {
            'promoter_id': row['promoter_id'],
            'promoter_name': row['promoter_name'],
            'promoter_email': row['promoter_email'],
            'promoter_phone': row['promoter_phone'],
            'total_visits': row['total_visits'],
            'total_amount': row['total_payment'],
            'payment_per_visit': row['payment_per_visit'],
        }
        for row in get_promoter_report(agency_id, start_date, end_date)
    ]


def get_to_be_received_report(agency_id, start_date=None, end_date=None):
    """What each brand owes the agency for the period"""
    return [
        {
            'brand_id': row['brand_id'],
            'brand_name': row['brand_name'],
            'total_visits': row['total_visits'],
            'total_amount': row['total_charge'],
            'price_per_visit': row['price_per_visit'],
        }
        for row in get_brand_report(agency_id, start_date, end_date)
    ]
