import csv
import logging
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.http import HttpResponse
from django.utils import timezone
from datetime import datetime
from fieldops.core.permissions import IsAgencyOrSystemAdmin
from fieldops.core.utils import get_effective_agency_id
from .financial import (
    GROUP_BY_CHOICES, calculate_financial_report, get_brand_report, get_promoter_report,
    get_store_report, get_to_be_paid_report, get_to_be_received_report,
)
from .services import calculate_planned_visits, get_brands_without_allocations

logger = logging.getLogger('fieldops.reports')

AGENCY_REQUIRED = {'error': 'Agency scope required (agency_id for system_admin)'}


def _report_agency_id(request):
    return get_effective_agency_id(request, request.query_params.get('agency_id'))


def _date_range(request, default_start=None, default_end=None):
    """
    Parse ``start_date`` / ``end_date`` (YYYY-MM-DD) query params.

    Returns ``(start, end, None)`` or ``(None, None, error_response)``.
    """
    start_date = request.query_params.get('start_date', None)
    end_date = request.query_params.get('end_date', None)
    try:
        start_date = datetime.strptime(start_date, '%Y-%m-%d').date() if start_date else default_start
        end_date = datetime.strptime(end_date, '%Y-%m-%d').date() if end_date else default_end
    except ValueError:
        return None, None, Response({'error': 'Dates must use the YYYY-MM-DD format'}, status=status.HTTP_400_BAD_REQUEST)

    if start_date and end_date and end_date < start_date:
        return None, None, Response({'error': 'end_date must not be before start_date'}, status=status.HTTP_400_BAD_REQUEST)
    return start_date, end_date, None


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAgencyOrSystemAdmin])
def planned_visits(request):
    """Planned versus executed visits (defaults to the current month so far)"""
    agency_id = _report_agency_id(request)
    if agency_id is None:
        return Response(AGENCY_REQUIRED, status=status.HTTP_400_BAD_REQUEST)

    today = timezone.localdate()
    start_date, end_date, error_response = _date_range(request, today.replace(day=1), today)
    if error_response is not None:
        return error_response

    try:
        report = calculate_planned_visits(agency_id, start_date, end_date)
    except Exception as e:
        logger.error(f"Failed to calculate planned visits for agency {agency_id}: {str(e)}", exc_info=True)
        return Response({'error': 'Failed to calculate planned visits'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
    return Response(report)


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAgencyOrSystemAdmin])
def brands_without_allocations(request):
    """Brands that need visits but have no active allocation"""
    agency_id = _report_agency_id(request)
    if agency_id is None:
        return Response(AGENCY_REQUIRED, status=status.HTTP_400_BAD_REQUEST)

    try:
        brands = get_brands_without_allocations(agency_id)
    except Exception as e:
        logger.error(f"Failed to get brands without allocations for agency {agency_id}: {str(e)}", exc_info=True)
        return Response({'error': 'Failed to get brands without allocations'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
    return Response(brands)


def _financial_params(request):
    """Agency, date range and grouping shared by the financial report and its export"""
    agency_id = _report_agency_id(request)
    if agency_id is None:
        return None, Response(AGENCY_REQUIRED, status=status.HTTP_400_BAD_REQUEST)

    start_date, end_date, error_response = _date_range(request)
    if error_response is not None:
        return None, error_response

    group_by = request.query_params.get('group_by') or None
    if group_by is not None and group_by not in GROUP_BY_CHOICES:
        return None, Response({'error': f"group_by must be one of: {', '.join(GROUP_BY_CHOICES)}"},
                              status=status.HTTP_400_BAD_REQUEST)
    return (agency_id, start_date, end_date, group_by), None


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAgencyOrSystemAdmin])
def financial_report(request):
    """Visit totals, promoter payments, brand charges and gross margin"""
    params, error_response = _financial_params(request)
    if error_response is not None:
        return error_response

    try:
        report = calculate_financial_report(*params)
    except Exception as e:
        logger.error(f"Failed to generate financial report for agency {params[0]}: {str(e)}", exc_info=True)
        return Response({'error': 'Failed to generate financial report'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
    return Response(report)


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAgencyOrSystemAdmin])
def financial_report_export(request):
    """
    Download the financial report.

    ``file_format`` selects the output; only ``csv`` is supported.
    """
    params, error_response = _financial_params(request)
    if error_response is not None:
        return error_response

    file_format = request.query_params.get('file_format', 'csv')
    if file_format == 'pdf':
        return Response({'error': 'PDF export not yet implemented'}, status=status.HTTP_501_NOT_IMPLEMENTED)
    if file_format != 'csv':
        return Response({'error': 'Invalid format. Use csv or pdf'}, status=status.HTTP_400_BAD_REQUEST)

    try:
        report = calculate_financial_report(*params)
    except Exception as e:
        logger.error(f"Failed to export financial report for agency {params[0]}: {str(e)}", exc_info=True)
        return Response({'error': 'Failed to export financial report'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    response = HttpResponse(content_type='text/csv')
    response['Content-Disposition'] = 'attachment; filename=financial-report.csv'
    writer = csv.writer(response)
    writer.writerow(['Group', 'Visits', 'Promoter Payments', 'Brand Charges', 'Gross Margin'])
    for row in report['grouped_data']:
        writer.writerow([row['group_key'], row['visits'], row['promoter_payments'],
                         row['brand_charges'], row['gross_margin']])
    writer.writerow(['Total', report['total_visits'], report['total_promoter_payments'],
                     report['total_brand_charges'], report['gross_margin']])
    logger.info(f"Financial report exported by {request.user.username} (agency {params[0]})")
    return response


def _period_report_view(report_fn, label):
    """Build a GET view for a per-period report taking (agency_id, start_date, end_date)"""

    @api_view(['GET'])
    @permission_classes([IsAuthenticated, IsAgencyOrSystemAdmin])
    def view(request):
        agency_id = _report_agency_id(request)
        if agency_id is None:
            return Response(AGENCY_REQUIRED, status=status.HTTP_400_BAD_REQUEST)

        start_date, end_date, error_response = _date_range(request)
        if error_response is not None:
            return error_response

        try:
            rows = report_fn(agency_id, start_date, end_date)
        except Exception as e:
            logger.error(f"Failed to generate {label} for agency {agency_id}: {str(e)}", exc_info=True)
            return Response({'error': f'Failed to generate {label}'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
        return Response(rows)

    view.__doc__ = report_fn.__doc__
    return view


promoter_report = _period_report_view(get_promoter_report, 'promoter report')
brand_report = _period_report_view(get_brand_report, 'brand report')
store_report = _period_report_view(get_store_report, 'store report')
to_be_paid_report = _period_report_view(get_to_be_paid_report, 'to be paid report')
to_be_received_report = _period_report_view(get_to_be_received_report, 'to be received report')
