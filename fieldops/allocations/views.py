import logging
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.conf import settings
from django.db import IntegrityError, transaction
from django.shortcuts import get_object_or_404
from fieldops.catalog.models import Brand, BrandStore
from fieldops.core.permissions import IsAgencyOrSystemAdmin
from fieldops.core.utils import get_effective_agency_id, get_write_agency_id
from fieldops.locations.models import Store
from fieldops.promoters.models import Promoter
from .filters import AllocationFilter
from .models import Allocation
from .serializers import AllocationSerializer, AllocationWriteSerializer
from .services import get_suggested_days

logger = logging.getLogger('fieldops.allocations')


def _allocation_queryset(agency_id):
    """Allocations whose promoter, brand and store all belong to the agency"""
    queryset = Allocation.objects.select_related('promoter', 'brand', 'store')
    if agency_id is None:
        return queryset
    return queryset.filter(
        promoter__user__agency_id=agency_id,
        brand__agency_id=agency_id,
        store__agency_id=agency_id,
    )


def _resolve_agency_entities(agency_id, promoter_id, brand_id, store_id):
    """
    Load promoter, brand and store, checking they belong to the agency.

    Returns ``(promoter, brand, store, None)`` or ``(None, None, None, error_response)``.
    """
    promoters = Promoter.objects.filter(pk=promoter_id)
    brands = Brand.objects.filter(pk=brand_id)
    stores = Store.objects.filter(pk=store_id)
    if agency_id is not None:
        promoters = promoters.filter(user__agency_id=agency_id)
        brands = brands.filter(agency_id=agency_id)
        stores = stores.filter(agency_id=agency_id)

    promoter = promoters.first()
    if promoter is None:
        return None, None, None, Response({'error': 'Promoter not found'}, status=status.HTTP_404_NOT_FOUND)
    brand = brands.first()
    if brand is None:
        return None, None, None, Response({'error': 'Brand not found'}, status=status.HTTP_404_NOT_FOUND)
    store = stores.first()
    if store is None:
        return None, None, None, Response({'error': 'Store not found'}, status=status.HTTP_404_NOT_FOUND)
    return promoter, brand, store, None


def _parse_frequency(raw):
    """Requested visits per week; missing, invalid or zero values fall back to 1"""
    try:
        frequency = int(raw)
    except (TypeError, ValueError):
        return 1
    return frequency or 1


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsAgencyOrSystemAdmin])
def allocation_list_create(request):
    """List the agency's allocations or create a new allocation"""
    if request.method == 'GET':
        agency_id = get_effective_agency_id(request, request.query_params.get('agency_id'))
        queryset = AllocationFilter(request.query_params, queryset=_allocation_queryset(agency_id)).qs
        serializer = AllocationSerializer(queryset, many=True)
        return Response(serializer.data)

    agency_id = get_write_agency_id(request)
    if agency_id is None:
        return Response({'error': 'Agency scope required (agency_id for system_admin)'}, status=status.HTTP_400_BAD_REQUEST)

    serializer = AllocationWriteSerializer(data=request.data)
    if not serializer.is_valid():
        logger.warning(f"Allocation creation validation failed: {serializer.errors}")
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    data = serializer.validated_data

    promoter, brand, store, error_response = _resolve_agency_entities(
        agency_id, data['promoter_id'], data['brand_id'], data['store_id']
    )
    if error_response is not None:
        return error_response

    if not promoter.brands.filter(pk=brand.pk).exists():
        return Response({'error': 'Promoter is not authorized for this brand'}, status=status.HTTP_400_BAD_REQUEST)
    if not promoter.stores.filter(pk=store.pk).exists():
        return Response({'error': 'Promoter is not authorized for this store'}, status=status.HTTP_400_BAD_REQUEST)
    if not BrandStore.objects.filter(brand=brand, store=store).exists():
        return Response({'error': 'Brand is not present in this store'}, status=status.HTTP_400_BAD_REQUEST)
    if Allocation.objects.filter(promoter=promoter, brand=brand, store=store).exists():
        return Response({'error': 'Allocation already exists for this promoter-brand-store combination'},
                        status=status.HTTP_400_BAD_REQUEST)

    try:
        with transaction.atomic():
            allocation = serializer.save()
    except IntegrityError as e:
        logger.error(f"IntegrityError creating allocation: {str(e)}", exc_info=True)
        return Response({'error': 'Allocation already exists for this promoter-brand-store combination'},
                        status=status.HTTP_400_BAD_REQUEST)
    except Exception as e:
        logger.error(f"Unexpected error creating allocation: {str(e)}", exc_info=True)
        return Response({'error': f'Failed to create allocation: {str(e)}'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    logger.info(
        f"Allocation {allocation.id} created by {request.user.username}: promoter {promoter.id}, "
        f"brand {brand.id}, store {store.id}, days {allocation.days_of_week}"
    )
    return Response(AllocationSerializer(allocation).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, IsAgencyOrSystemAdmin])
def allocation_detail(request, pk):
    """Retrieve, update or delete an allocation"""
    agency_id = get_effective_agency_id(request, request.query_params.get('agency_id'))
    allocation = get_object_or_404(_allocation_queryset(agency_id), pk=pk)

    if request.method == 'GET':
        return Response(AllocationSerializer(allocation).data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = AllocationWriteSerializer(allocation, data=request.data, partial=request.method == 'PATCH')
        if not serializer.is_valid():
            logger.warning(f"Allocation {pk} update validation failed: {serializer.errors}")
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        try:
            allocation = serializer.save()
        except Exception as e:
            logger.error(f"Unexpected error updating allocation {pk}: {str(e)}", exc_info=True)
            return Response({'error': f'Failed to update allocation: {str(e)}'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
        logger.info(f"Allocation {pk} updated by {request.user.username}")
        return Response(AllocationSerializer(allocation).data)
    else:  # DELETE
        logger.info(f"User {request.user.username} deleting allocation {pk}")
        allocation.delete()
        return Response({'message': 'Allocation deleted successfully'})


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAgencyOrSystemAdmin])
def allocation_suggestions(request, promoter_id, brand_id, store_id):
    """Suggest weekdays for a new allocation of a promoter to a brand at a store"""
    agency_id = get_effective_agency_id(request, request.query_params.get('agency_id'))
    frequency_per_week = _parse_frequency(request.query_params.get('frequency'))

    promoter, brand, store, error_response = _resolve_agency_entities(agency_id, promoter_id, brand_id, store_id)
    if error_response is not None:
        return error_response

    try:
        suggestion = get_suggested_days(
            promoter.id, brand.id, store.id, frequency_per_week,
            default_days=settings.FIELDOPS_DEFAULT_AVAILABILITY_DAYS,
        )
    except Exception as e:
        logger.error(f"Failed to get suggestions for promoter {promoter_id}: {str(e)}", exc_info=True)
        return Response({'error': f'Failed to get suggestions: {str(e)}'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    return Response(suggestion.as_dict())
