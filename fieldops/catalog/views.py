import logging
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.db import transaction
from django.shortcuts import get_object_or_404
from fieldops.core.permissions import IsAgencyOrSystemAdmin
from fieldops.core.utils import get_effective_agency_id, get_write_agency_id, scope_to_agency
from .models import Brand
from .serializers import BrandSerializer

logger = logging.getLogger('fieldops.catalog')


def _brand_queryset():
    return Brand.objects.prefetch_related('brand_stores__store')


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsAgencyOrSystemAdmin])
def brand_list_create(request):
    """List the agency's brands or create a new brand"""
    if request.method == 'GET':
        agency_id = get_effective_agency_id(request, request.query_params.get('agency_id'))
        brands = scope_to_agency(_brand_queryset(), agency_id)
        serializer = BrandSerializer(brands, many=True)
        return Response(serializer.data)

    agency_id = get_write_agency_id(request)
    if agency_id is None:
        return Response({'error': 'Agency scope required (agency_id for system_admin)'}, status=status.HTTP_400_BAD_REQUEST)

    serializer = BrandSerializer(data=request.data, context={'agency_id': agency_id})
    if serializer.is_valid():
        with transaction.atomic():
            brand = serializer.save(agency_id=agency_id)
        logger.info(f"Brand '{brand.name}' created by {request.user.username}")
        return Response(BrandSerializer(brand).data, status=status.HTTP_201_CREATED)
    logger.warning(f"Brand creation validation failed: {serializer.errors}")
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, IsAgencyOrSystemAdmin])
def brand_detail(request, pk):
    """Retrieve, update or delete a brand"""
    agency_id = get_effective_agency_id(request, request.query_params.get('agency_id'))
    brand = get_object_or_404(scope_to_agency(_brand_queryset(), agency_id), pk=pk)

    if request.method == 'GET':
        serializer = BrandSerializer(brand)
        return Response(serializer.data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = BrandSerializer(brand, data=request.data, partial=request.method == 'PATCH',
                                     context={'agency_id': brand.agency_id})
        if serializer.is_valid():
            with transaction.atomic():
                brand = serializer.save()
            logger.info(f"Brand {pk} updated by {request.user.username}")
            return Response(BrandSerializer(brand).data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        logger.info(f"User {request.user.username} deleting brand {pk} ({brand.name})")
        brand.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)
