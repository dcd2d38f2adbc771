import logging
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.db import transaction
from django.shortcuts import get_object_or_404
from fieldops.core.permissions import IsAgencyOrSystemAdmin
from fieldops.core.utils import get_effective_agency_id, get_write_agency_id, scope_to_agency
from .models import Promoter
from .serializers import PromoterSerializer, PromoterCreateSerializer

logger = logging.getLogger('fieldops.promoters')


def _promoter_queryset():
    return Promoter.objects.select_related('user').prefetch_related('brands', 'stores')


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsAgencyOrSystemAdmin])
def promoter_list_create(request):
    """List the agency's promoters or create a promoter with its login"""
    if request.method == 'GET':
        agency_id = get_effective_agency_id(request, request.query_params.get('agency_id'))
        promoters = scope_to_agency(_promoter_queryset(), agency_id, field='user__agency_id')

        active = request.query_params.get('active')
        if active:
            promoters = promoters.filter(active=active.lower() == 'true')

        serializer = PromoterSerializer(promoters, many=True)
        return Response(serializer.data)

    agency_id = get_write_agency_id(request)
    if agency_id is None:
        return Response({'error': 'Agency scope required (agency_id for system_admin)'}, status=status.HTTP_400_BAD_REQUEST)

    serializer = PromoterCreateSerializer(data=request.data, context={'agency_id': agency_id})
    if not serializer.is_valid():
        logger.warning(f"Promoter creation validation failed: {serializer.errors}")
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    try:
        promoter = serializer.save()
    except Exception as e:
        logger.error(f"Unexpected error creating promoter: {str(e)}", exc_info=True)
        return Response({'error': 'Failed to create promoter'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    logger.info(f"Promoter '{promoter.name}' created by {request.user.username}")
    return Response(PromoterSerializer(promoter).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, IsAgencyOrSystemAdmin])
def promoter_detail(request, pk):
    """Retrieve, update or delete a promoter"""
    agency_id = get_effective_agency_id(request, request.query_params.get('agency_id'))
    promoter = get_object_or_404(scope_to_agency(_promoter_queryset(), agency_id, field='user__agency_id'), pk=pk)

    if request.method == 'GET':
        return Response(PromoterSerializer(promoter).data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = PromoterSerializer(promoter, data=request.data, partial=request.method == 'PATCH',
                                        context={'agency_id': promoter.user.agency_id})
        if serializer.is_valid():
            with transaction.atomic():
                promoter = serializer.save()
            logger.info(f"Promoter {pk} updated by {request.user.username}")
            return Response(PromoterSerializer(promoter).data)
        logger.warning(f"Promoter update validation failed: {serializer.errors}")
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        logger.info(f"User {request.user.username} deleting promoter {pk} ({promoter.name})")
        with transaction.atomic():
            user = promoter.user
            promoter.delete()
            user.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)
