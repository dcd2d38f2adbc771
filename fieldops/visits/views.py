import logging
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated, BasePermission
from django.shortcuts import get_object_or_404
from django.utils import timezone
from fieldops.core.permissions import IsAgencyOrSystemAdmin, IsPromoter
from fieldops.core.utils import get_effective_agency_id, scope_to_agency
from fieldops.promoters.models import Promoter
from .filters import VisitFilter
from .gps import is_within_store_radius
from .models import Visit
from .serializers import VisitSerializer, VisitCreateSerializer, VisitUpdateSerializer

logger = logging.getLogger('fieldops.visits')


class CanListOrRecordVisits(BasePermission):
    """Agencies read the visit list; promoters record visits"""
    message = 'Insufficient permissions'

    def has_permission(self, request, view):
        if request.method == 'POST':
            return IsPromoter().has_permission(request, view)
        return IsAgencyOrSystemAdmin().has_permission(request, view)


def _visit_queryset(agency_id):
    queryset = Visit.objects.select_related('promoter', 'store', 'brand')
    return scope_to_agency(queryset, agency_id, field='promoter__user__agency_id')


def _current_promoter(request):
    return Promoter.objects.select_related('user').filter(user=request.user).first()


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, CanListOrRecordVisits])
def visit_list_create(request):
    """List the agency's visits or record a visit for the signed-in promoter"""
    if request.method == 'GET':
        agency_id = get_effective_agency_id(request, request.query_params.get('agency_id'))
        filterset = VisitFilter(request.query_params, queryset=_visit_queryset(agency_id))
        if not filterset.is_valid():
            return Response(filterset.errors, status=status.HTTP_400_BAD_REQUEST)
        serializer = VisitSerializer(filterset.qs, many=True)
        return Response(serializer.data)

    promoter = _current_promoter(request)
    if promoter is None:
        return Response({'error': 'Promoter not found'}, status=status.HTTP_404_NOT_FOUND)

    serializer = VisitCreateSerializer(data=request.data)
    if not serializer.is_valid():
        logger.warning(f"Visit validation failed for promoter {promoter.id}: {serializer.errors}")
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    data = serializer.validated_data

    store = promoter.stores.filter(pk=data['store_id']).first()
    if store is None or not promoter.brands.filter(pk=data['brand_id']).exists():
        return Response({'error': 'Promoter not authorized for this store or brand'}, status=status.HTTP_403_FORBIDDEN)

    if not is_within_store_radius(data['gps_latitude'], data['gps_longitude'], store):
        logger.warning(
            f"Promoter {promoter.id} checked in outside store {store.id} radius "
            f"({data['gps_latitude']}, {data['gps_longitude']})"
        )
        return Response({'error': 'GPS coordinates are not within store radius'}, status=status.HTTP_400_BAD_REQUEST)

    try:
        visit = Visit.objects.create(
            promoter=promoter,
            store=store,
            brand_id=data['brand_id'],
            gps_latitude=data['gps_latitude'],
            gps_longitude=data['gps_longitude'],
            timestamp=timezone.now(),
            status=Visit.STATUS_COMPLETED,
            notes=data.get('notes'),
        )
    except Exception as e:
        logger.error(f"Unexpected error creating visit: {str(e)}", exc_info=True)
        return Response({'error': 'Failed to create visit'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    logger.info(f"Visit {visit.id} recorded by promoter {promoter.id} at store {store.id} for brand {visit.brand_id}")
    return Response(VisitSerializer(visit).data, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsPromoter])
def my_visits(request):
    """Visits recorded by the signed-in promoter, newest first"""
    promoter = _current_promoter(request)
    if promoter is None:
        return Response({'error': 'Promoter not found'}, status=status.HTTP_404_NOT_FOUND)
    visits = Visit.objects.filter(promoter=promoter).select_related('promoter', 'store', 'brand')
    return Response(VisitSerializer(visits, many=True).data)


@api_view(['GET', 'PUT', 'PATCH'])
@permission_classes([IsAuthenticated, IsAgencyOrSystemAdmin])
def visit_detail(request, pk):
    """Retrieve a visit or edit its notes"""
    agency_id = get_effective_agency_id(request, request.query_params.get('agency_id'))
    visit = get_object_or_404(_visit_queryset(agency_id), pk=pk)

    if request.method == 'GET':
        return Response(VisitSerializer(visit).data)

    serializer = VisitUpdateSerializer(visit, data=request.data, partial=True)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    visit = serializer.save()
    logger.info(f"Visit {pk} edited by {request.user.username}")
    return Response(VisitSerializer(visit).data)
