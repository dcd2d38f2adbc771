import logging
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.shortcuts import get_object_or_404
from fieldops.core.permissions import IsAgencyOrSystemAdmin
from fieldops.core.utils import get_effective_agency_id, get_write_agency_id, scope_to_agency
from .models import Store
from .serializers import StoreSerializer

logger = logging.getLogger('fieldops.locations')


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsAgencyOrSystemAdmin])
def store_list_create(request):
    """List the agency's stores or create a new store"""
    try:
        if request.method == 'GET':
            agency_id = get_effective_agency_id(request, request.query_params.get('agency_id'))
            logger.debug(f"User {request.user.username} requested store list (agency: {agency_id})")
            stores = scope_to_agency(Store.objects.all(), agency_id)
            serializer = StoreSerializer(stores, many=True)
            return Response(serializer.data)

        agency_id = get_write_agency_id(request)
        if agency_id is None:
            return Response({'error': 'Agency scope required (agency_id for system_admin)'}, status=status.HTTP_400_BAD_REQUEST)

        logger.info(f"User {request.user.username} creating store with data: {request.data}")
        serializer = StoreSerializer(data=request.data)
        if serializer.is_valid():
            store = serializer.save(agency_id=agency_id)
            logger.info(f"Store '{store.chain_name}' created successfully by {request.user.username}")
            return Response(serializer.data, status=status.HTTP_201_CREATED)

        logger.warning(f"Store creation validation failed: {serializer.errors}")
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    except Exception as e:
        logger.error(f"Unexpected error in store_list_create: {str(e)}", exc_info=True)
        return Response({'error': 'An unexpected error occurred'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, IsAgencyOrSystemAdmin])
def store_detail(request, pk):
    """Retrieve, update or delete a store"""
    agency_id = get_effective_agency_id(request, request.query_params.get('agency_id'))
    store = get_object_or_404(scope_to_agency(Store.objects.all(), agency_id), pk=pk)

    try:
        if request.method == 'GET':
            serializer = StoreSerializer(store)
            return Response(serializer.data)
        elif request.method in ('PUT', 'PATCH'):
            partial = request.method == 'PATCH'
            logger.info(f"User {request.user.username} updating store {pk} with data: {request.data}")
            serializer = StoreSerializer(store, data=request.data, partial=partial)
            if serializer.is_valid():
                serializer.save()
                logger.info(f"Store {pk} updated successfully")
                return Response(serializer.data)
            logger.warning(f"Store update validation failed: {serializer.errors}")
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        else:  # DELETE
            logger.info(f"User {request.user.username} deleting store {pk} ({store.chain_name})")
            store.delete()
            return Response(status=status.HTTP_204_NO_CONTENT)
    except Exception as e:
        logger.error(f"Unexpected error in store_detail for pk {pk}: {str(e)}", exc_info=True)
        return Response({'error': 'An unexpected error occurred'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
