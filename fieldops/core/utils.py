"""Agency scoping helpers shared by the API views"""
from .models import User


def get_effective_agency_id(request, query_agency_id=None):
    """
    Resolve the agency a request is scoped to.

    - system_admin: uses ``query_agency_id`` when provided, otherwise None
      (unscoped; callers may list everything or require an agency).
    - everyone else: always their own agency, the query value is ignored.
    """
    user = getattr(request, 'user', None)
    if not user or not user.is_authenticated:
        return None
    if user.role == User.ROLE_SYSTEM_ADMIN:
        if query_agency_id in (None, ''):
            return None
        try:
            return int(query_agency_id)
        except (TypeError, ValueError):
            return None
    return user.agency_id


def scope_to_agency(queryset, agency_id, field='agency_id'):
    """Filter ``queryset`` by agency unless the request is unscoped"""
    if agency_id is None:
        return queryset
    return queryset.filter(**{field: agency_id})


def get_write_agency_id(request):
    """
    Agency that new records created by this request belong to.

    Agency users always write into their own agency; system admins must name
    one with ``agency_id`` in the request body.
    """
    return get_effective_agency_id(request, request.data.get('agency_id'))
