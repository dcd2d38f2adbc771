from rest_framework.permissions import BasePermission

from .models import User


class HasRole(BasePermission):
    """Allow access only to users whose role is in ``allowed_roles``"""
    allowed_roles = ()
    message = 'Insufficient permissions'

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False
        return user.role in self.allowed_roles


class IsAgencyOrSystemAdmin(HasRole):
    allowed_roles = (User.ROLE_AGENCY, User.ROLE_SYSTEM_ADMIN)


class IsPromoter(HasRole):
    allowed_roles = (User.ROLE_PROMOTER,)
