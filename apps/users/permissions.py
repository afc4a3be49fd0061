# apps/users/permissions.py

from rest_framework.permissions import BasePermission, SAFE_METHODS


class IsAdminOrReadOnly(BasePermission):
    def has_permission(self, request, view):
        # Anyone may browse, including anonymous visitors
        if request.method in SAFE_METHODS:
            return True
        # Only admin can create/update/delete
        return request.user.is_authenticated and getattr(request.user, 'role', None) == 'admin'


class IsAdminOnly(BasePermission):
    """Only admin users can access"""
    message = 'Unauthorized. Admin access required.'

    def has_permission(self, request, view):
        return request.user.is_authenticated and getattr(request.user, 'role', None) == 'admin'
