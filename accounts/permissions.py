from rest_framework.permissions import BasePermission

from .models import Role


class HasAppRole(BasePermission):
    """Allow authenticated callers whose role is one of the API roles."""

    message = "Your account role does not allow access to this resource."
    allowed_roles = (Role.ADMIN, Role.USER)

    def has_permission(self, request, view):
        user = request.user
        if not (user and user.is_authenticated):
            return False
        return getattr(user, "role", None) in self.allowed_roles
