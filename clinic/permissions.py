"""
Role based permission classes.
"""
from rest_framework.permissions import BasePermission

from clinic.models import Role


def require_role(*roles: str):
    """Build a permission class admitting authenticated users of ``roles``."""
    allowed = frozenset(roles)

    class RolePermission(BasePermission):
        message = 'Access denied. Insufficient permissions.'

        def has_permission(self, request, view) -> bool:  # type: ignore[override]
            user = getattr(request, 'user', None)
            return bool(user and user.is_authenticated and getattr(user, 'user_type', None) in allowed)

    RolePermission.__name__ = 'Is' + ''.join(r.title() for r in sorted(allowed)) + 'Role'
    return RolePermission


IsStaffRole = require_role(Role.STAFF)
IsPatientRole = require_role(Role.PATIENT)
IsDoctorRole = require_role(Role.DOCTOR)
IsStaffOrDoctor = require_role(Role.STAFF, Role.DOCTOR)
