"""
Role and scope based access control.

The permission classes gate whole endpoints by role; the ``can_*`` helpers
check that the target of a request lies inside the principal's scope.
"""
from typing import Optional

from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import BasePermission

from .services.credentials import ADMIN, MANAGER, PATIENT, STAFF, SUPERVISOR

HOSPITAL_ROLES = {ADMIN, SUPERVISOR}
DEPARTMENT_ROLES = {ADMIN, SUPERVISOR, MANAGER}


def _role(request) -> Optional[str]:
    user = getattr(request, "user", None)
    if not (user and user.is_authenticated):
        return None
    return getattr(user, "role", None)


class IsAdminRole(BasePermission):
    """Allow access only to the global admin."""
    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        return _role(request) == ADMIN


class IsHospitalRole(BasePermission):
    """Admin or hospital supervisor."""
    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        return _role(request) in HOSPITAL_ROLES


class IsDepartmentRole(BasePermission):
    """Admin, supervisor or department manager."""
    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        return _role(request) in DEPARTMENT_ROLES


class IsNotStaff(BasePermission):
    """Every role able to send chat messages."""
    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        role = _role(request)
        return role is not None and role != STAFF


def can_manage_hospital(principal, hospital_id) -> bool:
    if principal.role == ADMIN:
        return True
    return principal.role == SUPERVISOR and principal.hospital_id == hospital_id


def can_manage_department(principal, hospital_id, department_id) -> bool:
    if can_manage_hospital(principal, hospital_id):
        return True
    return (principal.role == MANAGER and principal.hospital_id == hospital_id
            and principal.department_id == department_id)


def can_access_staff(principal, hospital_id, department_id, staff_id) -> bool:
    if can_manage_department(principal, hospital_id, department_id):
        return True
    return principal.role == STAFF and principal.staff_id == staff_id


def can_access_patient(principal, hospital_id, department_id, patient_id) -> bool:
    if can_manage_department(principal, hospital_id, department_id):
        return True
    return principal.role == PATIENT and principal.patient_id == patient_id


def can_view_hospital(principal, hospital_id) -> bool:
    return principal.role == ADMIN or principal.hospital_id == hospital_id


def ensure(allowed: bool, message: str = 'You do not have access to this item.') -> None:
    if not allowed:
        raise PermissionDenied(message)
