"""
Role based permission classes for the ward API.

Roles: ``tecnico`` (technician), ``enfermeiro`` (nurse) and
``coordenacao`` (coordination).  The master developer account counts as
coordination everywhere.
"""
from rest_framework.permissions import BasePermission

NURSING_ROLES = {"enfermeiro", "coordenacao"}


def is_coordination(user) -> bool:
    return bool(user and (getattr(user, "role", None) == "coordenacao" or getattr(user, "is_developer", False)))


def is_nursing(user) -> bool:
    return bool(user and (getattr(user, "role", None) in NURSING_ROLES or getattr(user, "is_developer", False)))


class IsNursingRole(BasePermission):
    """Nurse or coordination: deletes, discharges, lean monitoring, user lookup."""
    message = "Apenas Enfermeiros ou Coordenação possuem permissão para esta ação."

    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        user = getattr(request, "user", None)
        return bool(user and user.is_authenticated and is_nursing(user))


class IsCoordination(BasePermission):
    """Coordination or the master developer account."""
    message = "Apenas a Coordenação possui permissão para esta ação."

    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        user = getattr(request, "user", None)
        return bool(user and user.is_authenticated and is_coordination(user))
