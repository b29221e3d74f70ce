# pm_core/common/permissions.py

from __future__ import annotations

from typing import Set
from uuid import UUID

from rest_framework.permissions import BasePermission, SAFE_METHODS

# Group/role names (Django auth Group names)
ROLE_ADMIN = "ADMIN"
ROLE_MANAGER = "MANAGER"
ROLE_OPERATOR = "OPERATOR"
ROLE_READONLY = "READONLY"

ALL_ROLES = {ROLE_ADMIN, ROLE_MANAGER, ROLE_OPERATOR, ROLE_READONLY}


def _user_roles(user) -> Set[str]:
    """
    Resolve roles from:
    1) Django groups: user.groups (recommended)
    2) Optional user.role attribute

    Authenticated users without roles/groups are treated as READONLY.
    """
    roles: Set[str] = set()

    if not user or not getattr(user, "is_authenticated", False):
        return roles

    # Superuser treated as admin
    if getattr(user, "is_superuser", False):
        roles.add(ROLE_ADMIN)
        return roles

    if hasattr(user, "groups"):
        roles.update(user.groups.values_list("name", flat=True))

    if hasattr(user, "role") and user.role:
        roles.add(str(user.role))

    if not roles:
        roles.add(ROLE_READONLY)

    return roles


# -----------------------------
# Scope helpers (Tenant/Facility)
# -----------------------------

def _get_header(request, name: str) -> str | None:
    """
    Prefer request.headers (case-insensitive), fallback to META (pytest uses HTTP_*).
    """
    v = request.headers.get(name)
    if v:
        return v
    meta_key = "HTTP_" + name.upper().replace("-", "_")
    return request.META.get(meta_key)


def ensure_scope_on_request(request) -> bool:
    """
    Ensure request.tenant_id and request.facility_id exist.

    Permissions must not raise ValidationError (it becomes 400);
    return False when missing/invalid so DRF returns 403.
    """
    tenant_id = getattr(request, "tenant_id", None)
    facility_id = getattr(request, "facility_id", None)

    if tenant_id and facility_id:
        return True

    raw_tenant = _get_header(request, "X-Tenant-Id")
    raw_facility = _get_header(request, "X-Facility-Id")

    if not raw_tenant or not raw_facility:
        return False

    try:
        tenant_uuid = UUID(str(raw_tenant))
        facility_uuid = UUID(str(raw_facility))
    except ValueError:
        return False

    setattr(request, "tenant_id", tenant_uuid)
    setattr(request, "facility_id", facility_uuid)
    return True


class BaseRolePermission(BasePermission):
    """
    Base permission class for role-based access control.

    - ADMIN bypass.
    - allowed_roles_per_action drives strict RBAC.
    - Unknown action on a SAFE request falls back to list/retrieve.
    """
    message = "You do not have permission to perform this action."

    # Override in subclasses: dict of action -> set of allowed roles
    allowed_roles_per_action = {
        "list": set(ALL_ROLES),
        "retrieve": set(ALL_ROLES),
        "create": {ROLE_ADMIN},
        "update": {ROLE_ADMIN},
        "partial_update": {ROLE_ADMIN},
        "destroy": {ROLE_ADMIN},
    }

    def _infer_action(self, request, view) -> str | None:
        action = getattr(view, "action", None)
        if action:
            return action

        kwargs = getattr(view, "kwargs", {}) or {}
        is_detail = "pk" in kwargs or "id" in kwargs

        method = request.method.upper()
        if method in ("GET", "HEAD", "OPTIONS"):
            return "retrieve" if is_detail else "list"
        if method == "POST":
            return "create"
        if method == "PUT":
            return "update"
        if method == "PATCH":
            return "partial_update"
        if method == "DELETE":
            return "destroy"
        return None

    def has_permission(self, request, view) -> bool:
        if not ensure_scope_on_request(request):
            return False

        user = request.user
        if not user or not getattr(user, "is_authenticated", False):
            return False

        roles = _user_roles(user)

        if ROLE_ADMIN in roles:
            return True

        action = self._infer_action(request, view)
        allowed = self.allowed_roles_per_action.get(action)

        if allowed is None and request.method in SAFE_METHODS:
            kwargs = getattr(view, "kwargs", {}) or {}
            is_detail = "pk" in kwargs or "id" in kwargs
            read_action = "retrieve" if is_detail else "list"
            allowed = self.allowed_roles_per_action.get(read_action)

        if allowed is not None:
            return bool(roles & allowed)

        # Unknown action => deny
        return False

    def has_object_permission(self, request, view, obj) -> bool:
        return self.has_permission(request, view)


class WorkstationPermission(BaseRolePermission):
    """Workstations plus their tracking rules and tracked parts."""
    allowed_roles_per_action = {
        "list": set(ALL_ROLES),
        "retrieve": set(ALL_ROLES),
        "create": {ROLE_ADMIN, ROLE_MANAGER},
        "update": {ROLE_ADMIN, ROLE_MANAGER},
        "partial_update": {ROLE_ADMIN, ROLE_MANAGER},
        "destroy": {ROLE_ADMIN},
        "tracking_rules": set(ALL_ROLES),
        "save_tracking_rules": {ROLE_ADMIN, ROLE_MANAGER},
        "evaluate_tracking_rules": {ROLE_ADMIN, ROLE_MANAGER},
        "tracked_parts": set(ALL_ROLES),
        "complete_parts": {ROLE_ADMIN, ROLE_MANAGER, ROLE_OPERATOR},
    }


class ProjectPermission(BaseRolePermission):
    allowed_roles_per_action = {
        "list": set(ALL_ROLES),
        "retrieve": set(ALL_ROLES),
        "create": {ROLE_ADMIN, ROLE_MANAGER},
        "update": {ROLE_ADMIN, ROLE_MANAGER},
        "partial_update": {ROLE_ADMIN, ROLE_MANAGER},
        "destroy": {ROLE_ADMIN},
        "part_counts": set(ALL_ROLES),
    }


class PartsListPermission(BaseRolePermission):
    allowed_roles_per_action = {
        "list": set(ALL_ROLES),
        "retrieve": set(ALL_ROLES),
        "create": {ROLE_ADMIN, ROLE_MANAGER},
        "destroy": {ROLE_ADMIN},
        "generate_tracking": {ROLE_ADMIN, ROLE_MANAGER},
    }


class TrackingOptionsPermission(BaseRolePermission):
    allowed_roles_per_action = {
        "list": set(ALL_ROLES),
    }


class AuditPermission(BaseRolePermission):
    allowed_roles_per_action = {
        "list": {ROLE_ADMIN, ROLE_MANAGER},
    }
