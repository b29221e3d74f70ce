from __future__ import annotations

from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from django.http import JsonResponse
from django.utils.deprecation import MiddlewareMixin

from pm_core.common.api.exceptions import build_error_envelope
from pm_core.iam.scope import INVALID_SCOPE_MSG, MISSING_SCOPE_MSG


@dataclass(frozen=True)
class RequestScope:
    tenant_id: UUID
    facility_id: UUID


def _parse_uuid(value: str) -> Optional[UUID]:
    try:
        return UUID(str(value))
    except ValueError:
        return None


class TenantFacilityScopeMiddleware(MiddlewareMixin):
    """
    Enforces tenant/facility scope for API requests.

    Behavior:
      - Enforced for both /api/v1/* and /api/* (alias).
      - BOTH headers are required (400 if missing), except /me/ where they are optional.
      - Auth endpoints (login/refresh/logout) never require scope.
      - Docs/schema/admin endpoints are public.
      - Invalid UUIDs -> 400, user not a member -> 403.
      - On success attaches request.scope, request.tenant_id, request.facility_id.
    """

    TENANT_META_KEY = "HTTP_X_TENANT_ID"
    FACILITY_META_KEY = "HTTP_X_FACILITY_ID"

    ENFORCED_PREFIXES = ("/api/v1/", "/api/")

    PUBLIC_PATH_PREFIXES = (
        "/admin/",
        "/api/docs/",
        "/api/schema/",
    )

    AUTH_PATH_SUFFIXES = (
        "/auth/login/",
        "/auth/refresh/",
        "/auth/logout/",
    )

    ALLOW_NO_SCOPE_EXACT_PATHS = (
        "/api/v1/",
        "/api/",
    )

    ALLOW_NO_SCOPE_SUFFIXES = ("/me/",)

    def _starts_with_any(self, path: str, prefixes: tuple[str, ...]) -> bool:
        return any(path.startswith(p) for p in prefixes)

    def _endswith_any(self, path: str, suffixes: tuple[str, ...]) -> bool:
        return any(path.endswith(s) for s in suffixes)

    def _json_error(self, request, *, status_code: int, code: str, message: str) -> JsonResponse:
        return JsonResponse(
            build_error_envelope(request=request, code=code, message=message, details=None),
            status=status_code,
        )

    def process_request(self, request):
        request.scope = None
        request.tenant_id = None
        request.facility_id = None

        path = getattr(request, "path", "") or ""

        if self._starts_with_any(path, self.PUBLIC_PATH_PREFIXES):
            return None

        if not self._starts_with_any(path, self.ENFORCED_PREFIXES):
            return None

        if path in self.ALLOW_NO_SCOPE_EXACT_PATHS:
            return None

        if self._endswith_any(path, self.AUTH_PATH_SUFFIXES):
            return None

        # JWT users are resolved later by DRF; the auth class re-checks scope then.
        user = getattr(request, "user", None)
        if not user or not user.is_authenticated:
            return None

        tenant_raw = request.META.get(self.TENANT_META_KEY)
        facility_raw = request.META.get(self.FACILITY_META_KEY)

        if not tenant_raw and not facility_raw:
            if self._endswith_any(path, self.ALLOW_NO_SCOPE_SUFFIXES):
                return None
            return self._json_error(request, status_code=400, code="validation_error", message=MISSING_SCOPE_MSG)

        if not tenant_raw or not facility_raw:
            return self._json_error(request, status_code=400, code="validation_error", message=MISSING_SCOPE_MSG)

        tenant_id = _parse_uuid(tenant_raw)
        facility_id = _parse_uuid(facility_raw)
        if not tenant_id or not facility_id:
            return self._json_error(request, status_code=400, code="validation_error", message=INVALID_SCOPE_MSG)

        from pm_core.iam.services.membership import is_user_member_of_facility

        if not is_user_member_of_facility(user_id=user.id, tenant_id=tenant_id, facility_id=facility_id):
            return self._json_error(
                request,
                status_code=403,
                code="permission_denied",
                message="You do not have access to the selected facility.",
            )

        request.scope = RequestScope(tenant_id=tenant_id, facility_id=facility_id)
        request.tenant_id = tenant_id
        request.facility_id = facility_id
        return None
