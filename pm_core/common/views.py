# pm_core/common/views.py
from __future__ import annotations

from uuid import UUID

from rest_framework.exceptions import ValidationError as DRFValidationError

from pm_core.iam.scope import INVALID_SCOPE_MSG, MISSING_SCOPE_MSG


def parse_uuid_or_400(value, field_name: str) -> UUID:
    try:
        return UUID(str(value))
    except (TypeError, ValueError):
        raise DRFValidationError({field_name: "Invalid UUID"})


class ScopedViewSetMixin:
    """
    Scope parsing shared by the thin API layer.

    Prefer request.tenant_id / request.facility_id if middleware/auth set them.
    Otherwise fall back to headers so tests still work when the middleware
    did not see an authenticated user (force_authenticate).
    """

    def _scope_ids(self, request):
        tenant_id = getattr(request, "tenant_id", None) or request.META.get("HTTP_X_TENANT_ID")
        facility_id = getattr(request, "facility_id", None) or request.META.get("HTTP_X_FACILITY_ID")
        return tenant_id, facility_id

    def _require_scope(self, request) -> tuple[UUID, UUID]:
        tenant_id, facility_id = self._scope_ids(request)
        if not tenant_id or not facility_id:
            raise DRFValidationError({"detail": MISSING_SCOPE_MSG})
        try:
            return UUID(str(tenant_id)), UUID(str(facility_id))
        except ValueError:
            raise DRFValidationError({"detail": INVALID_SCOPE_MSG})
