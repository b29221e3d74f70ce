# pm_core/iam/services/membership.py
from __future__ import annotations

from uuid import UUID

from pm_core.iam.models import FacilityMembership


def list_user_facilities(user_id: int) -> list[dict]:
    """
    Facility memberships for the /me response.

    Membership graph:
      auth_user -> UserProfile -> FacilityMembership -> Facility (+ Tenant)
    """
    qs = (
        FacilityMembership.objects.select_related("facility", "tenant", "role")
        .filter(user_profile__user_id=user_id, is_active=True, user_profile__is_active=True)
        .order_by("facility__name")
    )

    return [
        {
            "tenant_id": str(m.tenant_id),
            "tenant_code": m.tenant.code,
            "facility_id": str(m.facility_id),
            "facility_code": m.facility.code,
            "facility_name": m.facility.name,
            "role_code": m.role.code,
            "role_name": m.role.name,
        }
        for m in qs
    ]


def is_user_member_of_facility(*, user_id: int, tenant_id: UUID, facility_id: UUID) -> bool:
    """
    Validate user -> (tenant, facility) membership.
    Single source of truth used by scope enforcement.
    """
    return FacilityMembership.objects.filter(
        is_active=True,
        tenant_id=tenant_id,
        facility_id=facility_id,
        user_profile__user_id=user_id,
        user_profile__is_active=True,
    ).exists()
