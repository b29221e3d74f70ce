# pm_core/workstations/selectors.py
from __future__ import annotations

from uuid import UUID

from django.db.models import Q, QuerySet

from pm_core.workstations.models import Workstation


class WorkstationSelector:
    class NotFound(Exception):
        pass

    @staticmethod
    def list(*, tenant_id: UUID, facility_id: UUID, is_active: bool | None = None, q: str | None = None) -> QuerySet[Workstation]:
        qs = Workstation.objects.filter(tenant_id=tenant_id, facility_id=facility_id)
        if is_active is not None:
            qs = qs.filter(is_active=is_active)
        if q:
            qs = qs.filter(Q(name__icontains=q) | Q(code__icontains=q))
        return qs.order_by("name", "code")

    @staticmethod
    def get(*, tenant_id: UUID, facility_id: UUID, workstation_id: UUID) -> Workstation:
        try:
            return Workstation.objects.get(id=workstation_id, tenant_id=tenant_id, facility_id=facility_id)
        except Workstation.DoesNotExist as e:
            raise WorkstationSelector.NotFound("Workstation not found.") from e
