# pm_core/parts/selectors.py
from __future__ import annotations

from uuid import UUID

from django.db.models import Count, QuerySet

from pm_core.parts.models import PartsList


class PartsListSelector:
    class NotFound(Exception):
        pass

    @staticmethod
    def list(*, tenant_id: UUID, facility_id: UUID, project_id: UUID | None = None) -> QuerySet[PartsList]:
        qs = (
            PartsList.objects.filter(tenant_id=tenant_id, facility_id=facility_id)
            .select_related("project")
            .annotate(part_count=Count("parts"))
        )
        if project_id:
            qs = qs.filter(project_id=project_id)
        return qs.order_by("-imported_at")

    @staticmethod
    def get(*, tenant_id: UUID, facility_id: UUID, parts_list_id: UUID) -> PartsList:
        try:
            return (
                PartsList.objects.select_related("project")
                .prefetch_related("parts")
                .get(id=parts_list_id, tenant_id=tenant_id, facility_id=facility_id)
            )
        except PartsList.DoesNotExist as e:
            raise PartsListSelector.NotFound("Parts list not found.") from e
