# pm_core/projects/selectors.py
from __future__ import annotations

from uuid import UUID

from django.db.models import Q, QuerySet

from pm_core.projects.models import Project


class ProjectSelector:
    class NotFound(Exception):
        pass

    @staticmethod
    def list(*, tenant_id: UUID, facility_id: UUID, status: str | None = None, q: str | None = None) -> QuerySet[Project]:
        qs = Project.objects.filter(tenant_id=tenant_id, facility_id=facility_id)
        if status:
            qs = qs.filter(status=status)
        if q:
            qs = qs.filter(Q(code__icontains=q) | Q(name__icontains=q) | Q(client__icontains=q))
        return qs.order_by("-created_at")

    @staticmethod
    def get(*, tenant_id: UUID, facility_id: UUID, project_id: UUID) -> Project:
        try:
            return Project.objects.get(id=project_id, tenant_id=tenant_id, facility_id=facility_id)
        except Project.DoesNotExist as e:
            raise ProjectSelector.NotFound("Project not found.") from e
