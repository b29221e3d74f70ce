# pm_core/projects/services.py
from __future__ import annotations

from datetime import date
from typing import Any
from uuid import UUID

from django.core.exceptions import ValidationError
from django.db import transaction

from pm_core.projects.models import Project, ProjectStatus
from pm_core.projects.selectors import ProjectSelector


class ProjectService:
    UPDATABLE_FIELDS = ("code", "name", "client", "status", "start_date", "installation_date")

    @staticmethod
    def _check_code_free(*, tenant_id: UUID, facility_id: UUID, code: str, exclude_id: UUID | None = None) -> None:
        qs = Project.objects.filter(tenant_id=tenant_id, facility_id=facility_id, code=code)
        if exclude_id:
            qs = qs.exclude(id=exclude_id)
        if qs.exists():
            raise ValidationError({"code": "A project with this code already exists."})

    @staticmethod
    @transaction.atomic
    def create(
        *,
        tenant_id: UUID,
        facility_id: UUID,
        code: str,
        name: str,
        client: str = "",
        status: str = ProjectStatus.PLANNED,
        start_date: date | None = None,
        installation_date: date | None = None,
    ) -> Project:
        code = (code or "").strip()
        if not code:
            raise ValidationError({"code": "This field is required."})
        ProjectService._check_code_free(tenant_id=tenant_id, facility_id=facility_id, code=code)

        return Project.objects.create(
            tenant_id=tenant_id,
            facility_id=facility_id,
            code=code,
            name=(name or "").strip(),
            client=client or "",
            status=status,
            start_date=start_date,
            installation_date=installation_date,
        )

    @staticmethod
    @transaction.atomic
    def update(*, tenant_id: UUID, facility_id: UUID, project_id: UUID, data: dict[str, Any]) -> Project:
        project = ProjectSelector.get(tenant_id=tenant_id, facility_id=facility_id, project_id=project_id)

        changed = [k for k in ProjectService.UPDATABLE_FIELDS if k in data]
        for key in changed:
            setattr(project, key, data[key])

        if "code" in changed:
            project.code = (project.code or "").strip()
            ProjectService._check_code_free(
                tenant_id=tenant_id, facility_id=facility_id, code=project.code, exclude_id=project.id
            )

        if changed:
            project.save(update_fields=changed + ["updated_at"])
        return project
