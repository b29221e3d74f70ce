# pm_core/workstations/services.py
from __future__ import annotations

from typing import Any
from uuid import UUID

from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction

from pm_core.workstations.models import Workstation
from pm_core.workstations.selectors import WorkstationSelector

_UPDATABLE_FIELDS = ("code", "name", "description", "is_active")


class WorkstationService:
    @staticmethod
    @transaction.atomic
    def create(
        *,
        tenant_id: UUID,
        facility_id: UUID,
        code: str,
        name: str,
        description: str = "",
        is_active: bool = True,
    ) -> Workstation:
        code = (code or "").strip()
        if not code:
            raise ValidationError({"code": "This field is required."})
        try:
            with transaction.atomic():
                return Workstation.objects.create(
                    tenant_id=tenant_id,
                    facility_id=facility_id,
                    code=code,
                    name=(name or "").strip(),
                    description=description or "",
                    is_active=is_active,
                )
        except IntegrityError:
            raise ValidationError({"code": "A workstation with this code already exists."})

    @staticmethod
    @transaction.atomic
    def update(*, tenant_id: UUID, facility_id: UUID, workstation_id: UUID, data: dict[str, Any]) -> Workstation:
        ws = WorkstationSelector.get(tenant_id=tenant_id, facility_id=facility_id, workstation_id=workstation_id)

        changed = []
        for key in _UPDATABLE_FIELDS:
            if key in data:
                setattr(ws, key, data[key])
                changed.append(key)

        if not changed:
            return ws

        if "code" in changed:
            ws.code = (ws.code or "").strip()
            clash = (
                Workstation.objects.filter(tenant_id=tenant_id, facility_id=facility_id, code=ws.code)
                .exclude(id=ws.id)
                .exists()
            )
            if clash:
                raise ValidationError({"code": "A workstation with this code already exists."})

        ws.save(update_fields=changed + ["updated_at"])
        return ws
