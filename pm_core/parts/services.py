# pm_core/parts/services.py
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional
from uuid import UUID

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import transaction

from pm_core.audit.models import AuditEventCode
from pm_core.audit.services import AuditService
from pm_core.parts.columns import IMAGE_FIELD, IMAGE_HEADER, INTEGER_COLUMNS, resolve_column
from pm_core.parts.models import Part, PartsList
from pm_core.parts.selectors import PartsListSelector
from pm_core.projects.selectors import ProjectSelector

logger = logging.getLogger(__name__)

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


@dataclass(frozen=True)
class PartsListImportResult:
    parts_list: PartsList
    parts_created: int
    rows_skipped: int
    tracking: Any = None  # TrackingGenerationResult when generated


def _to_int(raw: Any) -> int:
    if raw is None or isinstance(raw, bool):
        return 0
    if isinstance(raw, int):
        return raw
    # leading integer, so "2.0" is 2 and "3 stuks" is 3
    m = _LEADING_INT.match(str(raw))
    return int(m.group(1)) if m else 0


_INT_MIN, _INT_MAX = -(2**31), 2**31 - 1


def _clean_row(row: Mapping[str, Any]) -> Optional[dict[str, Any]]:
    """
    Row keyed by column name or CSV header -> Part field values.
    None for rows with nothing in them.
    """
    values: dict[str, Any] = {}
    has_content = False

    for key, raw in row.items():
        if key is None:
            continue
        k = str(key).strip()
        field = IMAGE_FIELD if k in (IMAGE_HEADER, IMAGE_FIELD) else resolve_column(k)
        if field is None:
            continue

        text = "" if raw is None else str(raw).strip()
        if text:
            has_content = True

        if field in INTEGER_COLUMNS:
            values[field] = _to_int(raw)
        else:
            values[field] = text or None

    return values if has_content else None


def _row_errors(values: Mapping[str, Any], prefix: str) -> dict[str, list[str]]:
    errors: dict[str, list[str]] = {}
    for field, value in values.items():
        if value is None:
            continue
        if field in INTEGER_COLUMNS:
            if not _INT_MIN <= value <= _INT_MAX:
                errors[f"{prefix}.{field}"] = ["Number is out of range."]
            continue
        max_length = Part._meta.get_field(field).max_length
        if max_length is not None and len(value) > max_length:
            errors[f"{prefix}.{field}"] = [
                f"Ensure this value has at most {max_length} characters (it has {len(value)})."
            ]
    return errors


class PartsListService:
    @staticmethod
    @transaction.atomic
    def import_rows(
        *,
        tenant_id: UUID,
        facility_id: UUID,
        project_id: UUID,
        rows: Iterable[Mapping[str, Any]],
        file_name: str = "",
        actor_user_id: Optional[int] = None,
        generate_tracking: Optional[bool] = None,
    ) -> PartsListImportResult:
        """
        Store already-parsed rows as a new parts list of the project.

        Unknown keys are dropped, blank rows skipped, `aantal` read as its
        leading integer (0 when there is none). Cells that do not fit their
        column raise ValidationError keyed `rows[i].<column>` and nothing is
        stored. Tracking rows are generated afterwards when generate_tracking
        is True, or by default when PART_TRACKING_GENERATE_ON_IMPORT is set.
        """
        project = ProjectSelector.get(tenant_id=tenant_id, facility_id=facility_id, project_id=project_id)

        cleaned: list[tuple[int, dict[str, Any]]] = []
        errors: dict[str, list[str]] = {}
        skipped = 0
        for row_number, row in enumerate(rows, start=1):
            values = _clean_row(row)
            if values is None:
                skipped += 1
                continue
            errors.update(_row_errors(values, f"rows[{row_number - 1}]"))
            cleaned.append((row_number, values))
        if errors:
            raise ValidationError(errors)

        parts_list = PartsList.objects.create(
            tenant_id=tenant_id,
            facility_id=facility_id,
            project=project,
            file_name=file_name or "",
            imported_by_id=actor_user_id,
        )

        parts = [
            Part(
                tenant_id=tenant_id,
                facility_id=facility_id,
                parts_list=parts_list,
                row_number=row_number,
                **values,
            )
            for row_number, values in cleaned
        ]
        Part.objects.bulk_create(parts)

        AuditService.log(
            event_code=AuditEventCode.PARTS_LIST_IMPORTED,
            entity_type="PartsList",
            entity_id=parts_list.id,
            tenant_id=tenant_id,
            facility_id=facility_id,
            actor_user_id=actor_user_id,
            metadata={"project_id": str(project.id), "parts": len(parts), "skipped": skipped},
        )
        logger.info("Imported parts list %s for project %s: %d parts, %d blank rows", parts_list.id, project.id, len(parts), skipped)

        if generate_tracking is None:
            generate_tracking = getattr(settings, "PART_TRACKING_GENERATE_ON_IMPORT", True)

        tracking = None
        if generate_tracking:
            from pm_core.tracking.services import TrackingService

            tracking = TrackingService.generate_for_parts_list(
                tenant_id=tenant_id,
                facility_id=facility_id,
                parts_list_id=parts_list.id,
                actor_user_id=actor_user_id,
            )

        return PartsListImportResult(
            parts_list=parts_list,
            parts_created=len(parts),
            rows_skipped=skipped,
            tracking=tracking,
        )

    @staticmethod
    @transaction.atomic
    def delete(*, tenant_id: UUID, facility_id: UUID, parts_list_id: UUID) -> None:
        parts_list = PartsListSelector.get(tenant_id=tenant_id, facility_id=facility_id, parts_list_id=parts_list_id)
        # parts and their tracking rows cascade
        parts_list.delete()
