# pm_core/tracking/services.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils import timezone

from pm_core.audit.models import AuditEventCode
from pm_core.audit.services import AuditService
from pm_core.parts.columns import PART_COLUMN_NAMES
from pm_core.parts.models import Part, PartsList
from pm_core.parts.records import PartRecord
from pm_core.projects.selectors import ProjectSelector
from pm_core.tracking.constants import (
    PartTrackingStatus,
    TrackingLogicOperator,
    TrackingOperator,
    VALUE_FREE_OPERATORS,
)
from pm_core.tracking.engine import RuleSet, default_evaluator
from pm_core.tracking.models import PartWorkstationTracking, TrackingCondition, TrackingRule
from pm_core.tracking.selectors import TrackingRuleSelector
from pm_core.workstations.models import Workstation
from pm_core.workstations.selectors import WorkstationSelector

logger = logging.getLogger(__name__)

VALUE_MAX_LENGTH = 255


class RuleSetConflict(Exception):
    """
    The stored rule set changed since the caller loaded it.
    """

    def __init__(self, *, current_version: int, expected_version: int):
        super().__init__(
            f"Tracking rules were changed by someone else (current version {current_version}, "
            f"expected {expected_version})."
        )
        self.current_version = current_version
        self.expected_version = expected_version


@dataclass(frozen=True)
class SaveRuleSetResult:
    rule_set: RuleSet
    version: int
    rules_saved: int
    conditions_saved: int


@dataclass(frozen=True)
class TrackingGenerationResult:
    parts_list_id: UUID
    parts_evaluated: int
    workstations_evaluated: int
    matches: int
    created: int

    @property
    def already_tracked(self) -> int:
        return self.matches - self.created


def _normalize_rule_set(rule_set: RuleSet) -> list[tuple[str, list[tuple[str, str, Optional[str]]]]]:
    """
    Validate a rule set before it is written and return plain rows:
    [(logic_operator, [(column_name, operator, value), ...]), ...]

    Raises ValidationError keyed by the offending path, e.g.
    "rules[0].conditions[1].value".
    """
    errors: dict[str, list[str]] = {}
    normalized = []

    for ri, rule in enumerate(rule_set.rules):
        prefix = f"rules[{ri}]"
        logic = str(rule.logic_operator or "").upper()
        if logic not in TrackingLogicOperator.values:
            errors.setdefault(f"{prefix}.logic_operator", []).append(f"Unknown logic operator {rule.logic_operator!r}.")

        if not rule.conditions:
            errors.setdefault(f"{prefix}.conditions", []).append("A rule needs at least one condition.")

        rows = []
        for ci, cond in enumerate(rule.conditions):
            cprefix = f"{prefix}.conditions[{ci}]"
            if cond.column_name not in PART_COLUMN_NAMES:
                errors.setdefault(f"{cprefix}.column_name", []).append(f"Unknown column {cond.column_name!r}.")
            if cond.operator not in TrackingOperator.values:
                errors.setdefault(f"{cprefix}.operator", []).append(f"Unknown operator {cond.operator!r}.")

            if cond.operator in VALUE_FREE_OPERATORS:
                value = None
            else:
                value = None if cond.value is None else str(cond.value).strip()
                if not value:
                    errors.setdefault(f"{cprefix}.value", []).append("A value is required for this operator.")
                elif len(value) > VALUE_MAX_LENGTH:
                    errors.setdefault(f"{cprefix}.value", []).append(
                        f"Ensure this value has at most {VALUE_MAX_LENGTH} characters."
                    )

            rows.append((cond.column_name, cond.operator, value))

        normalized.append((logic, rows))

    if errors:
        raise ValidationError(errors)
    return normalized


class TrackingRuleService:
    @staticmethod
    def save_rule_set(
        *,
        tenant_id: UUID,
        facility_id: UUID,
        workstation_id: UUID,
        rule_set: RuleSet,
        expected_version: Optional[int] = None,
        actor_user_id: Optional[int] = None,
    ) -> SaveRuleSetResult:
        """
        Replace the workstation's rule set with `rule_set`.

        Delete-all-then-insert in a single transaction: on any failure the
        previous rule set stays in place. The workstation row is locked so
        concurrent saves serialise; when expected_version is given and stale,
        RuleSetConflict is raised and nothing is written.
        """
        normalized = _normalize_rule_set(rule_set)

        with transaction.atomic():
            try:
                ws = Workstation.objects.select_for_update().get(
                    id=workstation_id, tenant_id=tenant_id, facility_id=facility_id
                )
            except Workstation.DoesNotExist as e:
                raise WorkstationSelector.NotFound("Workstation not found.") from e

            if expected_version is not None and expected_version != ws.tracking_rules_version:
                raise RuleSetConflict(current_version=ws.tracking_rules_version, expected_version=expected_version)

            # cascades to conditions
            TrackingRule.objects.filter(workstation=ws).delete()

            rules = []
            conditions = []
            for position, (logic, rows) in enumerate(normalized):
                rule = TrackingRule(
                    tenant_id=tenant_id,
                    facility_id=facility_id,
                    workstation=ws,
                    logic_operator=logic,
                    position=position,
                )
                rules.append(rule)
                for cpos, (column_name, operator, value) in enumerate(rows):
                    conditions.append(
                        TrackingCondition(
                            rule=rule,
                            column_name=column_name,
                            operator=operator,
                            value=value,
                            position=cpos,
                        )
                    )

            TrackingRule.objects.bulk_create(rules)
            TrackingCondition.objects.bulk_create(conditions)

            ws.tracking_rules_version += 1
            ws.save(update_fields=["tracking_rules_version", "updated_at"])

            AuditService.log(
                event_code=AuditEventCode.TRACKING_RULES_SAVED,
                entity_type="Workstation",
                entity_id=ws.id,
                tenant_id=tenant_id,
                facility_id=facility_id,
                actor_user_id=actor_user_id,
                metadata={
                    "version": ws.tracking_rules_version,
                    "rules": len(rules),
                    "conditions": len(conditions),
                },
            )

            saved = TrackingRuleSelector.load_rule_set(
                tenant_id=tenant_id, facility_id=facility_id, workstation_id=ws.id
            )

        logger.info(
            "Saved tracking rules for workstation %s: %d rules, %d conditions (version %d)",
            ws.id,
            len(rules),
            len(conditions),
            ws.tracking_rules_version,
        )
        return SaveRuleSetResult(
            rule_set=saved,
            version=ws.tracking_rules_version,
            rules_saved=len(rules),
            conditions_saved=len(conditions),
        )


class TrackingService:
    class NotFound(Exception):
        pass

    @staticmethod
    @transaction.atomic
    def generate_for_parts_list(
        *,
        tenant_id: UUID,
        facility_id: UUID,
        parts_list_id: UUID,
        actor_user_id: Optional[int] = None,
    ) -> TrackingGenerationResult:
        """
        Evaluate every part of the list against every active workstation's
        rules and add a pending tracking row per match. Existing rows are left
        untouched, so running it again only adds what is missing.
        """
        try:
            parts_list = PartsList.objects.get(id=parts_list_id, tenant_id=tenant_id, facility_id=facility_id)
        except PartsList.DoesNotExist as e:
            raise TrackingService.NotFound("Parts list not found.") from e

        rule_sets = TrackingRuleSelector.load_rule_sets_for_scope(tenant_id=tenant_id, facility_id=facility_id)
        compiled = [(rs.workstation_id, default_evaluator.compile_rule_set(rs)) for rs in rule_sets if rs]

        parts = list(Part.objects.filter(parts_list=parts_list).order_by("row_number"))
        existing = set(
            PartWorkstationTracking.objects.filter(part__parts_list=parts_list).values_list("part_id", "workstation_id")
        )

        matches = 0
        new_rows = []
        for part in parts:
            record = PartRecord.from_part(part)
            for workstation_id, should_track in compiled:
                if not should_track(record):
                    continue
                matches += 1
                if (part.id, workstation_id) in existing:
                    continue
                new_rows.append(
                    PartWorkstationTracking(
                        tenant_id=tenant_id,
                        facility_id=facility_id,
                        part=part,
                        workstation_id=workstation_id,
                        status=PartTrackingStatus.PENDING,
                    )
                )

        PartWorkstationTracking.objects.bulk_create(new_rows, ignore_conflicts=True)

        result = TrackingGenerationResult(
            parts_list_id=parts_list.id,
            parts_evaluated=len(parts),
            workstations_evaluated=len(compiled),
            matches=matches,
            created=len(new_rows),
        )

        AuditService.log(
            event_code=AuditEventCode.TRACKING_GENERATED,
            entity_type="PartsList",
            entity_id=parts_list.id,
            tenant_id=tenant_id,
            facility_id=facility_id,
            actor_user_id=actor_user_id,
            metadata={
                "parts_evaluated": result.parts_evaluated,
                "workstations_evaluated": result.workstations_evaluated,
                "created": result.created,
            },
        )

        logger.info(
            "Generated tracking for parts list %s: %d parts x %d workstations, %d new rows",
            parts_list.id,
            result.parts_evaluated,
            result.workstations_evaluated,
            result.created,
        )
        return result

    @staticmethod
    @transaction.atomic
    def complete_parts_for_workstation(
        *,
        tenant_id: UUID,
        facility_id: UUID,
        project_id: UUID,
        workstation_id: UUID,
        actor_user_id: Optional[int] = None,
    ) -> int:
        """
        Mark the project's pending parts at this workstation as completed.
        Rows already in progress or completed are not touched.
        """
        ws = WorkstationSelector.get(tenant_id=tenant_id, facility_id=facility_id, workstation_id=workstation_id)
        project = ProjectSelector.get(tenant_id=tenant_id, facility_id=facility_id, project_id=project_id)

        now = timezone.now()
        updated = PartWorkstationTracking.objects.filter(
            tenant_id=tenant_id,
            facility_id=facility_id,
            workstation=ws,
            part__parts_list__project=project,
            status=PartTrackingStatus.PENDING,
        ).update(status=PartTrackingStatus.COMPLETED, completed_at=now, updated_at=now)

        AuditService.log(
            event_code=AuditEventCode.TRACKING_PARTS_COMPLETED,
            entity_type="Workstation",
            entity_id=ws.id,
            tenant_id=tenant_id,
            facility_id=facility_id,
            actor_user_id=actor_user_id,
            metadata={"project_id": str(project.id), "completed": updated},
        )

        logger.info("Completed %d parts of project %s at workstation %s", updated, project.id, ws.id)
        return updated
