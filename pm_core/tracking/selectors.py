# pm_core/tracking/selectors.py
from __future__ import annotations

from typing import Any, Mapping
from uuid import UUID

from django.core.exceptions import ValidationError
from django.db.models import Count, Prefetch, Q, QuerySet

from pm_core.tracking.constants import PartTrackingStatus
from pm_core.tracking.engine import Condition, Rule, RuleSet
from pm_core.tracking.filters import PartWorkstationTrackingFilter
from pm_core.tracking.models import PartWorkstationTracking, TrackingCondition, TrackingRule
from pm_core.workstations.models import Workstation
from pm_core.workstations.selectors import WorkstationSelector


def _to_rule_set(workstation: Workstation, rules) -> RuleSet:
    return RuleSet(
        rules=[
            Rule(
                id=r.id,
                logic_operator=r.logic_operator,
                conditions=[
                    Condition(id=c.id, column_name=c.column_name, operator=c.operator, value=c.value)
                    for c in r.conditions.all()
                ],
            )
            for r in rules
        ],
        workstation_id=workstation.id,
        version=workstation.tracking_rules_version,
    )


def _rules_queryset() -> QuerySet[TrackingRule]:
    return TrackingRule.objects.order_by("position", "created_at").prefetch_related(
        Prefetch("conditions", queryset=TrackingCondition.objects.order_by("position", "created_at"))
    )


class TrackingRuleSelector:
    """
    Read side of the rule persistence: stored rows -> engine RuleSet.
    """

    @staticmethod
    def load_rule_set(*, tenant_id: UUID, facility_id: UUID, workstation_id: UUID) -> RuleSet:
        ws = WorkstationSelector.get(tenant_id=tenant_id, facility_id=facility_id, workstation_id=workstation_id)
        rules = _rules_queryset().filter(workstation=ws)
        return _to_rule_set(ws, rules)

    @staticmethod
    def load_rule_sets_for_scope(*, tenant_id: UUID, facility_id: UUID) -> list[RuleSet]:
        """
        Rule sets of all active workstations in scope, two queries in total.
        """
        workstations = list(
            Workstation.objects.filter(tenant_id=tenant_id, facility_id=facility_id, is_active=True).order_by("name")
        )
        by_ws: dict[UUID, list[TrackingRule]] = {ws.id: [] for ws in workstations}
        for rule in _rules_queryset().filter(workstation_id__in=by_ws.keys()):
            by_ws[rule.workstation_id].append(rule)
        return [_to_rule_set(ws, by_ws[ws.id]) for ws in workstations]


class TrackingSelector:
    @staticmethod
    def get_part_counts_by_workstation(*, tenant_id: UUID, facility_id: UUID, project_id: UUID) -> list[dict[str, Any]]:
        rows = (
            PartWorkstationTracking.objects.filter(
                tenant_id=tenant_id,
                facility_id=facility_id,
                part__parts_list__project_id=project_id,
            )
            .values("workstation_id", "workstation__code", "workstation__name")
            .annotate(
                total=Count("id"),
                pending=Count("id", filter=Q(status=PartTrackingStatus.PENDING)),
                in_progress=Count("id", filter=Q(status=PartTrackingStatus.IN_PROGRESS)),
                completed=Count("id", filter=Q(status=PartTrackingStatus.COMPLETED)),
            )
            .order_by("workstation__name")
        )
        return [
            {
                "workstation_id": r["workstation_id"],
                "workstation_code": r["workstation__code"],
                "workstation_name": r["workstation__name"],
                "total": r["total"],
                "pending": r["pending"],
                "in_progress": r["in_progress"],
                "completed": r["completed"],
            }
            for r in rows
        ]

    @staticmethod
    def list_tracked_parts(
        *,
        tenant_id: UUID,
        facility_id: UUID,
        workstation_id: UUID,
        params: Mapping[str, Any] | None = None,
    ) -> QuerySet[PartWorkstationTracking]:
        qs = (
            PartWorkstationTracking.objects.filter(
                tenant_id=tenant_id,
                facility_id=facility_id,
                workstation_id=workstation_id,
            )
            .select_related("part", "part__parts_list")
            .order_by("part__parts_list__imported_at", "part__row_number")
        )

        fs = PartWorkstationTrackingFilter(params or {}, queryset=qs)
        if not fs.is_valid():
            raise ValidationError(
                {field: [e["message"] for e in errs] for field, errs in fs.errors.get_json_data().items()}
            )
        return fs.qs
