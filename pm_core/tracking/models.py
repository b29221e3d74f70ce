# pm_core/tracking/models.py
import uuid

from django.db import models

from pm_core.common.models import ScopedModel
from pm_core.parts.models import Part
from pm_core.tracking.constants import PartTrackingStatus, TrackingLogicOperator, TrackingOperator
from pm_core.workstations.models import Workstation


class TrackingRule(ScopedModel):
    """
    One rule group of a workstation's rule set. Conditions inside are joined
    by logic_operator; groups of a workstation are joined by OR.

    Rule sets are replaced as a whole (see TrackingRuleService.save_rule_set).
    """
    workstation = models.ForeignKey(Workstation, on_delete=models.CASCADE, related_name="tracking_rules")
    logic_operator = models.CharField(
        max_length=8,
        choices=TrackingLogicOperator.choices,
        default=TrackingLogicOperator.OR,
    )
    position = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = "tracking_rule"
        ordering = ["position", "created_at"]
        indexes = [
            models.Index(fields=["tenant_id", "facility_id", "workstation"], name="trackrule_scope_ws_idx"),
        ]

    def __str__(self) -> str:
        return f"TrackingRule({self.workstation_id}, #{self.position}, {self.logic_operator})"


class TrackingCondition(models.Model):
    """
    Single test on one part column. value is NULL for is_empty / is_not_empty.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    rule = models.ForeignKey(TrackingRule, on_delete=models.CASCADE, related_name="conditions")

    column_name = models.CharField(max_length=64)
    operator = models.CharField(max_length=32, choices=TrackingOperator.choices)
    value = models.CharField(max_length=255, null=True, blank=True)
    position = models.PositiveIntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "tracking_condition"
        ordering = ["position", "created_at"]

    def __str__(self) -> str:
        return f"{self.column_name} {self.operator} {self.value!r}"


class PartWorkstationTracking(ScopedModel):
    """
    A part that must pass a workstation, and how far it got.
    """
    part = models.ForeignKey(Part, on_delete=models.CASCADE, related_name="workstation_tracking")
    workstation = models.ForeignKey(Workstation, on_delete=models.CASCADE, related_name="part_tracking")

    status = models.CharField(
        max_length=16,
        choices=PartTrackingStatus.choices,
        default=PartTrackingStatus.PENDING,
        db_index=True,
    )
    completed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = "tracking_part_workstation"
        constraints = [
            models.UniqueConstraint(fields=["part", "workstation"], name="uq_tracking_part_workstation"),
        ]
        indexes = [
            models.Index(fields=["workstation", "status"], name="tracking_ws_status_idx"),
        ]

    def __str__(self) -> str:
        return f"PartWorkstationTracking({self.part_id}, {self.workstation_id}, {self.status})"
