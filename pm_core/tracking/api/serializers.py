# pm_core/tracking/api/serializers.py
from __future__ import annotations

from typing import Any

from rest_framework import serializers

from pm_core.parts.api.serializers import PartSerializer
from pm_core.tracking.constants import TrackingLogicOperator
from pm_core.tracking.engine import Condition, Rule, RuleSet
from pm_core.tracking.models import PartWorkstationTracking


class TrackingConditionSerializer(serializers.Serializer):
    # client-side ids are accepted and discarded on save
    id = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    column_name = serializers.CharField(max_length=64)
    operator = serializers.CharField(max_length=32)
    value = serializers.CharField(required=False, allow_null=True, allow_blank=True, default=None, trim_whitespace=False)


class TrackingRuleSerializer(serializers.Serializer):
    id = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    logic_operator = serializers.CharField(max_length=8, required=False, default=TrackingLogicOperator.OR.value)
    conditions = TrackingConditionSerializer(many=True, allow_empty=True)


class TrackingRuleSetWriteSerializer(serializers.Serializer):
    rules = TrackingRuleSerializer(many=True, allow_empty=True)
    version = serializers.IntegerField(required=False, allow_null=True, min_value=0, default=None)


class TrackingRuleSetSerializer(serializers.Serializer):
    workstation_id = serializers.UUIDField()
    version = serializers.IntegerField()
    rules = TrackingRuleSerializer(many=True)


class TrackingEvaluateSerializer(serializers.Serializer):
    """
    Preview: evaluate `part` against `rules` (unsaved edits) or, when rules
    is omitted, against the stored rule set.
    """
    part = serializers.DictField()
    rules = TrackingRuleSerializer(many=True, required=False, allow_null=True, default=None)


class TrackingEvaluateResultSerializer(serializers.Serializer):
    should_track = serializers.BooleanField()
    matching_rules = serializers.ListField(child=serializers.IntegerField())


class CompletePartsSerializer(serializers.Serializer):
    project_id = serializers.UUIDField()


class CompletePartsResultSerializer(serializers.Serializer):
    completed = serializers.IntegerField()


class PartWorkstationTrackingSerializer(serializers.ModelSerializer):
    part = PartSerializer(read_only=True)
    parts_list_id = serializers.UUIDField(source="part.parts_list_id", read_only=True)

    class Meta:
        model = PartWorkstationTracking
        fields = ["id", "workstation_id", "parts_list_id", "status", "completed_at", "part"]
        read_only_fields = fields


def rule_set_from_data(rules_data: list[dict[str, Any]] | None) -> RuleSet:
    return RuleSet(
        rules=[
            Rule(
                id=r.get("id"),
                logic_operator=r.get("logic_operator") or TrackingLogicOperator.OR.value,
                conditions=[
                    Condition(
                        id=c.get("id"),
                        column_name=c["column_name"],
                        operator=c["operator"],
                        value=c.get("value"),
                    )
                    for c in r.get("conditions") or []
                ],
            )
            for r in rules_data or []
        ]
    )


def rule_set_to_data(rule_set: RuleSet) -> dict[str, Any]:
    return {
        "workstation_id": rule_set.workstation_id,
        "version": rule_set.version,
        "rules": [
            {
                "id": str(r.id) if r.id is not None else None,
                "logic_operator": r.logic_operator,
                "conditions": [
                    {
                        "id": str(c.id) if c.id is not None else None,
                        "column_name": c.column_name,
                        "operator": c.operator,
                        "value": c.value,
                    }
                    for c in r.conditions
                ],
            }
            for r in rule_set.rules
        ],
    }
