# pm_core/tracking/tests/test_rule_persistence.py
import pytest
from django.core.exceptions import ValidationError

from pm_core.audit.models import AuditEvent, AuditEventCode
from pm_core.tracking.engine import Condition, Rule, RuleSet
from pm_core.tracking.models import TrackingCondition, TrackingRule
from pm_core.tracking.selectors import TrackingRuleSelector
from pm_core.tracking.services import RuleSetConflict, TrackingRuleService
from pm_core.workstations.selectors import WorkstationSelector

pytestmark = pytest.mark.django_db


def _rule_set():
    return RuleSet(
        rules=[
            Rule(
                id="tmp-1",
                logic_operator="AND",
                conditions=[
                    Condition(id="c1", column_name="materiaal", operator="contains", value="eik"),
                    Condition(id="c2", column_name="afplak_boven", operator="is_not_empty"),
                ],
            ),
            Rule(
                id="tmp-2",
                logic_operator="OR",
                conditions=[Condition(id="c3", column_name="dikte", operator="greater_than", value="18")],
            ),
        ]
    )


def _save(tenant, facility, ws, rule_set, **kwargs):
    return TrackingRuleService.save_rule_set(
        tenant_id=tenant.id,
        facility_id=facility.id,
        workstation_id=ws.id,
        rule_set=rule_set,
        **kwargs,
    )


def _load(tenant, facility, ws):
    return TrackingRuleSelector.load_rule_set(tenant_id=tenant.id, facility_id=facility.id, workstation_id=ws.id)


def test_new_workstation_has_empty_rule_set(tenant, facility, workstation):
    rs = _load(tenant, facility, workstation)
    assert rs.rules == ()
    assert rs.version == 0
    assert rs.workstation_id == workstation.id


def test_save_then_load_round_trip(tenant, facility, workstation, user):
    original = _rule_set()
    result = _save(tenant, facility, workstation, original, actor_user_id=user.id)

    loaded = _load(tenant, facility, workstation)
    assert loaded == original
    assert result.rule_set == original
    assert result.rules_saved == 2
    assert result.conditions_saved == 3
    assert result.version == loaded.version == 1

    # client ids are replaced by persisted ones
    assert {str(r.id) for r in loaded.rules}.isdisjoint({"tmp-1", "tmp-2"})
    assert [c.column_name for c in loaded.rules[0].conditions] == ["materiaal", "afplak_boven"]


def test_save_replaces_previous_rule_set(tenant, facility, workstation):
    _save(tenant, facility, workstation, _rule_set())
    replacement = RuleSet(rules=[Rule(conditions=[Condition(column_name="nerf", operator="equals", value="L")])])

    _save(tenant, facility, workstation, replacement)

    assert _load(tenant, facility, workstation) == replacement
    assert TrackingRule.objects.filter(workstation=workstation).count() == 1
    assert TrackingCondition.objects.filter(rule__workstation=workstation).count() == 1


def test_saving_empty_rule_set_clears_rules(tenant, facility, workstation):
    _save(tenant, facility, workstation, _rule_set())
    _save(tenant, facility, workstation, RuleSet())

    assert _load(tenant, facility, workstation).rules == ()
    assert not TrackingCondition.objects.filter(rule__workstation=workstation).exists()


def test_value_is_nulled_for_value_free_operators(tenant, facility, workstation):
    rs = RuleSet(rules=[Rule(conditions=[Condition(column_name="abd", operator="is_empty", value="ignored")])])
    _save(tenant, facility, workstation, rs)

    cond = TrackingCondition.objects.get(rule__workstation=workstation)
    assert cond.value is None


@pytest.mark.parametrize(
    "condition,error_key",
    [
        (Condition(column_name="materiaal", operator="equals", value=None), "rules[0].conditions[0].value"),
        (Condition(column_name="materiaal", operator="equals", value="   "), "rules[0].conditions[0].value"),
        (Condition(column_name="supplier", operator="equals", value="Acme"), "rules[0].conditions[0].column_name"),
        (Condition(column_name="materiaal", operator="matches_regex", value="^M"), "rules[0].conditions[0].operator"),
    ],
)
def test_invalid_condition_rejected_and_previous_set_kept(tenant, facility, workstation, condition, error_key):
    _save(tenant, facility, workstation, _rule_set())

    with pytest.raises(ValidationError) as exc:
        _save(tenant, facility, workstation, RuleSet(rules=[Rule(conditions=[condition])]))

    assert error_key in exc.value.message_dict
    assert _load(tenant, facility, workstation) == _rule_set()


def test_rule_without_conditions_rejected(tenant, facility, workstation):
    with pytest.raises(ValidationError) as exc:
        _save(tenant, facility, workstation, RuleSet(rules=[Rule(logic_operator="AND", conditions=[])]))
    assert "rules[0].conditions" in exc.value.message_dict


def test_failure_mid_write_rolls_back(tenant, facility, workstation, monkeypatch):
    _save(tenant, facility, workstation, _rule_set())

    def boom(*args, **kwargs):
        raise RuntimeError("database went away")

    monkeypatch.setattr(TrackingCondition.objects, "bulk_create", boom)

    with pytest.raises(RuntimeError):
        _save(tenant, facility, workstation, RuleSet(rules=[Rule(conditions=[Condition(column_name="nerf", operator="is_empty")])]))

    assert _load(tenant, facility, workstation) == _rule_set()
    workstation.refresh_from_db()
    assert workstation.tracking_rules_version == 1


def test_stale_version_raises_conflict(tenant, facility, workstation):
    _save(tenant, facility, workstation, _rule_set(), expected_version=0)

    with pytest.raises(RuleSetConflict) as exc:
        _save(tenant, facility, workstation, RuleSet(), expected_version=0)

    assert exc.value.current_version == 1
    assert _load(tenant, facility, workstation) == _rule_set()


def test_matching_version_saves(tenant, facility, workstation):
    _save(tenant, facility, workstation, _rule_set())
    result = _save(tenant, facility, workstation, RuleSet(), expected_version=1)
    assert result.version == 2


def test_save_writes_audit_event(tenant, facility, workstation, user):
    _save(tenant, facility, workstation, _rule_set(), actor_user_id=user.id)

    ev = AuditEvent.objects.get(event_code=AuditEventCode.TRACKING_RULES_SAVED, entity_id=workstation.id)
    assert ev.actor_user_id == user.id
    assert ev.metadata == {"version": 1, "rules": 2, "conditions": 3}


def test_save_for_other_scope_is_not_found(tenant, facility, other_scope_workstation):
    with pytest.raises(WorkstationSelector.NotFound):
        _save(tenant, facility, other_scope_workstation, _rule_set())


@pytest.fixture
def other_scope_workstation(db):
    import uuid

    from pm_core.workstations.models import Workstation

    return Workstation.objects.create(tenant_id=uuid.uuid4(), facility_id=uuid.uuid4(), code="X", name="Elsewhere")
