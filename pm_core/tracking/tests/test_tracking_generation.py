# pm_core/tracking/tests/test_tracking_generation.py
import pytest
from django.test import override_settings

from pm_core.audit.models import AuditEvent, AuditEventCode
from pm_core.parts.services import PartsListService
from pm_core.tracking.constants import PartTrackingStatus
from pm_core.tracking.engine import Condition, Rule, RuleSet
from pm_core.tracking.models import PartWorkstationTracking
from pm_core.tracking.selectors import TrackingSelector
from pm_core.tracking.services import TrackingRuleService, TrackingService

pytestmark = pytest.mark.django_db


def _rules(tenant, facility, ws, *rules):
    TrackingRuleService.save_rule_set(
        tenant_id=tenant.id,
        facility_id=facility.id,
        workstation_id=ws.id,
        rule_set=RuleSet(rules=list(rules)),
    )


@pytest.fixture
def configured(tenant, facility, workstation, edge_bander):
    # CNC: every part thicker than 10 mm
    _rules(tenant, facility, workstation, Rule(conditions=[Condition(column_name="dikte", operator="greater_than", value="10")]))
    # Edge bander: parts with a top edge
    _rules(tenant, facility, edge_bander, Rule(conditions=[Condition(column_name="afplak_boven", operator="is_not_empty")]))
    return workstation, edge_bander


def _generate(tenant, facility, parts_list):
    return TrackingService.generate_for_parts_list(
        tenant_id=tenant.id, facility_id=facility.id, parts_list_id=parts_list.id
    )


def test_generation_creates_pending_rows_for_matches(tenant, facility, parts_list, configured):
    cnc, bander = configured
    result = _generate(tenant, facility, parts_list)

    assert result.parts_evaluated == 3
    assert result.workstations_evaluated == 2
    assert result.created == 3  # A1 + A2 at CNC, A1 at edge bander

    cnc_parts = set(
        PartWorkstationTracking.objects.filter(workstation=cnc).values_list("part__cnc_pos", flat=True)
    )
    bander_parts = set(
        PartWorkstationTracking.objects.filter(workstation=bander).values_list("part__cnc_pos", flat=True)
    )
    assert cnc_parts == {"A1", "A2"}
    assert bander_parts == {"A1"}
    assert set(PartWorkstationTracking.objects.values_list("status", flat=True)) == {PartTrackingStatus.PENDING}


def test_generation_is_idempotent(tenant, facility, parts_list, configured):
    first = _generate(tenant, facility, parts_list)
    second = _generate(tenant, facility, parts_list)

    assert first.created == 3
    assert second.created == 0
    assert second.already_tracked == 3
    assert PartWorkstationTracking.objects.count() == 3


def test_workstation_without_rules_tracks_nothing(tenant, facility, parts_list, workstation):
    result = _generate(tenant, facility, parts_list)

    assert result.workstations_evaluated == 0
    assert result.created == 0
    assert not PartWorkstationTracking.objects.exists()


def test_inactive_workstation_is_skipped(tenant, facility, parts_list, configured):
    cnc, _ = configured
    cnc.is_active = False
    cnc.save(update_fields=["is_active"])

    result = _generate(tenant, facility, parts_list)
    assert result.workstations_evaluated == 1
    assert not PartWorkstationTracking.objects.filter(workstation=cnc).exists()


def test_generation_writes_audit_event(tenant, facility, parts_list, configured):
    _generate(tenant, facility, parts_list)
    ev = AuditEvent.objects.get(event_code=AuditEventCode.TRACKING_GENERATED, entity_id=parts_list.id)
    assert ev.metadata["created"] == 3


@override_settings(PART_TRACKING_GENERATE_ON_IMPORT=True)
def test_import_generates_tracking_when_enabled(tenant, facility, project, configured, sample_rows):
    result = PartsListService.import_rows(
        tenant_id=tenant.id,
        facility_id=facility.id,
        project_id=project.id,
        rows=sample_rows,
    )
    assert result.tracking is not None
    assert result.tracking.created == 3


@override_settings(PART_TRACKING_GENERATE_ON_IMPORT=False)
def test_import_skips_tracking_when_disabled(tenant, facility, project, configured, sample_rows):
    result = PartsListService.import_rows(
        tenant_id=tenant.id,
        facility_id=facility.id,
        project_id=project.id,
        rows=sample_rows,
    )
    assert result.tracking is None
    assert not PartWorkstationTracking.objects.exists()


def test_part_counts_and_completion(tenant, facility, project, parts_list, configured):
    cnc, bander = configured
    _generate(tenant, facility, parts_list)

    counts = {
        row["workstation_code"]: row
        for row in TrackingSelector.get_part_counts_by_workstation(
            tenant_id=tenant.id, facility_id=facility.id, project_id=project.id
        )
    }
    assert counts["CNC-1"]["total"] == 2
    assert counts["CNC-1"]["pending"] == 2
    assert counts["EB-1"]["total"] == 1

    # one CNC part already being worked on stays untouched
    in_progress = PartWorkstationTracking.objects.filter(workstation=cnc, part__cnc_pos="A2").get()
    in_progress.status = PartTrackingStatus.IN_PROGRESS
    in_progress.save(update_fields=["status"])

    done = TrackingService.complete_parts_for_workstation(
        tenant_id=tenant.id,
        facility_id=facility.id,
        project_id=project.id,
        workstation_id=cnc.id,
    )
    assert done == 1

    completed = PartWorkstationTracking.objects.get(workstation=cnc, part__cnc_pos="A1")
    assert completed.status == PartTrackingStatus.COMPLETED
    assert completed.completed_at is not None

    in_progress.refresh_from_db()
    assert in_progress.status == PartTrackingStatus.IN_PROGRESS

    counts = {
        row["workstation_code"]: row
        for row in TrackingSelector.get_part_counts_by_workstation(
            tenant_id=tenant.id, facility_id=facility.id, project_id=project.id
        )
    }
    assert counts["CNC-1"] == {
        "workstation_id": cnc.id,
        "workstation_code": "CNC-1",
        "workstation_name": "CNC router",
        "total": 2,
        "pending": 0,
        "in_progress": 1,
        "completed": 1,
    }
    assert counts["EB-1"]["pending"] == 1

    # nothing left to complete
    assert TrackingService.complete_parts_for_workstation(
        tenant_id=tenant.id,
        facility_id=facility.id,
        project_id=project.id,
        workstation_id=cnc.id,
    ) == 0
