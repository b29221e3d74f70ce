# pm_core/parts/tests/test_parts_list_api.py
import pytest

from pm_core.tests.helpers import scoped
from pm_core.tracking.engine import Condition, Rule, RuleSet
from pm_core.tracking.services import TrackingRuleService

pytestmark = pytest.mark.django_db


def test_import_via_api_and_list(api_client, tenant, facility, project, sample_rows):
    r = api_client.post(
        "/api/v1/parts-lists/",
        {"project_id": str(project.id), "file_name": "kitchen.csv", "rows": sample_rows, "generate_tracking": False},
        format="json",
        **scoped(tenant, facility),
    )
    assert r.status_code == 201, r.data
    assert r.data["part_count"] == 3
    assert r.data["rows_skipped"] == 0
    assert r.data["tracking"] is None

    listing = api_client.get(f"/api/v1/parts-lists/?project={project.id}", **scoped(tenant, facility))
    assert listing.status_code == 200, listing.data
    assert listing.data["count"] == 1
    assert listing.data["results"][0]["part_count"] == 3

    detail = api_client.get(f"/api/v1/parts-lists/{r.data['id']}/", **scoped(tenant, facility))
    assert detail.status_code == 200, detail.data
    assert [p["cnc_pos"] for p in detail.data["parts"]] == ["A1", "A2", "A3"]


def test_import_unknown_project_is_400(api_client, tenant, facility):
    r = api_client.post(
        "/api/v1/parts-lists/",
        {"project_id": "00000000-0000-0000-0000-000000000000", "rows": []},
        format="json",
        **scoped(tenant, facility),
    )
    assert r.status_code == 400, r.data
    assert "project_id" in r.data["error"]["details"]


def test_generate_tracking_endpoint(api_client, tenant, facility, workstation, parts_list):
    TrackingRuleService.save_rule_set(
        tenant_id=tenant.id,
        facility_id=facility.id,
        workstation_id=workstation.id,
        rule_set=RuleSet(rules=[Rule(conditions=[Condition(column_name="wand_naam", operator="equals", value="kast links")])]),
    )

    url = f"/api/v1/parts-lists/{parts_list.id}/generate-tracking/"
    first = api_client.post(url, {}, format="json", **scoped(tenant, facility))
    assert first.status_code == 200, first.data
    assert first.data["created"] == 2

    again = api_client.post(url, {}, format="json", **scoped(tenant, facility))
    assert again.data["created"] == 0
    assert again.data["already_tracked"] == 2


def test_delete_parts_list(api_client, tenant, facility, parts_list):
    r = api_client.delete(f"/api/v1/parts-lists/{parts_list.id}/", **scoped(tenant, facility))
    assert r.status_code == 204

    gone = api_client.get(f"/api/v1/parts-lists/{parts_list.id}/", **scoped(tenant, facility))
    assert gone.status_code == 404


def test_import_cell_too_long_is_400(api_client, tenant, facility, project):
    r = api_client.post(
        "/api/v1/parts-lists/",
        {"project_id": str(project.id), "rows": [{"Dikte": "x" * 65}], "generate_tracking": False},
        format="json",
        **scoped(tenant, facility),
    )
    assert r.status_code == 400, r.data
    assert r.data["error"]["code"] == "validation_error"
    assert "rows[0].dikte" in r.data["error"]["details"]

    listing = api_client.get(f"/api/v1/parts-lists/?project={project.id}", **scoped(tenant, facility))
    assert listing.data["count"] == 0
