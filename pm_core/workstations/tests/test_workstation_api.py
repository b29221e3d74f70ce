# pm_core/workstations/tests/test_workstation_api.py
import pytest

from pm_core.tests.helpers import scoped

pytestmark = pytest.mark.django_db


def _create(api_client, tenant, facility, code, name):
    r = api_client.post(
        "/api/v1/workstations/",
        {"code": code, "name": name},
        format="json",
        **scoped(tenant, facility),
    )
    assert r.status_code == 201, r.data
    return r.data


def test_workstation_create_retrieve_update(api_client, tenant, facility):
    ws = _create(api_client, tenant, facility, "SAW-1", "Panel saw")
    assert ws["tracking_rules_version"] == 0
    assert ws["is_active"] is True

    r = api_client.get(f"/api/v1/workstations/{ws['id']}/", **scoped(tenant, facility))
    assert r.status_code == 200, r.data
    assert r.data["code"] == "SAW-1"

    p = api_client.patch(
        f"/api/v1/workstations/{ws['id']}/",
        {"name": "Panel saw (new)", "is_active": False},
        format="json",
        **scoped(tenant, facility),
    )
    assert p.status_code == 200, p.data
    assert p.data["name"] == "Panel saw (new)"
    assert p.data["is_active"] is False


def test_duplicate_code_is_400(api_client, tenant, facility):
    _create(api_client, tenant, facility, "SAW-1", "Panel saw")
    r = api_client.post(
        "/api/v1/workstations/",
        {"code": "SAW-1", "name": "Another saw"},
        format="json",
        **scoped(tenant, facility),
    )
    assert r.status_code == 400, r.data
    assert r.data["error"]["code"] == "validation_error"
    assert "code" in r.data["error"]["details"]


def test_list_is_paginated_and_filterable(api_client, tenant, facility):
    _create(api_client, tenant, facility, "SAW-1", "Panel saw")
    _create(api_client, tenant, facility, "CNC-1", "CNC router")

    r = api_client.get("/api/v1/workstations/", **scoped(tenant, facility))
    assert r.status_code == 200, r.data
    assert r.data["count"] == 2
    assert [w["name"] for w in r.data["results"]] == ["CNC router", "Panel saw"]

    q = api_client.get("/api/v1/workstations/?q=saw", **scoped(tenant, facility))
    assert [w["code"] for w in q.data["results"]] == ["SAW-1"]


def test_workstations_are_scoped(api_client, tenant, facility, workstation):
    from pm_core.facilities.models import Facility

    other = Facility.objects.create(tenant=tenant, code="annex", name="Annex")
    r = api_client.get(f"/api/v1/workstations/{workstation.id}/", **scoped(tenant, other))
    assert r.status_code == 404


def test_readonly_cannot_create(client_for, tenant, facility):
    c = client_for("READONLY")
    r = c.post("/api/v1/workstations/", {"code": "X", "name": "X"}, format="json", **scoped(tenant, facility))
    assert r.status_code == 403
