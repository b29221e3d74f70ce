import json

import pytest
from django.contrib.auth.models import User
from django.test import RequestFactory

from pm_core.common.middleware import TenantFacilityScopeMiddleware


@pytest.mark.django_db
def test_middleware_invalid_scope_returns_error_envelope():
    rf = RequestFactory()
    req = rf.get(
        "/api/v1/workstations/",
        **{
            "HTTP_X_TENANT_ID": "not-a-uuid",
            "HTTP_X_FACILITY_ID": "also-not-a-uuid",
        },
    )
    req.user = User.objects.create_user(username="u2", password="pass123")

    mw = TenantFacilityScopeMiddleware(get_response=lambda r: None)
    resp = mw.process_request(req)

    assert resp is not None
    assert resp.status_code == 400

    body = json.loads(resp.content.decode("utf-8"))
    assert body["error"]["code"] == "validation_error"
    assert "Invalid scope headers" in body["error"]["message"]


@pytest.mark.django_db
def test_middleware_non_member_returns_403_envelope(monkeypatch):
    monkeypatch.setattr(
        "pm_core.iam.services.membership.is_user_member_of_facility",
        lambda **kwargs: False,
        raising=True,
    )

    rf = RequestFactory()
    req = rf.get(
        "/api/v1/workstations/",
        **{
            "HTTP_X_TENANT_ID": "11111111-1111-1111-1111-111111111111",
            "HTTP_X_FACILITY_ID": "22222222-2222-2222-2222-222222222222",
        },
    )
    req.user = User.objects.create_user(username="u3", password="pass123")

    mw = TenantFacilityScopeMiddleware(get_response=lambda r: None)
    resp = mw.process_request(req)

    assert resp is not None
    assert resp.status_code == 403

    body = json.loads(resp.content.decode("utf-8"))
    assert body["error"]["code"] == "permission_denied"
    assert "do not have access" in body["error"]["message"].lower()


@pytest.mark.django_db
def test_middleware_member_gets_scope_attached(user, tenant, facility):
    rf = RequestFactory()
    req = rf.get(
        "/api/v1/workstations/",
        HTTP_X_TENANT_ID=str(tenant.id),
        HTTP_X_FACILITY_ID=str(facility.id),
    )
    req.user = user

    mw = TenantFacilityScopeMiddleware(get_response=lambda r: None)
    assert mw.process_request(req) is None
    assert req.tenant_id == tenant.id
    assert req.facility_id == facility.id


@pytest.mark.django_db
def test_middleware_me_allows_missing_scope():
    rf = RequestFactory()
    req = rf.get("/api/v1/me/")
    req.user = User.objects.create_user(username="u4", password="pass123")

    mw = TenantFacilityScopeMiddleware(get_response=lambda r: None)
    assert mw.process_request(req) is None
