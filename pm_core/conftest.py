# pm_core/conftest.py
import pytest
from django.contrib.auth import get_user_model
from django.contrib.auth.models import Group
from rest_framework.test import APIClient

from pm_core.facilities.models import Facility
from pm_core.tenants.models import Tenant


@pytest.fixture
def tenant(db):
    return Tenant.objects.create(code="test-tenant", name="Test Tenant")


@pytest.fixture
def facility(db, tenant):
    return Facility.objects.create(tenant=tenant, code="main", name="Main Workshop")


@pytest.fixture
def make_user(db, tenant, facility):
    """
    Factory: user in the given Django group with a membership of `facility`.
      auth_user -> UserProfile -> FacilityMembership
    """
    from pm_core.iam.models import FacilityMembership, Role, UserProfile

    User = get_user_model()

    def _make(username: str, role: str = "ADMIN"):
        user = User.objects.create_user(username=username, password="testpass", is_active=True)

        group, _ = Group.objects.get_or_create(name=role)
        user.groups.add(group)

        profile = UserProfile.objects.create(user=user, tenant=tenant, is_active=True)
        membership_role, _ = Role.objects.get_or_create(
            tenant=tenant,
            code=role.lower(),
            defaults={"name": role.title(), "is_active": True},
        )
        FacilityMembership.objects.create(
            tenant=tenant,
            facility=facility,
            user_profile=profile,
            role=membership_role,
            is_active=True,
        )
        return user

    return _make


@pytest.fixture
def user(make_user):
    return make_user("testuser", "ADMIN")


@pytest.fixture
def api_client(user):
    c = APIClient()
    c.force_authenticate(user=user)
    return c


@pytest.fixture
def client_for(make_user):
    """
    APIClient authenticated as a fresh user of the given role.
    """

    def _client(role: str):
        c = APIClient()
        c.force_authenticate(user=make_user(f"user-{role.lower()}", role))
        return c

    return _client


@pytest.fixture
def workstation(tenant, facility):
    from pm_core.workstations.services import WorkstationService

    return WorkstationService.create(
        tenant_id=tenant.id,
        facility_id=facility.id,
        code="CNC-1",
        name="CNC router",
    )


@pytest.fixture
def edge_bander(tenant, facility):
    from pm_core.workstations.services import WorkstationService

    return WorkstationService.create(
        tenant_id=tenant.id,
        facility_id=facility.id,
        code="EB-1",
        name="Edge bander",
    )


@pytest.fixture
def project(tenant, facility):
    from pm_core.projects.services import ProjectService

    return ProjectService.create(
        tenant_id=tenant.id,
        facility_id=facility.id,
        code="P-2024-001",
        name="Kitchen Janssens",
        client="Janssens",
    )


SAMPLE_ROWS = [
    {"Materiaal": "Eik fineer", "Dikte": "19", "Lengte": "720", "Breedte": "560", "Aantal": "2",
     "CNC pos": "A1", "Wand Naam": "Kast links", "Afplak Boven": "ABS 1mm"},
    {"Materiaal": "MDF", "Dikte": "18", "Lengte": "1200", "Breedte": "400", "Aantal": "1",
     "CNC pos": "A2", "Wand Naam": "Kast links", "Afplak Boven": ""},
    {"Materiaal": "Spaanplaat wit", "Dikte": "8", "Lengte": "2400", "Breedte": "600", "Aantal": "x",
     "CNC pos": "A3", "Wand Naam": "Achterwand"},
]


@pytest.fixture
def sample_rows():
    return [dict(r) for r in SAMPLE_ROWS]


@pytest.fixture
def parts_list(tenant, facility, project, user, sample_rows):
    from pm_core.parts.services import PartsListService

    result = PartsListService.import_rows(
        tenant_id=tenant.id,
        facility_id=facility.id,
        project_id=project.id,
        rows=sample_rows,
        file_name="kitchen.csv",
        actor_user_id=user.id,
        generate_tracking=False,
    )
    return result.parts_list
