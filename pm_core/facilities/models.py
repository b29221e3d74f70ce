# pm_core/facilities/models.py
from __future__ import annotations

import uuid

from django.db import models

from pm_core.tenants.models import Tenant


class FacilityType(models.TextChoices):
    PLANT = "PLANT", "Production plant"
    WORKSHOP = "WORKSHOP", "Workshop"
    WAREHOUSE = "WAREHOUSE", "Warehouse"
    OTHER = "OTHER", "Other"


class Facility(models.Model):
    """
    A production site under a Tenant. Workstations, projects and parts
    lists are scoped to (tenant, facility).
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    tenant = models.ForeignKey(Tenant, on_delete=models.PROTECT, related_name="facilities")

    name = models.CharField(max_length=255)
    code = models.SlugField(max_length=64)  # unique per tenant

    facility_type = models.CharField(
        max_length=24,
        choices=FacilityType.choices,
        default=FacilityType.PLANT,
        db_index=True,
    )

    timezone = models.CharField(max_length=64, default="Europe/Brussels")

    address_line1 = models.CharField(max_length=255, blank=True, default="")
    city = models.CharField(max_length=128, blank=True, default="")
    country = models.CharField(max_length=64, blank=True, default="")

    is_active = models.BooleanField(default=True, db_index=True)

    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "facilities_facility"
        constraints = [
            models.UniqueConstraint(fields=["tenant", "code"], name="uq_facility_tenant_code"),
        ]
        indexes = [
            models.Index(fields=["tenant", "is_active"], name="facility_tenant_active_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.name} ({self.code})"
