# pm_core/workstations/models.py
from django.db import models

from pm_core.common.models import ScopedModel


class Workstation(ScopedModel):
    """
    A machine or bench on the shop floor. Parts are routed to it by its
    tracking rules (pm_core.tracking).
    """
    code = models.CharField(max_length=64)
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True, default="")
    is_active = models.BooleanField(default=True)

    # bumped on every rule-set save; used as optimistic concurrency token
    tracking_rules_version = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = "workstations_workstation"
        ordering = ["name"]
        constraints = [
            models.UniqueConstraint(
                fields=["tenant_id", "facility_id", "code"],
                name="uq_workstation_scope_code",
            ),
        ]
        indexes = [
            models.Index(fields=["tenant_id", "facility_id", "is_active"], name="workstation_scope_active_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.code} - {self.name}"
