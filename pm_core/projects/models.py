# pm_core/projects/models.py
from django.db import models

from pm_core.common.models import ScopedModel


class ProjectStatus(models.TextChoices):
    PLANNED = "PLANNED", "Planned"
    IN_PROGRESS = "IN_PROGRESS", "In Progress"
    ON_HOLD = "ON_HOLD", "On Hold"
    COMPLETED = "COMPLETED", "Completed"


class Project(ScopedModel):
    """
    Customer order. Parts lists are imported per project.
    """
    code = models.CharField(max_length=64)
    name = models.CharField(max_length=255)
    client = models.CharField(max_length=255, blank=True, default="")

    status = models.CharField(
        max_length=32,
        choices=ProjectStatus.choices,
        default=ProjectStatus.PLANNED,
        db_index=True,
    )

    start_date = models.DateField(null=True, blank=True)
    installation_date = models.DateField(null=True, blank=True)

    class Meta:
        db_table = "projects_project"
        constraints = [
            models.UniqueConstraint(fields=["tenant_id", "facility_id", "code"], name="uq_project_scope_code"),
        ]
        indexes = [
            models.Index(fields=["tenant_id", "facility_id", "status"], name="project_scope_status_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.code} - {self.name}"
