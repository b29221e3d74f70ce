# pm_core/parts/models.py
from django.conf import settings
from django.db import models

from pm_core.common.models import ScopedModel
from pm_core.projects.models import Project


class PartColorStatus(models.TextChoices):
    NONE = "none", "None"
    GREEN = "green", "Green"
    ORANGE = "orange", "Orange"
    RED = "red", "Red"


class PartsList(ScopedModel):
    """
    One imported parts list (CNC export) of a project.
    """
    project = models.ForeignKey(Project, on_delete=models.CASCADE, related_name="parts_lists")
    file_name = models.CharField(max_length=255, blank=True, default="")

    imported_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        related_name="imported_parts_lists",
        null=True,
        blank=True,
    )
    imported_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "parts_parts_list"
        indexes = [
            models.Index(fields=["tenant_id", "facility_id", "project"], name="partslist_scope_project_idx"),
        ]

    def __str__(self) -> str:
        return f"PartsList({self.project_id}, {self.file_name})"


class Part(ScopedModel):
    """
    One row of a parts list. Column fields mirror PartColumn.
    """
    parts_list = models.ForeignKey(PartsList, on_delete=models.CASCADE, related_name="parts")
    row_number = models.PositiveIntegerField(default=0)

    materiaal = models.CharField(max_length=255, null=True, blank=True)
    dikte = models.CharField(max_length=64, null=True, blank=True)
    nerf = models.CharField(max_length=64, null=True, blank=True)
    lengte = models.CharField(max_length=64, null=True, blank=True)
    breedte = models.CharField(max_length=64, null=True, blank=True)
    aantal = models.IntegerField(null=True, blank=True)
    cnc_pos = models.CharField(max_length=128, null=True, blank=True)
    wand_naam = models.CharField(max_length=255, null=True, blank=True)
    afplak_boven = models.CharField(max_length=128, null=True, blank=True)
    afplak_onder = models.CharField(max_length=128, null=True, blank=True)
    afplak_links = models.CharField(max_length=128, null=True, blank=True)
    afplak_rechts = models.CharField(max_length=128, null=True, blank=True)
    commentaar = models.TextField(null=True, blank=True)
    commentaar_2 = models.TextField(null=True, blank=True)
    cncprg1 = models.CharField(max_length=255, null=True, blank=True)
    cncprg2 = models.CharField(max_length=255, null=True, blank=True)
    abd = models.CharField(max_length=128, null=True, blank=True)
    afbeelding = models.CharField(max_length=512, null=True, blank=True)
    doorlopende_nerf = models.CharField(max_length=64, null=True, blank=True)

    color_status = models.CharField(
        max_length=16,
        choices=PartColorStatus.choices,
        default=PartColorStatus.NONE,
    )

    class Meta:
        db_table = "parts_part"
        ordering = ["row_number"]
        indexes = [
            models.Index(fields=["parts_list", "row_number"], name="part_list_row_idx"),
        ]

    def __str__(self) -> str:
        return f"Part({self.cnc_pos or self.row_number})"
