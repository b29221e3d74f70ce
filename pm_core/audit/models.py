# pm_core/audit/models.py
from django.conf import settings
from django.db import models
from pm_core.common.models import ScopedModel


class AuditEventCode(models.TextChoices):
    TRACKING_RULES_SAVED = "tracking.rules_saved", "Tracking rules saved"
    TRACKING_GENERATED = "tracking.generated", "Tracking generated"
    TRACKING_PARTS_COMPLETED = "tracking.parts_completed", "Tracked parts completed"
    PARTS_LIST_IMPORTED = "parts.list_imported", "Parts list imported"


class AuditEvent(ScopedModel):
    """
    Immutable audit record of configuration and production changes.
    """
    event_code = models.CharField(max_length=128, db_index=True)
    entity_type = models.CharField(max_length=128, db_index=True)  # e.g. "Workstation"
    entity_id = models.UUIDField(db_index=True)

    actor_user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="audit_events",
        null=True,
        blank=True,
    )

    occurred_at = models.DateTimeField(auto_now_add=True, db_index=True)
    metadata = models.JSONField(default=dict)

    class Meta:
        db_table = "audit_audit_event"
        indexes = [
            models.Index(fields=["tenant_id", "facility_id", "occurred_at"], name="audit_scope_occurred_idx"),
            models.Index(fields=["entity_type", "entity_id"], name="audit_entity_idx"),
        ]
