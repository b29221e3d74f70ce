# pm_core/audit/api/views.py
from __future__ import annotations

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import viewsets

from pm_core.audit.api.serializers import AuditEventSerializer
from pm_core.audit.models import AuditEvent
from pm_core.audit.selectors import list_audit_events
from pm_core.common.api.pagination import paginate
from pm_core.common.permissions import AuditPermission
from pm_core.common.views import ScopedViewSetMixin, parse_uuid_or_400


class AuditEventViewSet(ScopedViewSetMixin, viewsets.GenericViewSet):
    """
    Scoped audit trail: rule saves, imports, tracking generation and completion.
    """
    permission_classes = [AuditPermission]
    serializer_class = AuditEventSerializer
    queryset = AuditEvent.objects.none()

    @extend_schema(
        tags=["audit"],
        responses={200: AuditEventSerializer(many=True)},
        parameters=[
            OpenApiParameter(
                name="entity_type",
                type=OpenApiTypes.STR,
                location=OpenApiParameter.QUERY,
                required=False,
                description="Filter by entity type (Workstation, PartsList).",
            ),
            OpenApiParameter(
                name="entity_id",
                type=OpenApiTypes.UUID,
                location=OpenApiParameter.QUERY,
                required=False,
            ),
            OpenApiParameter(
                name="event_code",
                type=OpenApiTypes.STR,
                location=OpenApiParameter.QUERY,
                required=False,
                description="Filter by event code (e.g. tracking.rules_saved).",
            ),
        ],
    )
    def list(self, request):
        tenant_id, facility_id = self._require_scope(request)

        entity_id_raw = request.query_params.get("entity_id")
        qs = list_audit_events(
            tenant_id=tenant_id,
            facility_id=facility_id,
            entity_type=request.query_params.get("entity_type") or None,
            entity_id=parse_uuid_or_400(entity_id_raw, "entity_id") if entity_id_raw else None,
            event_code=request.query_params.get("event_code") or None,
        )
        return paginate(request, qs, AuditEventSerializer)
