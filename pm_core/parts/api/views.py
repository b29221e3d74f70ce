# pm_core/parts/api/views.py
from __future__ import annotations

from django.core.exceptions import ValidationError as DjangoValidationError
from django.http import Http404
from drf_spectacular.utils import extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError as DRFValidationError
from rest_framework.response import Response

from pm_core.common.api.exceptions import django_validation_detail
from pm_core.common.api.pagination import paginate
from pm_core.common.permissions import PartsListPermission
from pm_core.common.views import ScopedViewSetMixin, parse_uuid_or_400
from pm_core.parts.api.serializers import (
    PartsListDetailSerializer,
    PartsListImportSerializer,
    PartsListSerializer,
    TrackingGenerationSerializer,
)
from pm_core.parts.models import PartsList
from pm_core.parts.selectors import PartsListSelector
from pm_core.parts.services import PartsListService
from pm_core.projects.selectors import ProjectSelector
from pm_core.tracking.services import TrackingService


def _generation_data(result) -> dict | None:
    if result is None:
        return None
    return TrackingGenerationSerializer(
        {
            "parts_list_id": result.parts_list_id,
            "parts_evaluated": result.parts_evaluated,
            "workstations_evaluated": result.workstations_evaluated,
            "matches": result.matches,
            "created": result.created,
            "already_tracked": result.already_tracked,
        }
    ).data


class PartsListViewSet(ScopedViewSetMixin, viewsets.ViewSet):
    permission_classes = [PartsListPermission]
    serializer_class = PartsListSerializer
    queryset = PartsList.objects.none()

    def _get(self, request, pk) -> PartsList:
        tenant_id, facility_id = self._require_scope(request)
        try:
            return PartsListSelector.get(
                tenant_id=tenant_id,
                facility_id=facility_id,
                parts_list_id=parse_uuid_or_400(pk, "id"),
            )
        except PartsListSelector.NotFound:
            raise Http404

    @extend_schema(tags=["parts"], responses={200: PartsListSerializer(many=True)})
    def list(self, request):
        tenant_id, facility_id = self._require_scope(request)

        project_raw = request.query_params.get("project") or request.query_params.get("project_id")
        project_id = parse_uuid_or_400(project_raw, "project") if project_raw else None

        qs = PartsListSelector.list(tenant_id=tenant_id, facility_id=facility_id, project_id=project_id)
        return paginate(request, qs, PartsListSerializer)

    @extend_schema(tags=["parts"], responses={200: PartsListDetailSerializer})
    def retrieve(self, request, pk=None):
        return Response(PartsListDetailSerializer(self._get(request, pk)).data)

    @extend_schema(tags=["parts"], request=PartsListImportSerializer, responses={201: PartsListSerializer})
    def create(self, request):
        tenant_id, facility_id = self._require_scope(request)
        ser = PartsListImportSerializer(data=request.data or {})
        ser.is_valid(raise_exception=True)

        try:
            result = PartsListService.import_rows(
                tenant_id=tenant_id,
                facility_id=facility_id,
                project_id=ser.validated_data["project_id"],
                rows=ser.validated_data["rows"],
                file_name=ser.validated_data.get("file_name", ""),
                actor_user_id=getattr(request.user, "id", None),
                generate_tracking=ser.validated_data.get("generate_tracking"),
            )
        except ProjectSelector.NotFound:
            raise DRFValidationError({"project_id": ["Project not found."]})
        except DjangoValidationError as e:
            raise DRFValidationError(django_validation_detail(e))

        data = dict(PartsListSerializer(result.parts_list).data)
        data["part_count"] = result.parts_created
        data["rows_skipped"] = result.rows_skipped
        data["tracking"] = _generation_data(result.tracking)
        return Response(data, status=status.HTTP_201_CREATED)

    @extend_schema(tags=["parts"], responses={204: None})
    def destroy(self, request, pk=None):
        parts_list = self._get(request, pk)
        PartsListService.delete(
            tenant_id=parts_list.tenant_id,
            facility_id=parts_list.facility_id,
            parts_list_id=parts_list.id,
        )
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(tags=["tracking"], request=None, responses={200: TrackingGenerationSerializer})
    @action(detail=True, methods=["post"], url_path="generate-tracking")
    def generate_tracking(self, request, pk=None):
        parts_list = self._get(request, pk)
        result = TrackingService.generate_for_parts_list(
            tenant_id=parts_list.tenant_id,
            facility_id=parts_list.facility_id,
            parts_list_id=parts_list.id,
            actor_user_id=getattr(request.user, "id", None),
        )
        return Response(_generation_data(result))
