# pm_core/projects/api/views.py
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
from pm_core.common.permissions import ProjectPermission
from pm_core.common.views import ScopedViewSetMixin, parse_uuid_or_400
from pm_core.projects.api.serializers import (
    ProjectCreateSerializer,
    ProjectSerializer,
    ProjectUpdateSerializer,
    WorkstationPartCountsSerializer,
)
from pm_core.projects.models import Project
from pm_core.projects.selectors import ProjectSelector
from pm_core.projects.services import ProjectService
from pm_core.tracking.selectors import TrackingSelector


class ProjectViewSet(ScopedViewSetMixin, viewsets.ViewSet):
    permission_classes = [ProjectPermission]
    serializer_class = ProjectSerializer
    queryset = Project.objects.none()

    def _get(self, request, pk) -> Project:
        tenant_id, facility_id = self._require_scope(request)
        try:
            return ProjectSelector.get(
                tenant_id=tenant_id,
                facility_id=facility_id,
                project_id=parse_uuid_or_400(pk, "id"),
            )
        except ProjectSelector.NotFound:
            raise Http404

    @extend_schema(tags=["projects"], responses={200: ProjectSerializer(many=True)})
    def list(self, request):
        tenant_id, facility_id = self._require_scope(request)
        qs = ProjectSelector.list(
            tenant_id=tenant_id,
            facility_id=facility_id,
            status=request.query_params.get("status"),
            q=request.query_params.get("q"),
        )
        return paginate(request, qs, ProjectSerializer)

    @extend_schema(tags=["projects"], responses={200: ProjectSerializer})
    def retrieve(self, request, pk=None):
        return Response(ProjectSerializer(self._get(request, pk)).data)

    @extend_schema(tags=["projects"], request=ProjectCreateSerializer, responses={201: ProjectSerializer})
    def create(self, request):
        tenant_id, facility_id = self._require_scope(request)
        ser = ProjectCreateSerializer(data=request.data or {})
        ser.is_valid(raise_exception=True)

        try:
            project = ProjectService.create(tenant_id=tenant_id, facility_id=facility_id, **ser.validated_data)
        except DjangoValidationError as e:
            raise DRFValidationError(django_validation_detail(e))

        return Response(ProjectSerializer(project).data, status=status.HTTP_201_CREATED)

    @extend_schema(tags=["projects"], request=ProjectUpdateSerializer, responses={200: ProjectSerializer})
    def partial_update(self, request, pk=None):
        project = self._get(request, pk)
        ser = ProjectUpdateSerializer(data=request.data or {}, partial=True)
        ser.is_valid(raise_exception=True)

        try:
            project = ProjectService.update(
                tenant_id=project.tenant_id,
                facility_id=project.facility_id,
                project_id=project.id,
                data=ser.validated_data,
            )
        except DjangoValidationError as e:
            raise DRFValidationError(django_validation_detail(e))

        return Response(ProjectSerializer(project).data)

    @extend_schema(tags=["projects"], responses={200: WorkstationPartCountsSerializer(many=True)})
    @action(detail=True, methods=["get"], url_path="part-counts")
    def part_counts(self, request, pk=None):
        project = self._get(request, pk)
        rows = TrackingSelector.get_part_counts_by_workstation(
            tenant_id=project.tenant_id,
            facility_id=project.facility_id,
            project_id=project.id,
        )
        return Response(WorkstationPartCountsSerializer(rows, many=True).data)
