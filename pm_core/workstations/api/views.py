# pm_core/workstations/api/views.py
from __future__ import annotations

from django.conf import settings
from django.core.exceptions import ValidationError as DjangoValidationError
from django.http import Http404
from drf_spectacular.utils import extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError as DRFValidationError
from rest_framework.response import Response

from pm_core.common.api.exceptions import ConflictError, django_validation_detail
from pm_core.common.api.pagination import paginate
from pm_core.common.permissions import WorkstationPermission
from pm_core.common.views import ScopedViewSetMixin, parse_uuid_or_400
from pm_core.parts.records import PartRecord
from pm_core.projects.selectors import ProjectSelector
from pm_core.tracking.api.serializers import (
    CompletePartsResultSerializer,
    CompletePartsSerializer,
    PartWorkstationTrackingSerializer,
    TrackingEvaluateResultSerializer,
    TrackingEvaluateSerializer,
    TrackingRuleSetSerializer,
    TrackingRuleSetWriteSerializer,
    rule_set_from_data,
    rule_set_to_data,
)
from pm_core.tracking.engine import default_evaluator
from pm_core.tracking.selectors import TrackingRuleSelector, TrackingSelector
from pm_core.tracking.services import RuleSetConflict, TrackingRuleService, TrackingService
from pm_core.workstations.api.serializers import (
    WorkstationCreateSerializer,
    WorkstationSerializer,
    WorkstationUpdateSerializer,
)
from pm_core.workstations.models import Workstation
from pm_core.workstations.selectors import WorkstationSelector
from pm_core.workstations.services import WorkstationService


def _bool_param(raw):
    if raw is None or raw == "":
        return None
    return str(raw).lower() in ("1", "true", "yes")


class WorkstationViewSet(ScopedViewSetMixin, viewsets.ViewSet):
    """
    Workstations and their parts tracking configuration.
    """
    permission_classes = [WorkstationPermission]
    serializer_class = WorkstationSerializer
    queryset = Workstation.objects.none()

    def _get(self, request, pk) -> Workstation:
        tenant_id, facility_id = self._require_scope(request)
        try:
            return WorkstationSelector.get(
                tenant_id=tenant_id,
                facility_id=facility_id,
                workstation_id=parse_uuid_or_400(pk, "id"),
            )
        except WorkstationSelector.NotFound:
            raise Http404

    # ------------------------------------------------------------
    # CRUD
    # ------------------------------------------------------------
    @extend_schema(tags=["workstations"], responses={200: WorkstationSerializer(many=True)})
    def list(self, request):
        tenant_id, facility_id = self._require_scope(request)
        qs = WorkstationSelector.list(
            tenant_id=tenant_id,
            facility_id=facility_id,
            is_active=_bool_param(request.query_params.get("is_active")),
            q=request.query_params.get("q"),
        )
        return paginate(request, qs, WorkstationSerializer)

    @extend_schema(tags=["workstations"], responses={200: WorkstationSerializer})
    def retrieve(self, request, pk=None):
        ws = self._get(request, pk)
        return Response(WorkstationSerializer(ws).data)

    @extend_schema(tags=["workstations"], request=WorkstationCreateSerializer, responses={201: WorkstationSerializer})
    def create(self, request):
        tenant_id, facility_id = self._require_scope(request)
        ser = WorkstationCreateSerializer(data=request.data or {})
        ser.is_valid(raise_exception=True)

        try:
            ws = WorkstationService.create(tenant_id=tenant_id, facility_id=facility_id, **ser.validated_data)
        except DjangoValidationError as e:
            raise DRFValidationError(django_validation_detail(e))

        return Response(WorkstationSerializer(ws).data, status=status.HTTP_201_CREATED)

    @extend_schema(tags=["workstations"], request=WorkstationUpdateSerializer, responses={200: WorkstationSerializer})
    def partial_update(self, request, pk=None):
        ws = self._get(request, pk)
        ser = WorkstationUpdateSerializer(data=request.data or {}, partial=True)
        ser.is_valid(raise_exception=True)

        try:
            ws = WorkstationService.update(
                tenant_id=ws.tenant_id,
                facility_id=ws.facility_id,
                workstation_id=ws.id,
                data=ser.validated_data,
            )
        except DjangoValidationError as e:
            raise DRFValidationError(django_validation_detail(e))

        return Response(WorkstationSerializer(ws).data)

    # ------------------------------------------------------------
    # Tracking rules
    # ------------------------------------------------------------
    @extend_schema(tags=["tracking"], responses={200: TrackingRuleSetSerializer})
    @action(detail=True, methods=["get"], url_path="tracking-rules")
    def tracking_rules(self, request, pk=None):
        ws = self._get(request, pk)
        rule_set = TrackingRuleSelector.load_rule_set(
            tenant_id=ws.tenant_id, facility_id=ws.facility_id, workstation_id=ws.id
        )
        return Response(rule_set_to_data(rule_set))

    @extend_schema(tags=["tracking"], request=TrackingRuleSetWriteSerializer, responses={200: TrackingRuleSetSerializer})
    @tracking_rules.mapping.put
    def save_tracking_rules(self, request, pk=None):
        ws = self._get(request, pk)
        ser = TrackingRuleSetWriteSerializer(data=request.data or {})
        ser.is_valid(raise_exception=True)

        expected_version = ser.validated_data.get("version")
        if expected_version is None and getattr(settings, "PART_TRACKING_REQUIRE_VERSION", False):
            raise DRFValidationError({"version": ["This field is required."]})

        try:
            result = TrackingRuleService.save_rule_set(
                tenant_id=ws.tenant_id,
                facility_id=ws.facility_id,
                workstation_id=ws.id,
                rule_set=rule_set_from_data(ser.validated_data["rules"]),
                expected_version=expected_version,
                actor_user_id=getattr(request.user, "id", None),
            )
        except DjangoValidationError as e:
            raise DRFValidationError(django_validation_detail(e))
        except RuleSetConflict as e:
            raise ConflictError(detail=str(e))

        return Response(rule_set_to_data(result.rule_set))

    @extend_schema(tags=["tracking"], request=TrackingEvaluateSerializer, responses={200: TrackingEvaluateResultSerializer})
    @action(detail=True, methods=["post"], url_path="tracking-rules/evaluate")
    def evaluate_tracking_rules(self, request, pk=None):
        ws = self._get(request, pk)
        ser = TrackingEvaluateSerializer(data=request.data or {})
        ser.is_valid(raise_exception=True)

        rules = ser.validated_data.get("rules")
        if rules is None:
            rule_set = TrackingRuleSelector.load_rule_set(
                tenant_id=ws.tenant_id, facility_id=ws.facility_id, workstation_id=ws.id
            )
        else:
            rule_set = rule_set_from_data(rules)

        part = PartRecord.from_mapping(ser.validated_data["part"])
        matching = default_evaluator.matching_rule_indexes(rule_set, part)
        return Response({"should_track": bool(matching), "matching_rules": matching})

    # ------------------------------------------------------------
    # Tracked parts
    # ------------------------------------------------------------
    @extend_schema(tags=["tracking"], request=CompletePartsSerializer, responses={200: CompletePartsResultSerializer})
    @action(detail=True, methods=["post"], url_path="complete-parts")
    def complete_parts(self, request, pk=None):
        ws = self._get(request, pk)
        ser = CompletePartsSerializer(data=request.data or {})
        ser.is_valid(raise_exception=True)

        try:
            completed = TrackingService.complete_parts_for_workstation(
                tenant_id=ws.tenant_id,
                facility_id=ws.facility_id,
                project_id=ser.validated_data["project_id"],
                workstation_id=ws.id,
                actor_user_id=getattr(request.user, "id", None),
            )
        except ProjectSelector.NotFound:
            raise DRFValidationError({"project_id": ["Project not found."]})

        return Response({"completed": completed})

    @extend_schema(tags=["tracking"], responses={200: PartWorkstationTrackingSerializer(many=True)})
    @action(detail=True, methods=["get"], url_path="tracked-parts")
    def tracked_parts(self, request, pk=None):
        ws = self._get(request, pk)
        try:
            qs = TrackingSelector.list_tracked_parts(
                tenant_id=ws.tenant_id,
                facility_id=ws.facility_id,
                workstation_id=ws.id,
                params=request.query_params,
            )
        except DjangoValidationError as e:
            raise DRFValidationError(django_validation_detail(e))
        return paginate(request, qs, PartWorkstationTrackingSerializer)
