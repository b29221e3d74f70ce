# pm_core/tracking/api/views.py
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import extend_schema
from rest_framework.response import Response
from rest_framework.views import APIView

from pm_core.common.permissions import TrackingOptionsPermission
from pm_core.common.views import ScopedViewSetMixin
from pm_core.parts.columns import PartColumn
from pm_core.tracking.constants import TrackingLogicOperator, TrackingOperator, VALUE_FREE_OPERATORS


class TrackingOptionsView(ScopedViewSetMixin, APIView):
    """
    Choice lists for the rule editor dropdowns.
    """
    permission_classes = [TrackingOptionsPermission]

    @extend_schema(tags=["tracking"], responses={200: OpenApiTypes.OBJECT})
    def get(self, request):
        self._require_scope(request)
        return Response(
            {
                "columns": [{"value": value, "label": label} for value, label in PartColumn.choices],
                "operators": [
                    {"value": value, "label": label, "requires_value": value not in VALUE_FREE_OPERATORS}
                    for value, label in TrackingOperator.choices
                ],
                "logic_operators": [{"value": value, "label": label} for value, label in TrackingLogicOperator.choices],
            }
        )
