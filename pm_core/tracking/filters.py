# pm_core/tracking/filters.py
import django_filters

from pm_core.tracking.constants import PartTrackingStatus
from pm_core.tracking.models import PartWorkstationTracking


class PartWorkstationTrackingFilter(django_filters.FilterSet):
    status = django_filters.ChoiceFilter(choices=PartTrackingStatus.choices)
    project = django_filters.UUIDFilter(field_name="part__parts_list__project_id")
    parts_list = django_filters.UUIDFilter(field_name="part__parts_list_id")
    cnc_pos = django_filters.CharFilter(field_name="part__cnc_pos", lookup_expr="icontains")

    class Meta:
        model = PartWorkstationTracking
        fields = ["status", "project", "parts_list", "cnc_pos"]
