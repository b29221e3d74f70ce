# pm_core/parts/api/serializers.py
from rest_framework import serializers

from pm_core.parts.columns import PartColumn
from pm_core.parts.models import Part, PartsList


class PartSerializer(serializers.ModelSerializer):
    class Meta:
        model = Part
        fields = ["id", "row_number", *PartColumn.values, "afbeelding", "color_status"]
        read_only_fields = fields


class PartsListSerializer(serializers.ModelSerializer):
    project_code = serializers.CharField(source="project.code", read_only=True)
    part_count = serializers.IntegerField(read_only=True, default=None)

    class Meta:
        model = PartsList
        fields = [
            "id",
            "tenant_id",
            "facility_id",
            "project",
            "project_code",
            "file_name",
            "imported_by",
            "imported_at",
            "part_count",
        ]
        read_only_fields = fields


class PartsListDetailSerializer(PartsListSerializer):
    parts = PartSerializer(many=True, read_only=True)

    class Meta(PartsListSerializer.Meta):
        fields = PartsListSerializer.Meta.fields + ["parts"]
        read_only_fields = fields


class PartsListImportSerializer(serializers.Serializer):
    """
    Rows are dicts keyed by column name (e.g. "cnc_pos") or by the CSV
    header label (e.g. "CNC pos").
    """
    project_id = serializers.UUIDField()
    file_name = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")
    rows = serializers.ListField(child=serializers.DictField(), allow_empty=True)
    generate_tracking = serializers.BooleanField(required=False, allow_null=True, default=None)


class TrackingGenerationSerializer(serializers.Serializer):
    parts_list_id = serializers.UUIDField()
    parts_evaluated = serializers.IntegerField()
    workstations_evaluated = serializers.IntegerField()
    matches = serializers.IntegerField()
    created = serializers.IntegerField()
    already_tracked = serializers.IntegerField()
