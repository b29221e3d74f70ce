# pm_core/workstations/api/serializers.py
from rest_framework import serializers

from pm_core.workstations.models import Workstation


class WorkstationSerializer(serializers.ModelSerializer):
    class Meta:
        model = Workstation
        fields = [
            "id",
            "tenant_id",
            "facility_id",
            "code",
            "name",
            "description",
            "is_active",
            "tracking_rules_version",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class WorkstationCreateSerializer(serializers.Serializer):
    code = serializers.CharField(max_length=64)
    name = serializers.CharField(max_length=255)
    description = serializers.CharField(required=False, allow_blank=True, default="")
    is_active = serializers.BooleanField(required=False, default=True)


class WorkstationUpdateSerializer(serializers.Serializer):
    code = serializers.CharField(max_length=64, required=False)
    name = serializers.CharField(max_length=255, required=False)
    description = serializers.CharField(required=False, allow_blank=True)
    is_active = serializers.BooleanField(required=False)
