# pm_core/projects/api/serializers.py
from rest_framework import serializers

from pm_core.projects.models import Project, ProjectStatus


class ProjectSerializer(serializers.ModelSerializer):
    class Meta:
        model = Project
        fields = [
            "id",
            "tenant_id",
            "facility_id",
            "code",
            "name",
            "client",
            "status",
            "start_date",
            "installation_date",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class ProjectCreateSerializer(serializers.Serializer):
    code = serializers.CharField(max_length=64)
    name = serializers.CharField(max_length=255)
    client = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")
    status = serializers.ChoiceField(choices=ProjectStatus.choices, required=False, default=ProjectStatus.PLANNED)
    start_date = serializers.DateField(required=False, allow_null=True, default=None)
    installation_date = serializers.DateField(required=False, allow_null=True, default=None)


class ProjectUpdateSerializer(serializers.Serializer):
    code = serializers.CharField(max_length=64, required=False)
    name = serializers.CharField(max_length=255, required=False)
    client = serializers.CharField(max_length=255, required=False, allow_blank=True)
    status = serializers.ChoiceField(choices=ProjectStatus.choices, required=False)
    start_date = serializers.DateField(required=False, allow_null=True)
    installation_date = serializers.DateField(required=False, allow_null=True)


class WorkstationPartCountsSerializer(serializers.Serializer):
    workstation_id = serializers.UUIDField()
    workstation_code = serializers.CharField()
    workstation_name = serializers.CharField()
    total = serializers.IntegerField()
    pending = serializers.IntegerField()
    in_progress = serializers.IntegerField()
    completed = serializers.IntegerField()
