from django.contrib import admin

from pm_core.workstations.models import Workstation


@admin.register(Workstation)
class WorkstationAdmin(admin.ModelAdmin):
    list_display = ("code", "name", "is_active", "tracking_rules_version", "tenant_id", "facility_id")
    list_filter = ("is_active",)
    search_fields = ("code", "name")
    readonly_fields = ("tracking_rules_version", "created_at", "updated_at")
