from django.contrib import admin

from pm_core.tracking.models import PartWorkstationTracking, TrackingCondition, TrackingRule


class TrackingConditionInline(admin.TabularInline):
    model = TrackingCondition
    extra = 0
    fields = ("position", "column_name", "operator", "value")


@admin.register(TrackingRule)
class TrackingRuleAdmin(admin.ModelAdmin):
    list_display = ("workstation", "position", "logic_operator", "created_at")
    list_filter = ("logic_operator",)
    inlines = [TrackingConditionInline]


@admin.register(PartWorkstationTracking)
class PartWorkstationTrackingAdmin(admin.ModelAdmin):
    list_display = ("part", "workstation", "status", "completed_at")
    list_filter = ("status", "workstation")
