# pm_core/facilities/admin.py
from __future__ import annotations

from django.contrib import admin

from pm_core.facilities.models import Facility


@admin.register(Facility)
class FacilityAdmin(admin.ModelAdmin):
    list_display = ("name", "code", "tenant", "facility_type", "is_active", "city", "updated_at")
    list_filter = ("is_active", "facility_type", "tenant")
    search_fields = ("name", "code", "tenant__code", "tenant__name", "city")
    readonly_fields = ("id", "created_at", "updated_at")
    ordering = ("tenant", "name")
