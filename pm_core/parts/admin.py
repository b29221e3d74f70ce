from django.contrib import admin

from pm_core.parts.models import Part, PartsList


class PartInline(admin.TabularInline):
    model = Part
    extra = 0
    fields = ("row_number", "cnc_pos", "materiaal", "dikte", "lengte", "breedte", "aantal", "color_status")


@admin.register(PartsList)
class PartsListAdmin(admin.ModelAdmin):
    list_display = ("file_name", "project", "imported_by", "imported_at")
    search_fields = ("file_name", "project__code")
    inlines = [PartInline]


@admin.register(Part)
class PartAdmin(admin.ModelAdmin):
    list_display = ("parts_list", "row_number", "cnc_pos", "materiaal", "aantal", "color_status")
    list_filter = ("color_status",)
    search_fields = ("cnc_pos", "wand_naam", "materiaal")
