from django.contrib import admin

from pm_core.projects.models import Project


@admin.register(Project)
class ProjectAdmin(admin.ModelAdmin):
    list_display = ("code", "name", "client", "status", "installation_date", "tenant_id", "facility_id")
    list_filter = ("status",)
    search_fields = ("code", "name", "client")
