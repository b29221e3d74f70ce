# pm_core/workstations/apps.py
from django.apps import AppConfig


class WorkstationsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "pm_core.workstations"
