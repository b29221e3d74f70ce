# pm_core/parts/apps.py
from django.apps import AppConfig


class PartsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "pm_core.parts"
