# pm_core/tracking/apps.py
from django.apps import AppConfig


class TrackingConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "pm_core.tracking"
