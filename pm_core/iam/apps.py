from django.apps import AppConfig


class IamConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "pm_core.iam"

    def ready(self) -> None:
        # registers the drf-spectacular auth extension
        from pm_core.iam import openapi  # noqa: F401
