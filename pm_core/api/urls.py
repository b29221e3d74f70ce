# pm_core/api/urls.py
from __future__ import annotations

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from pm_core.audit.api.views import AuditEventViewSet
from pm_core.iam.api.auth import LoginView, LogoutView, RefreshView
from pm_core.iam.api.me import MeView
from pm_core.parts.api.views import PartsListViewSet
from pm_core.projects.api.views import ProjectViewSet
from pm_core.tracking.api.views import TrackingOptionsView
from pm_core.workstations.api.views import WorkstationViewSet

router = DefaultRouter()

router.register(r"workstations", WorkstationViewSet, basename="workstations")
router.register(r"projects", ProjectViewSet, basename="projects")
router.register(r"parts-lists", PartsListViewSet, basename="parts-lists")
router.register(r"audit/events", AuditEventViewSet, basename="audit-events")

urlpatterns = [
    # Auth + /me
    path("auth/login/", LoginView.as_view(), name="login"),
    path("auth/refresh/", RefreshView.as_view(), name="refresh"),
    path("auth/logout/", LogoutView.as_view(), name="logout"),
    path("me/", MeView.as_view(), name="me"),

    path("tracking/options/", TrackingOptionsView.as_view(), name="tracking-options"),

    path("", include(router.urls)),
]
