# pm_core/iam/api/me.py

from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from pm_core.common.permissions import _user_roles
from pm_core.iam.api.schema_serializers import MeResponseSerializer
from pm_core.iam.scope import assert_user_membership, resolve_scope_from_headers
from pm_core.iam.services.membership import list_user_facilities


class MeView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(responses={200: MeResponseSerializer}, tags=["IAM"])
    def get(self, request):
        """
        User info + memberships. Scope headers are optional here; when given
        they must be valid and the user must be a member (400/403 otherwise).
        """
        scope = resolve_scope_from_headers(request)
        if scope is not None:
            assert_user_membership(request.user, scope)

        active_scope = None
        if scope is not None:
            active_scope = {
                "tenant_id": str(scope.tenant_id),
                "facility_id": str(scope.facility_id),
            }

        return Response(
            {
                "user": {
                    "id": request.user.id,
                    "username": getattr(request.user, "username", None),
                    "email": getattr(request.user, "email", None) or None,
                    "is_superuser": bool(getattr(request.user, "is_superuser", False)),
                },
                "memberships": list_user_facilities(request.user.id),
                "active_scope": active_scope,
                "roles": sorted(_user_roles(request.user)),
            }
        )
