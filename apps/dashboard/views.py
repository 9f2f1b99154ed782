"""
Dashboard API Views

App-area landing page. The route middleware only lets APPROVED and
PROFILE_CREATED sessions this far.
- GET /dashboard
"""
import logging

from rest_framework.response import Response
from rest_framework.views import APIView

from apps.core.authentication import get_user_context
from apps.core.constants import OnboardingStatus
from apps.core.permissions import IsAuthenticated

logger = logging.getLogger(__name__)


class DashboardView(APIView):
    """
    GET /dashboard

    Response (200):
        {
            "user": {...session summary...},
            "accounts": {"identity_id": ..., "account_id": ..., "profile_id": ...},
            "verification_pending": false
        }
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        user = get_user_context(request)
        return Response({
            'user': user.summary(),
            'accounts': {
                'identity_id': user.identity_id,
                'account_id': user.account_id,
                'profile_id': user.profile_id,
            },
            'verification_pending': user.onboarding_status != OnboardingStatus.APPROVED,
        })
