"""
Permission Classes for Aureum Backend
"""
import logging

from django.conf import settings
from rest_framework import permissions

from .authentication import SessionClaims

logger = logging.getLogger(__name__)


class IsAuthenticated(permissions.BasePermission):
    """
    Allows access only to requests carrying a valid session token.
    """
    message = 'Authentication required'

    def has_permission(self, request, view):
        user = getattr(request, 'user', None)
        return isinstance(user, SessionClaims)


def sandbox_tools_enabled() -> bool:
    """
    Instant approval and sandbox deposits are allowed only when the flag is on
    AND the configured Paxos API is a sandbox host.
    """
    return bool(settings.SANDBOX_TOOLS_ENABLED) and 'sandbox' in settings.PAXOS_BASE_URL


class SandboxToolsEnabled(permissions.BasePermission):
    """
    Gates operator shortcuts that skip real verification or move test funds.
    """
    message = 'Sandbox tools are disabled in this environment'

    def has_permission(self, request, view):
        enabled = sandbox_tools_enabled()
        if not enabled:
            logger.warning(f'Refused sandbox action on {request.path}')
        return enabled
