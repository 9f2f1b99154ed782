"""
Route Authorization Middleware for Aureum Backend

Decodes the session token and redirects by onboarding status.
"""
import logging
from collections.abc import Callable
from urllib.parse import urlencode

from django.http import HttpResponseRedirect

from .authentication import decode_session_token, read_session_token
from .routing import RouteDecision, decide_route

logger = logging.getLogger(__name__)


class RouteAuthorizationMiddleware:
    """
    Middleware that gates pages by session and onboarding status.

    This middleware:
    1. Decodes the session token (invalid or expired counts as absent)
    2. Attaches the claims to request.session_claims
    3. Applies decide_route() and redirects when it says so

    Only the token is consulted, never the credential store. A status change
    written straight to the store stays invisible here until the session is
    reissued.
    """

    def __init__(self, get_response: Callable):
        self.get_response = get_response

    def __call__(self, request):
        token = read_session_token(request)
        claims = decode_session_token(token) if token else None
        request.session_claims = claims

        decision = decide_route(request.path, claims)
        if decision is RouteDecision.ALLOW:
            return self.get_response(request)

        target = decision.redirect_path
        if decision is RouteDecision.SIGN_IN:
            target = f"{target}?{urlencode({'callbackUrl': request.get_full_path()})}"

        logger.debug(f'Redirecting {request.path} -> {target} ({decision.value})')
        return HttpResponseRedirect(target)
