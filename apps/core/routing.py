"""
Route Authorization

One decision function for every status-driven redirect, so onboarding status
semantics live in a single place. Pure: depends only on (path, claims).
"""
from dataclasses import dataclass
from enum import Enum

from .constants import (
    APP_ACCESS_STATUSES,
    DASHBOARD_PATH,
    ONBOARDING_PREFIX,
    ONBOARDING_WELCOME_PATH,
    OnboardingStatus,
    PUBLIC_PREFIXES,
    SIGN_IN_PATH,
)


class RouteDecision(Enum):
    ALLOW = 'allow'
    SIGN_IN = 'sign-in'
    ONBOARDING = 'onboarding'
    DASHBOARD = 'dashboard'

    @property
    def redirect_path(self) -> str | None:
        return {
            RouteDecision.ALLOW: None,
            RouteDecision.SIGN_IN: SIGN_IN_PATH,
            RouteDecision.ONBOARDING: ONBOARDING_WELCOME_PATH,
            RouteDecision.DASHBOARD: DASHBOARD_PATH,
        }[self]


@dataclass(frozen=True)
class _HasStatus:
    onboarding_status: str | None


def _in_namespace(path: str, prefix: str) -> bool:
    return path == prefix or path.startswith(prefix + '/')


def is_public_path(path: str) -> bool:
    return any(_in_namespace(path, prefix) for prefix in PUBLIC_PREFIXES)


def is_onboarding_path(path: str) -> bool:
    return _in_namespace(path, ONBOARDING_PREFIX)


def decide_route(path: str, claims) -> RouteDecision:
    """
    Decide what happens to a request for `path` given the decoded session.

    `claims` is any object with an `onboarding_status` attribute, or None
    when there is no valid session.

    Rules, in order:
    1. sign-in, sign-up and /api namespaces are always allowed
    2. everything else needs a session
    3. onboarding pages: APPROVED users are sent to the dashboard
    4. app pages: only APPROVED or PROFILE_CREATED get through
    """
    if is_public_path(path):
        return RouteDecision.ALLOW

    if claims is None:
        return RouteDecision.SIGN_IN

    status = getattr(claims, 'onboarding_status', None)

    if is_onboarding_path(path):
        if status == OnboardingStatus.APPROVED:
            return RouteDecision.DASHBOARD
        return RouteDecision.ALLOW

    if not status or status == OnboardingStatus.NOT_STARTED:
        return RouteDecision.ONBOARDING

    if status not in APP_ACCESS_STATUSES:
        return RouteDecision.ONBOARDING

    return RouteDecision.ALLOW


def landing_path_for(onboarding_status: str | None) -> str:
    """Where a freshly signed-in user should go."""
    decision = decide_route(DASHBOARD_PATH, _HasStatus(onboarding_status))
    return decision.redirect_path or DASHBOARD_PATH
