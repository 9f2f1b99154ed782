"""
Core Constants

Centralized status values and route namespaces for the application.
"""
from django.db import models


class OnboardingStatus(models.TextChoices):
    """
    Server-held progress through identity verification and account provisioning.

    Values are ordered; a stored status only ever moves forward.
    """
    NOT_STARTED = 'NOT_STARTED', 'Not Started'
    IDENTITY_CREATED = 'IDENTITY_CREATED', 'Identity Created'
    ACCOUNT_CREATED = 'ACCOUNT_CREATED', 'Account Created'
    PROFILE_CREATED = 'PROFILE_CREATED', 'Profile Created'
    APPROVED = 'APPROVED', 'Approved'

    @property
    def rank(self) -> int:
        return list(OnboardingStatus).index(self)

    @classmethod
    def advance(cls, current: str | None, proposed: str | None) -> str:
        """Return whichever of the two statuses is further along."""
        current_status = cls(current) if current else cls.NOT_STARTED
        if not proposed:
            return current_status.value
        proposed_status = cls(proposed)
        if proposed_status.rank < current_status.rank:
            return current_status.value
        return proposed_status.value


# Statuses that unlock the app area (dashboard, accounts, ...)
APP_ACCESS_STATUSES = frozenset({
    OnboardingStatus.APPROVED,
    OnboardingStatus.PROFILE_CREATED,
})


class VerificationStatus(models.TextChoices):
    """Identity-verification outcome reported by Paxos."""
    PENDING = 'PENDING', 'Pending'
    APPROVED = 'APPROVED', 'Approved'
    DENIED = 'DENIED', 'Denied'
    DISABLED = 'DISABLED', 'Disabled'


TERMINAL_VERIFICATION_STATUSES = frozenset({
    VerificationStatus.APPROVED,
    VerificationStatus.DENIED,
})


# Route namespaces
SIGN_IN_PATH = '/sign-in'
SIGN_UP_PATH = '/sign-up'
API_PREFIX = '/api'
ONBOARDING_PREFIX = '/onboarding'
ONBOARDING_WELCOME_PATH = '/onboarding/welcome'
DASHBOARD_PATH = '/dashboard'

PUBLIC_PREFIXES = (SIGN_IN_PATH, SIGN_UP_PATH, API_PREFIX)

# Password rules for account creation
PASSWORD_MIN_LENGTH = 8
