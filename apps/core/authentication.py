"""
Session Issuer and Session Token Authentication

Mints HS256 session tokens carrying identity and onboarding status, stores
them in an HTTP-only cookie, and validates them for Django REST Framework.
"""
import logging
import uuid
from dataclasses import dataclass
from datetime import timedelta

import jwt
from django.conf import settings
from django.contrib.auth.hashers import check_password, make_password
from django.utils import timezone
from rest_framework import authentication, exceptions

from .constants import OnboardingStatus
from .exceptions import DuplicateAccount, InvalidCredentials, NoSuchAccount
from .repositories import UserRecord, UserRepository, get_user_repository, normalize_email

logger = logging.getLogger(__name__)

SIGN_UP_ACTION = 'signup'
SIGN_IN_ACTION = 'signin'

RESYNC_FIELDS = ('onboarding_status', 'identity_id', 'account_id', 'profile_id')


@dataclass(frozen=True)
class SessionClaims:
    """
    Decoded session token.

    This is NOT a Django User model - it's the identity and onboarding state
    as of the moment the token was issued. It can lag behind the store until
    the session is reissued.
    """
    id: str
    email: str
    name: str = ''
    onboarding_status: str | None = None
    identity_id: str | None = None
    account_id: str | None = None
    profile_id: str | None = None

    @property
    def is_authenticated(self) -> bool:
        return True

    @classmethod
    def from_payload(cls, payload: dict) -> 'SessionClaims':
        return cls(
            id=payload['sub'],
            email=payload['email'],
            name=payload.get('name') or '',
            onboarding_status=payload.get('onboarding_status'),
            identity_id=payload.get('identity_id'),
            account_id=payload.get('account_id'),
            profile_id=payload.get('profile_id'),
        )

    def summary(self) -> dict:
        """Session view exposed to the client."""
        return {
            'id': self.id,
            'email': self.email,
            'name': self.name,
            'identity_id': self.identity_id,
            'account_id': self.account_id,
            'profile_id': self.profile_id,
            'onboarding_status': self.onboarding_status or OnboardingStatus.NOT_STARTED.value,
        }


@dataclass(frozen=True)
class IssuedSession:
    token: str
    claims: SessionClaims


class SessionTokenCodec:
    """Signs and verifies session tokens; knows nothing about the store."""

    def __init__(self, secret: str | None = None, max_age: int | None = None):
        self.secret = secret or settings.SESSION_TOKEN_SECRET
        self.max_age = max_age or settings.SESSION_TOKEN_MAX_AGE
        self.algorithm = settings.SESSION_TOKEN_ALGORITHM

    def encode(self, record: UserRecord) -> IssuedSession:
        now = timezone.now()
        payload = {
            'sub': str(record.id),
            'email': record.email,
            'name': record.name,
            'onboarding_status': record.onboarding_status,
            'identity_id': record.identity_id,
            'account_id': record.account_id,
            'profile_id': record.profile_id,
            'iat': now,
            'exp': now + timedelta(seconds=self.max_age),
        }
        token = jwt.encode(payload, self.secret, algorithm=self.algorithm)
        return IssuedSession(token=token, claims=SessionClaims.from_payload(payload))

    def decode(self, token: str) -> SessionClaims | None:
        """
        Decode and validate a session token.

        Returns:
            SessionClaims if valid
            None: If token is invalid, tampered with or expired
        """
        try:
            payload = jwt.decode(token, self.secret, algorithms=[self.algorithm])
            return SessionClaims.from_payload(payload)
        except jwt.ExpiredSignatureError:
            logger.debug('Session token has expired')
            return None
        except (jwt.InvalidTokenError, KeyError) as e:
            logger.debug(f'Session token validation failed: {e}')
            return None


class SessionIssuer:
    """
    Authenticates credentials against the credential store and issues tokens.

    Usage:
        issuer = SessionIssuer()
        session = issuer.sign_in('alice@test.com', 'Passw0rd!')
        set_session_cookie(response, session.token)
    """

    def __init__(
        self,
        repository: UserRepository | None = None,
        codec: SessionTokenCodec | None = None,
    ):
        self.repository = repository if repository is not None else get_user_repository()
        self.codec = codec or SessionTokenCodec()

    def authenticate(
        self,
        email: str,
        password: str,
        action: str = SIGN_IN_ACTION,
        name: str | None = None,
    ) -> IssuedSession:
        if action == SIGN_UP_ACTION:
            return self.sign_up(email, password, name=name)
        return self.sign_in(email, password)

    def sign_up(self, email: str, password: str, name: str | None = None) -> IssuedSession:
        email = normalize_email(email)
        try:
            record = self.repository.insert(UserRecord(
                id=uuid.uuid4(),
                email=email,
                name=(name or '').strip() or email.split('@')[0],
                password=make_password(password),
                onboarding_status=OnboardingStatus.NOT_STARTED.value,
            ))
        except DuplicateAccount:
            logger.info('Sign-up rejected: account already exists')
            raise
        logger.info(f'Signed up user {record.id}')
        return self.issue(record)

    def sign_in(self, email: str, password: str) -> IssuedSession:
        record = self.repository.get_by_email(email)
        if record is None:
            raise NoSuchAccount()

        if not check_password(password, record.password):
            logger.info(f'Sign-in rejected for user {record.id}: invalid password')
            raise InvalidCredentials()

        return self.issue(record)

    def issue(self, record: UserRecord) -> IssuedSession:
        return self.codec.encode(record)

    def decode(self, token: str) -> SessionClaims | None:
        return self.codec.decode(token)

    def resync(self, claims: SessionClaims, **updates) -> IssuedSession:
        """
        Apply status/identifier updates to the stored user and reissue at once.

        The route middleware reads only the token, so the new status takes
        effect on the very next request instead of at token renewal.
        """
        changes = {
            key: value for key, value in updates.items()
            if key in RESYNC_FIELDS and value is not None
        }
        record = self.repository.update(claims.email, **changes)
        logger.info(
            f'Reissued session for user {record.id} '
            f'(onboarding_status={record.onboarding_status})'
        )
        return self.issue(record)


# =============================================================================
# Cookie helpers
# =============================================================================

def set_session_cookie(response, token: str):
    """Write (or overwrite) the session cookie with fixed attributes."""
    response.set_cookie(
        settings.SESSION_TOKEN_COOKIE_NAME,
        token,
        max_age=settings.SESSION_TOKEN_MAX_AGE,
        path='/',
        secure=settings.SESSION_TOKEN_COOKIE_SECURE,
        httponly=True,
        samesite='Lax',
    )
    return response


def clear_session_cookie(response):
    response.delete_cookie(
        settings.SESSION_TOKEN_COOKIE_NAME,
        path='/',
        samesite='Lax',
    )
    return response


def read_session_token(request) -> str | None:
    """Session cookie first, then an Authorization Bearer header for API clients."""
    token = request.COOKIES.get(settings.SESSION_TOKEN_COOKIE_NAME)
    if token:
        return token

    auth_header = request.META.get('HTTP_AUTHORIZATION', '')
    if auth_header.startswith('Bearer '):
        return auth_header[7:] or None
    return None


# =============================================================================
# Django REST Framework
# =============================================================================

class SessionTokenAuthentication(authentication.BaseAuthentication):
    """
    Authenticates API requests from the session token.

    Flow:
    1. Read the token from the session cookie (or Bearer header)
    2. Decode and validate it with the session secret
    3. Return SessionClaims as request.user
    """

    def authenticate(self, request):
        token = read_session_token(request)
        if not token:
            return None

        claims = decode_session_token(token)
        if claims is None:
            raise exceptions.AuthenticationFailed('Invalid or expired session')

        return (claims, token)

    def authenticate_header(self, request):
        """
        Return the WWW-Authenticate header value for 401 responses.
        """
        return 'Bearer realm="api"'


def decode_session_token(token: str) -> SessionClaims | None:
    return SessionTokenCodec().decode(token)


def get_user_context(request) -> SessionClaims | None:
    """
    Utility function to get the session claims from request.

    Use this in views that need user context.
    """
    user = getattr(request, 'user', None)
    if isinstance(user, SessionClaims):
        return user
    return None


def get_session_issuer() -> SessionIssuer:
    """Issuer bound to the configured credential store."""
    return SessionIssuer()
