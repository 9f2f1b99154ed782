"""
Authentication API Views

Implements sign-up/sign-in against the credential store and session-token
management:
- POST /sign-up - Create account, start session
- POST /sign-in - Start session
- POST /api/auth/sign-up/validate - Inline sign-up form errors
- POST /api/auth/sign-out - Clear session cookie
- GET  /api/auth/session - Current session summary
- POST /api/auth/update-onboarding - Resync onboarding status into the session (sandbox only)
"""
import logging

from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.core.authentication import (
    clear_session_cookie,
    get_session_issuer,
    get_user_context,
    set_session_cookie,
)
from apps.core.constants import ONBOARDING_WELCOME_PATH, OnboardingStatus, VerificationStatus
from apps.core.exceptions import ConflictError, ValidationError
from apps.core.permissions import IsAuthenticated, SandboxToolsEnabled
from apps.core.routing import landing_path_for
from apps.core.throttles import AuthRateThrottle
from apps.onboarding.poller import extract_verification_status
from apps.paxos import services as paxos_services

from .validators import inline_sign_up_errors, validate_sign_up

logger = logging.getLogger(__name__)


class SignUpView(APIView):
    """
    POST /sign-up

    Create an account and start a session.

    Request Body:
        {
            "name": "Alice",
            "email": "alice@test.com",
            "password": "Passw0rd!",
            "confirm_password": "Passw0rd!"
        }

    Response (201):
        {
            "user": {...session summary...},
            "redirect": "/onboarding/welcome"
        }

    Errors:
        400: Field validation failed (details per field)
        409: Account already exists
    """
    authentication_classes = []
    permission_classes = [AllowAny]
    throttle_classes = [AuthRateThrottle]

    def post(self, request):
        errors = validate_sign_up(request.data)
        if errors:
            raise ValidationError.for_fields(errors)

        session = get_session_issuer().sign_up(
            request.data.get('email', ''),
            request.data.get('password', ''),
            name=request.data.get('name'),
        )

        response = Response(
            {
                'user': session.claims.summary(),
                'redirect': ONBOARDING_WELCOME_PATH,
            },
            status=status.HTTP_201_CREATED
        )
        return set_session_cookie(response, session.token)


class SignInView(APIView):
    """
    POST /sign-in

    Authenticate with email/password.

    Response (200):
        {
            "user": {...session summary...},
            "redirect": "/dashboard" | "/onboarding/welcome"
        }

    Errors:
        400: Missing email or password
        401: Invalid password
        404: No account for this email
    """
    authentication_classes = []
    permission_classes = [AllowAny]
    throttle_classes = [AuthRateThrottle]

    def post(self, request):
        email = (request.data.get('email') or '').strip()
        password = request.data.get('password') or ''

        if not email or not password:
            raise ValidationError('Email and password required')

        session = get_session_issuer().sign_in(email, password)

        response = Response({
            'user': session.claims.summary(),
            'redirect': landing_path_for(session.claims.onboarding_status),
        })
        return set_session_cookie(response, session.token)


class SignUpValidateView(APIView):
    """
    POST /api/auth/sign-up/validate

    Inline errors for a partially filled sign-up form.

    Response (200):
        {
            "errors": {"password": "Password must be at least 8 characters"},
            "can_submit": false
        }
    """
    authentication_classes = []
    permission_classes = [AllowAny]

    def post(self, request):
        return Response({
            'errors': inline_sign_up_errors(request.data),
            'can_submit': not validate_sign_up(request.data),
        })


class SignOutView(APIView):
    """
    POST /api/auth/sign-out

    Response (200):
        {"message": "Signed out"}
    """
    authentication_classes = []
    permission_classes = [AllowAny]

    def post(self, request):
        request.session.flush()
        return clear_session_cookie(Response({'message': 'Signed out'}))


class SessionView(APIView):
    """
    GET /api/auth/session

    Session summary as carried by the token (may lag the store until resync).
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        user = get_user_context(request)
        return Response({'user': user.summary()})


class UpdateOnboardingView(APIView):
    """
    POST /api/auth/update-onboarding

    Sandbox operator tool: link Paxos identifiers to the user and reissue the
    session cookie so the route middleware sees the new status on the very
    next request. Refused unless sandbox tools are enabled.

    Any status past NOT_STARTED needs an identity that Paxos knows about, and
    APPROVED needs Paxos to report that identity as APPROVED.

    Request Body:
        {
            "identity_id": "...",
            "account_id": "...",
            "profile_id": "...",
            "onboarding_status": "APPROVED"  // optional, defaults to APPROVED
        }

    Response (200):
        {"ok": true, "user": {...}}

    Errors:
        400: Unknown status, or no identity to check
        403: Sandbox tools are disabled
        409: Paxos has not approved the identity
    """
    permission_classes = [IsAuthenticated, SandboxToolsEnabled]

    def post(self, request):
        user = get_user_context(request)

        onboarding_status = request.data.get('onboarding_status') or OnboardingStatus.APPROVED
        if onboarding_status not in OnboardingStatus.values:
            raise ValidationError.for_fields({
                'onboarding_status': f'Unknown onboarding status: {onboarding_status}'
            })

        identity_id = request.data.get('identity_id') or user.identity_id
        if onboarding_status != OnboardingStatus.NOT_STARTED:
            self.confirm_identity(identity_id, onboarding_status)

        session = get_session_issuer().resync(
            user,
            onboarding_status=onboarding_status,
            identity_id=identity_id,
            account_id=request.data.get('account_id'),
            profile_id=request.data.get('profile_id'),
        )

        response = Response({'ok': True, 'user': session.claims.summary()})
        return set_session_cookie(response, session.token)

    def confirm_identity(self, identity_id: str | None, onboarding_status: str) -> None:
        if not identity_id:
            raise ValidationError.for_fields({'identity_id': 'An identity is required for this status'})

        verification_status = extract_verification_status(paxos_services.get_identity(identity_id))
        if (
            onboarding_status == OnboardingStatus.APPROVED
            and verification_status != VerificationStatus.APPROVED
        ):
            logger.warning(f'Refused APPROVED status for identity {identity_id} ({verification_status})')
            raise ConflictError(f'Identity verification is {verification_status}')
