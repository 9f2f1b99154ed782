"""
Custom Exception Handling for Aureum Backend

Provides consistent error response format across all API endpoints.
"""
import logging

from rest_framework import status
from rest_framework.response import Response

logger = logging.getLogger(__name__)


def custom_exception_handler(exc, context):
    """
    Custom exception handler that provides consistent error format.

    Error Response Format:
    {
        "error": "ErrorType",
        "message": "Human-readable error message",
        "details": {...}  // Optional, additional context
    }
    """
    # rest_framework.views loads the authentication classes, which import this module
    from rest_framework.views import exception_handler

    if isinstance(exc, APIException):
        error_data = {
            'error': exc.error_type,
            'message': exc.message,
        }
        if exc.details:
            error_data['details'] = exc.details
        return Response(error_data, status=exc.status_code)

    # Call REST framework's default exception handler first
    response = exception_handler(exc, context)

    if response is not None:
        # Standardize the response format
        error_data = {
            'error': exc.__class__.__name__,
            'message': str(exc.detail) if hasattr(exc, 'detail') else str(exc),
        }

        # Handle DRF validation errors specially
        if hasattr(exc, 'detail'):
            if isinstance(exc.detail, dict):
                error_data['details'] = exc.detail
                # Create a summary message from field errors
                messages = []
                for field, errors in exc.detail.items():
                    if isinstance(errors, list):
                        messages.append(f"{field}: {', '.join(str(e) for e in errors)}")
                    else:
                        messages.append(f"{field}: {errors}")
                error_data['message'] = '; '.join(messages)
            elif isinstance(exc.detail, list):
                error_data['message'] = ', '.join(str(e) for e in exc.detail)

        response.data = error_data

    else:
        # Handle unexpected exceptions
        logger.exception(f'Unhandled exception: {exc}')

        error_data = {
            'error': 'InternalServerError',
            'message': 'An unexpected error occurred',
        }

        response = Response(
            error_data,
            status=status.HTTP_500_INTERNAL_SERVER_ERROR
        )

    return response


class APIException(Exception):
    """
    Base exception class for API errors.

    Usage:
        raise APIException('Something went wrong', status_code=400)
    """
    def __init__(self, message: str, status_code: int = 400, details: dict | None = None):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)

    @property
    def error_type(self) -> str:
        return self.__class__.__name__


class ValidationError(APIException):
    """
    Raised when request or onboarding-step validation fails.

    `details` maps field names to the inline message shown under the field.
    """
    def __init__(self, message: str = 'Validation failed', details: dict | None = None):
        super().__init__(message, status_code=400, details=details)

    @classmethod
    def for_fields(cls, errors: dict[str, str]) -> 'ValidationError':
        return cls('; '.join(errors.values()), details=errors)


class AuthenticationError(APIException):
    """Raised when authentication fails."""
    def __init__(self, message: str = 'Authentication required'):
        super().__init__(message, status_code=401)


class InvalidCredentials(AuthenticationError):
    """Password does not match the stored hash."""
    def __init__(self, message: str = 'Invalid password'):
        super().__init__(message)


class PermissionDeniedError(APIException):
    """Raised when user lacks permission."""
    def __init__(self, message: str = 'Permission denied'):
        super().__init__(message, status_code=403)


class NotFoundError(APIException):
    """Raised when a resource is not found."""
    def __init__(self, message: str = 'Resource not found'):
        super().__init__(message, status_code=404)


class NoSuchAccount(NotFoundError):
    """No user record exists for the given email."""
    def __init__(self, message: str = 'No account found with this email'):
        super().__init__(message)


class ConflictError(APIException):
    """Raised when there's a conflict (e.g., duplicate resource)."""
    def __init__(self, message: str = 'Resource conflict'):
        super().__init__(message, status_code=409)


class DuplicateAccount(ConflictError):
    """Sign-up attempted with an email that already has an account."""
    def __init__(self, message: str = 'User already exists'):
        super().__init__(message)


class ExternalServiceError(APIException):
    """
    Failure reported by (or while reaching) the Paxos API.

    `upstream_status` is None when the request never got a response; callers
    relay it as a 500 in that case.
    """
    def __init__(
        self,
        message: str,
        upstream_status: int | None = None,
        payload: dict | None = None,
    ):
        self.upstream_status = upstream_status
        self.payload = payload or {}
        super().__init__(message, status_code=upstream_status or 500, details=self.payload)


class TransientPollError(Exception):
    """Network failure while polling verification status. Never shown to users."""
