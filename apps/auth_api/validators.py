"""
Sign-up form validation.

Messages are the inline texts shown under each field.
"""
from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.validators import validate_email

from apps.core.constants import PASSWORD_MIN_LENGTH

PASSWORD_TOO_SHORT = f'Password must be at least {PASSWORD_MIN_LENGTH} characters'
PASSWORDS_DO_NOT_MATCH = 'Passwords do not match'
EMAIL_REQUIRED = 'Email is required'
EMAIL_INVALID = 'Enter a valid email address'


def inline_sign_up_errors(data: dict) -> dict[str, str]:
    """
    Errors to show while the user is still typing.

    Empty fields are not flagged yet; a short password or a mismatched
    confirmation is.
    """
    password = data.get('password') or ''
    confirm_password = data.get('confirm_password') or ''
    errors = {}

    if 0 < len(password) < PASSWORD_MIN_LENGTH:
        errors['password'] = PASSWORD_TOO_SHORT

    if confirm_password and confirm_password != password:
        errors['confirm_password'] = PASSWORDS_DO_NOT_MATCH

    return errors


def validate_sign_up(data: dict) -> dict[str, str]:
    """Errors that block account creation. Empty dict means submit is allowed."""
    email = (data.get('email') or '').strip()
    password = data.get('password') or ''
    confirm_password = data.get('confirm_password')
    errors = {}

    if not email:
        errors['email'] = EMAIL_REQUIRED
    else:
        try:
            validate_email(email)
        except DjangoValidationError:
            errors['email'] = EMAIL_INVALID

    if len(password) < PASSWORD_MIN_LENGTH:
        errors['password'] = PASSWORD_TOO_SHORT

    if confirm_password is None or confirm_password != password:
        errors['confirm_password'] = PASSWORDS_DO_NOT_MATCH

    return errors
