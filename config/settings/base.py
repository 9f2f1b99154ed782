"""
Django Base Settings for Aureum Backend

This file contains all shared settings used across environments.
Environment-specific settings are in development.py and production.py.
"""
from pathlib import Path

from decouple import Csv, config

# Build paths inside the project like this: BASE_DIR / 'subdir'
BASE_DIR = Path(__file__).resolve().parent.parent.parent

# =============================================================================
# Core Settings
# =============================================================================

SECRET_KEY = config('DJANGO_SECRET_KEY', default='django-insecure-change-me-in-production')

DEBUG = config('DJANGO_DEBUG', default=True, cast=bool)

ALLOWED_HOSTS = config('ALLOWED_HOSTS', default='localhost,127.0.0.1', cast=Csv())

# =============================================================================
# Application Definition
# =============================================================================

INSTALLED_APPS = [
    'django.contrib.contenttypes',
    'django.contrib.auth',
    'django.contrib.sessions',

    'rest_framework',
    'corsheaders',

    # Local apps
    'apps.core',
    'apps.auth_api',
    'apps.onboarding',  # KYC wizard, status poller
    'apps.paxos',       # Paxos API proxy routes
    'apps.dashboard',
]

MIDDLEWARE = [
    'corsheaders.middleware.CorsMiddleware',
    'django.middleware.security.SecurityMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.common.CommonMiddleware',
    'apps.core.middleware.RouteAuthorizationMiddleware',
]

ROOT_URLCONF = 'config.urls'

WSGI_APPLICATION = 'config.wsgi.application'
ASGI_APPLICATION = 'config.asgi.application'

# Paths are matched without a trailing slash (/onboarding/welcome, /sign-in)
APPEND_SLASH = False

# =============================================================================
# Database
# =============================================================================

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.postgresql',
        'NAME': config('DB_NAME', default='aureum'),
        'USER': config('DB_USER', default='postgres'),
        'PASSWORD': config('DB_PASSWORD', default=''),
        'HOST': config('DB_HOST', default='localhost'),
        'PORT': config('DB_PORT', default='5432'),
        'OPTIONS': {
            'sslmode': config('DB_SSLMODE', default='require'),
        },
    }
}

# =============================================================================
# Browser Session (onboarding draft storage)
# The draft lives in a signed cookie so it stays client-held across reloads.
# =============================================================================

SESSION_ENGINE = 'django.contrib.sessions.backends.signed_cookies'
SESSION_COOKIE_NAME = 'aureum.onboarding'
SESSION_COOKIE_HTTPONLY = True
SESSION_COOKIE_SAMESITE = 'Lax'

# =============================================================================
# Session Token (signed JWT cookie consulted by the route middleware)
# =============================================================================

SESSION_TOKEN_SECRET = config('SESSION_TOKEN_SECRET', default='dev-secret-change-me')
SESSION_TOKEN_ALGORITHM = 'HS256'
SESSION_TOKEN_MAX_AGE = config('SESSION_TOKEN_MAX_AGE', default=60 * 60 * 24 * 30, cast=int)
SESSION_TOKEN_COOKIE_NAME = config('SESSION_TOKEN_COOKIE_NAME', default='aureum.session-token')
SESSION_TOKEN_COOKIE_SECURE = config('SESSION_TOKEN_COOKIE_SECURE', default=False, cast=bool)

# Dotted path to the credential store implementation
USER_REPOSITORY_CLASS = config(
    'USER_REPOSITORY_CLASS',
    default='apps.core.repositories.DjangoUserRepository'
)

# =============================================================================
# Paxos Configuration
# =============================================================================

PAXOS_BASE_URL = config('PAXOS_BASE_URL', default='https://api.sandbox.paxos.com/v2')
PAXOS_AUTH_URL = config('PAXOS_AUTH_URL', default='https://oauth.sandbox.paxos.com/oauth2/token')
PAXOS_CLIENT_ID = config('PAXOS_CLIENT_ID', default='')
PAXOS_CLIENT_SECRET = config('PAXOS_CLIENT_SECRET', default='')
PAXOS_TIMEOUT = config('PAXOS_TIMEOUT', default=15.0, cast=float)
PAXOS_SCOPES = config(
    'PAXOS_SCOPES',
    default=','.join([
        'funding:read_profile',
        'funding:write_profile',
        'transfer:read_transfer',
        'transfer:read_deposit_address',
        'transfer:write_deposit_address',
        'transfer:write_internal_transfer',
        'transfer:write_crypto_withdrawal',
        'transfer:write_fiat_withdrawal',
        'transfer:read_fiat_account',
        'transfer:write_fiat_account',
        'transfer:read_fiat_deposit_instructions',
        'transfer:write_fiat_deposit_instructions',
        'identity:read_identity',
        'identity:write_identity',
        'identity:read_account',
        'identity:write_account',
        'exchange:read_order',
        'exchange:write_order',
        'exchange:read_quote',
        'exchange:write_quote_execution',
        'conversion:read_conversion_stablecoin',
        'conversion:write_conversion_stablecoin',
    ]),
    cast=Csv()
)

# Instant identity approval and sandbox deposits. Only honoured against a
# sandbox PAXOS_BASE_URL; production.py forces this off.
SANDBOX_TOOLS_ENABLED = config('SANDBOX_TOOLS_ENABLED', default=True, cast=bool)

# =============================================================================
# Onboarding
# =============================================================================

ONBOARDING_POLL_INTERVAL = config('ONBOARDING_POLL_INTERVAL', default=5.0, cast=float)
ONBOARDING_POLL_MAX_DURATION = config('ONBOARDING_POLL_MAX_DURATION', default=300, cast=int)

# =============================================================================
# REST Framework
# =============================================================================

REST_FRAMEWORK = {
    'DEFAULT_AUTHENTICATION_CLASSES': [
        'apps.core.authentication.SessionTokenAuthentication',
    ],
    'DEFAULT_PERMISSION_CLASSES': [
        'apps.core.permissions.IsAuthenticated',
    ],
    'DEFAULT_RENDERER_CLASSES': [
        'rest_framework.renderers.JSONRenderer',
    ],
    'DEFAULT_PARSER_CLASSES': [
        'rest_framework.parsers.JSONParser',
        'rest_framework.parsers.FormParser',
        'rest_framework.parsers.MultiPartParser',
    ],
    'DEFAULT_THROTTLE_RATES': {
        'auth': config('AUTH_THROTTLE_RATE', default='20/min'),
    },
    'EXCEPTION_HANDLER': 'apps.core.exceptions.custom_exception_handler',
    'UNAUTHENTICATED_USER': None,
}

# =============================================================================
# CORS Configuration
# =============================================================================

CORS_ALLOWED_ORIGINS = config(
    'CORS_ALLOWED_ORIGINS',
    default='http://localhost:3000',
    cast=Csv()
)

CORS_ALLOW_CREDENTIALS = True

# =============================================================================
# Internationalization
# =============================================================================

LANGUAGE_CODE = 'en-us'
TIME_ZONE = 'UTC'
USE_I18N = False
USE_TZ = True

# =============================================================================
# Static files
# =============================================================================

STATIC_URL = '/static/'

# =============================================================================
# Logging
# =============================================================================

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'verbose': {
            'format': '{levelname} {asctime} {module} {message}',
            'style': '{',
        },
        'simple': {
            'format': '{levelname} {message}',
            'style': '{',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'verbose',
        },
    },
    'root': {
        'handlers': ['console'],
        'level': 'INFO',
    },
    'loggers': {
        'django': {
            'handlers': ['console'],
            'level': config('DJANGO_LOG_LEVEL', default='INFO'),
            'propagate': False,
        },
        'apps': {
            'handlers': ['console'],
            'level': 'DEBUG',
            'propagate': False,
        },
    },
}

# =============================================================================
# Default primary key field type
# =============================================================================

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'
