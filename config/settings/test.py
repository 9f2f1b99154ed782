"""
Django Test Settings for Aureum Backend

Uses SQLite in-memory database for fast testing.
"""
from .base import *  # noqa: F401, F403

# =============================================================================
# Debug Mode for Tests
# =============================================================================

DEBUG = False

ALLOWED_HOSTS = ['testserver', 'localhost']

# =============================================================================
# Database - SQLite in-memory
# =============================================================================

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

# =============================================================================
# Speed Optimizations for Tests
# =============================================================================

# Use faster password hasher for tests
PASSWORD_HASHERS = [
    'django.contrib.auth.hashers.MD5PasswordHasher',
]

# Disable logging during tests
LOGGING = {
    'version': 1,
    'disable_existing_loggers': True,
    'handlers': {
        'null': {
            'class': 'logging.NullHandler',
        },
    },
    'root': {
        'handlers': ['null'],
        'level': 'CRITICAL',
    },
}

# =============================================================================
# Session Token Test Configuration
# =============================================================================

SESSION_TOKEN_SECRET = 'test-session-secret-key-for-testing-purposes-only'
SESSION_TOKEN_COOKIE_NAME = 'aureum.session-token'
SESSION_TOKEN_COOKIE_SECURE = False

# =============================================================================
# Paxos Mock Configuration
# =============================================================================

PAXOS_BASE_URL = 'https://api.sandbox.paxos.com/v2'
PAXOS_AUTH_URL = 'https://oauth.sandbox.paxos.com/oauth2/token'
PAXOS_CLIENT_ID = 'test-client-id'
PAXOS_CLIENT_SECRET = 'test-client-secret'

SANDBOX_TOOLS_ENABLED = True

ONBOARDING_POLL_INTERVAL = 0.01
ONBOARDING_POLL_MAX_DURATION = 5

# =============================================================================
# REST Framework Test Settings
# =============================================================================

REST_FRAMEWORK = {
    **REST_FRAMEWORK,  # noqa: F405
    'DEFAULT_THROTTLE_RATES': {
        'auth': '1000/min',
    },
}

# =============================================================================
# CORS - Allow all for tests
# =============================================================================

CORS_ALLOW_ALL_ORIGINS = True
