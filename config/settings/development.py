"""
Django Development Settings

Local runs against the Paxos sandbox, with the sandbox shortcuts
(instant identity approval, test deposits) switched on.
"""
import copy

from .base import *  # noqa: F401, F403

# =============================================================================
# Debug Settings
# =============================================================================

DEBUG = True

ALLOWED_HOSTS = ['localhost', '127.0.0.1', '0.0.0.0']

# =============================================================================
# Frontend - Wizard pages served from the local dev server
# =============================================================================

CORS_ALLOWED_ORIGINS = [
    'http://localhost:3000',
    'http://127.0.0.1:3000',
]

# Session token and onboarding draft travel as cookies over plain http
SESSION_TOKEN_COOKIE_SECURE = False
SESSION_COOKIE_SECURE = False

# =============================================================================
# Database - Local Postgres without SSL
# =============================================================================

DATABASES['default']['OPTIONS']['sslmode'] = config(  # noqa: F405
    'DB_SSLMODE',
    default='disable'
)

# =============================================================================
# Paxos - Sandbox only
# =============================================================================

PAXOS_BASE_URL = config('PAXOS_BASE_URL', default='https://api.sandbox.paxos.com/v2')  # noqa: F405
PAXOS_AUTH_URL = config('PAXOS_AUTH_URL', default='https://oauth.sandbox.paxos.com/oauth2/token')  # noqa: F405
SANDBOX_TOOLS_ENABLED = config('SANDBOX_TOOLS_ENABLED', default=True, cast=bool)  # noqa: F405

# Sandbox identities settle within seconds
ONBOARDING_POLL_INTERVAL = config('ONBOARDING_POLL_INTERVAL', default=2.0, cast=float)  # noqa: F405

# =============================================================================
# Logging - Verbose for our apps, quiet for the HTTP client
# =============================================================================

LOGGING = copy.deepcopy(LOGGING)  # noqa: F405  # type: ignore[name-defined]
LOGGING['root']['level'] = 'DEBUG'  # type: ignore[index]
LOGGING['loggers']['django']['level'] = 'INFO'  # type: ignore[index]
LOGGING['loggers']['httpx'] = {  # type: ignore[index]
    'handlers': ['console'],
    'level': 'WARNING',
    'propagate': False,
}
LOGGING['loggers']['httpcore'] = LOGGING['loggers']['httpx']  # type: ignore[index]
