"""
Custom Throttle Classes for Aureum Backend

Provides rate limiting for security-sensitive endpoints.
"""
from rest_framework.throttling import AnonRateThrottle


class AuthRateThrottle(AnonRateThrottle):
    """
    Rate limiting for authentication endpoints.

    Applied to: sign-in, sign-up
    Prevents brute-force attacks on auth endpoints.
    """
    scope = 'auth'
