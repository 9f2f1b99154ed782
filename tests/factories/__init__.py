"""
Factory Boy Factories for Aureum Models

Import all factories here for easy access in tests.
"""
from tests.factories.core import DEFAULT_PASSWORD, UserFactory, issue_session_token

__all__ = [
    'DEFAULT_PASSWORD',
    'UserFactory',
    'issue_session_token',
]
