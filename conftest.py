"""
Pytest Configuration for Aureum Backend Tests

Key Features:
- API client fixtures, signed in through a real session cookie
- A fake Paxos API served through httpx.MockTransport
- factory_boy factories for users
"""
import httpx
import pytest
from django.conf import settings
from rest_framework.test import APIClient

from apps.core.repositories import InMemoryUserRepository
from apps.paxos.client import PaxosClient
from tests.factories import UserFactory, issue_session_token
from tests.fakes import FakePaxosAPI, add_onboarding_routes


# =============================================================================
# Fake Paxos API
# =============================================================================

@pytest.fixture
def fake_paxos(mocker):
    """Route every Paxos call in the code under test to a FakePaxosAPI."""
    fake = FakePaxosAPI()
    client = PaxosClient(transport=httpx.MockTransport(fake))
    mocker.patch('apps.paxos.client._client', new=client)
    fake.client = client
    return fake


@pytest.fixture
def identity_status():
    """Mutable verification status served by the fake identity endpoint."""
    return {'summary_status': 'PENDING'}


@pytest.fixture
def paxos_onboarding(fake_paxos, identity_status):
    """Fake Paxos routes for a person identity moving through verification."""
    return add_onboarding_routes(fake_paxos, identity_status)


# =============================================================================
# Users
# =============================================================================

@pytest.fixture
def memory_repository():
    """Dict-backed credential store for tests that do not need the database."""
    return InMemoryUserRepository()


@pytest.fixture
def user(db):
    return UserFactory()


# =============================================================================
# API Client Fixtures
# =============================================================================

@pytest.fixture
def api_client():
    """Basic API client without authentication."""
    return APIClient()


@pytest.fixture
def sign_in_as(api_client):
    """
    Put a freshly issued session cookie for `user` on the API client.

    Usage:
        client = sign_in_as(user)
    """
    def _sign_in(user) -> APIClient:
        api_client.cookies[settings.SESSION_TOKEN_COOKIE_NAME] = issue_session_token(user)
        return api_client
    return _sign_in


@pytest.fixture
def authenticated_client(sign_in_as, user):
    """API client signed in as a new (NOT_STARTED) user."""
    return sign_in_as(user), user
