"""
Paxos Services

Upstream operations shared by the proxy routes and onboarding submission.
"""
import logging

from apps.core.constants import VerificationStatus

from .client import PaxosClient, get_paxos_client

logger = logging.getLogger(__name__)

IDENTITIES_PATH = '/identity/identities'
ACCOUNTS_PATH = '/identity/accounts'


def get_identity(identity_id: str, client: PaxosClient | None = None) -> dict:
    client = client or get_paxos_client()
    return client.get(f'{IDENTITIES_PATH}/{identity_id}')


def create_identity(payload: dict, client: PaxosClient | None = None) -> dict:
    client = client or get_paxos_client()
    return client.post(IDENTITIES_PATH, payload)


def create_account(identity_id: str, create_profile: bool = True, client: PaxosClient | None = None) -> dict:
    """Open an account for the identity (Paxos wants the body wrapped in `account`)."""
    client = client or get_paxos_client()
    return client.post(ACCOUNTS_PATH, {
        'account': {'identity_id': identity_id},
        'create_profile': create_profile,
    })


def approve_identity_in_sandbox(identity_id: str, client: PaxosClient | None = None) -> dict:
    """
    Force an identity's verification to APPROVED.

    Only exists on sandbox hosts; callers must check the sandbox gate first.
    """
    client = client or get_paxos_client()
    logger.warning(f'Sandbox-approving identity {identity_id}')
    return client.put(f'{IDENTITIES_PATH}/{identity_id}/sandbox-status', {
        'id_verification_status': VerificationStatus.APPROVED.value,
        'sanctions_verification_status': VerificationStatus.APPROVED.value,
    })


def sandbox_deposit(
    profile_id: str,
    asset: str,
    amount: str,
    crypto_network: str | None = None,
    client: PaxosClient | None = None,
) -> dict:
    client = client or get_paxos_client()
    payload = {'asset': asset, 'amount': amount}
    if crypto_network:
        payload['crypto_network'] = crypto_network
    return client.post(f'/sandbox/profiles/{profile_id}/deposit', payload)
