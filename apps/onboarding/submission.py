"""
Onboarding Submission

Turns a completed draft into Paxos objects:
1. Create the identity (a 409 reuses the existing identity)
2. Approve it instantly when sandbox tools are enabled
3. Open an account with a profile (a 409 means it already exists)
4. Link the identifiers to the user and reissue the session
"""
import logging
import random
import uuid
from dataclasses import dataclass

from rest_framework import status

from apps.core.authentication import IssuedSession, SessionClaims, SessionIssuer, get_session_issuer
from apps.core.constants import OnboardingStatus
from apps.core.exceptions import ExternalServiceError, PermissionDeniedError
from apps.core.permissions import sandbox_tools_enabled
from apps.paxos import services as paxos_services
from apps.paxos.client import PaxosClient, get_paxos_client

from .countries import to_alpha3
from .drafts import OnboardingDraft

logger = logging.getLogger(__name__)


def random_ssn() -> str:
    """Random well-formed SSN for sandbox identities submitted without a tax id."""
    area = random.randint(1, 899)
    group = random.randint(1, 99)
    serial = random.randint(1, 9999)
    return f'{area:03d}-{group:02d}-{serial:04d}'


def _cip_id_type(tax_id_type: str) -> str:
    if tax_id_type in ('NONE', 'FOREIGN_TIN'):
        return 'SSN'
    return tax_id_type


def _address_payload(address: dict) -> dict:
    payload = {
        'country': to_alpha3(address.get('country', '')),
        'address1': address.get('street1', ''),
        'city': address.get('city', ''),
        'province': address.get('state', ''),
        'zip_code': address.get('postal_code', ''),
    }
    if address.get('street2'):
        payload['address2'] = address['street2']
    return payload


def _person_details(draft: OnboardingDraft, cip_id: str, cip_country: str) -> dict:
    person = draft.person_info
    details = {
        'verifier_type': 'PAXOS',
        'first_name': person.get('first_name', ''),
        'last_name': person.get('last_name', ''),
        'date_of_birth': person.get('date_of_birth', ''),
        'email': person.get('email', ''),
        'nationality': to_alpha3(person.get('nationality') or draft.address.get('country', '')),
        'cip_id': cip_id,
        'cip_id_type': _cip_id_type(draft.tax_info.get('tax_id_type', 'SSN')),
        'cip_id_country': cip_country,
        'address': _address_payload(draft.address),
    }
    if person.get('middle_name'):
        details['middle_name'] = person['middle_name']
    if person.get('phone'):
        details['phone_number'] = person['phone']
    return details


def _institution_details(draft: OnboardingDraft, cip_id: str, cip_country: str) -> dict:
    institution = draft.institution_info
    details = {
        'name': institution.get('name', ''),
        'institution_type': institution.get('entity_type', ''),
        'cip_id': cip_id,
        'cip_id_type': 'EIN',
        'cip_id_country': cip_country,
        'incorporation_country': to_alpha3(institution.get('country_of_incorporation', '')),
        'business_address': _address_payload(draft.address),
    }
    for name in ('registration_number', 'description', 'website'):
        if institution.get(name):
            details[name] = institution[name]
    return details


def build_identity_payload(draft: OnboardingDraft, ref_id: str | None = None) -> dict:
    """
    Identity creation body for Paxos.

    Countries are sent as alpha-3. A US CIP country always carries
    tax_details (Paxos rejects tax_details_not_required for USA).
    """
    tax_id = (draft.tax_info.get('tax_id') or '').strip()
    cip_id = tax_id or random_ssn()
    cip_country = to_alpha3(draft.tax_info.get('tax_country') or draft.address.get('country', ''))

    payload = {'ref_id': ref_id or str(uuid.uuid4())}
    if draft.identity_type == 'INSTITUTION':
        payload['institution_details'] = _institution_details(draft, cip_id, cip_country)
    else:
        payload['person_details'] = _person_details(draft, cip_id, cip_country)

    if tax_id:
        payload['tax_details'] = [{'tax_payer_country': cip_country, 'tax_payer_id': tax_id}]
    elif cip_country == 'USA':
        payload['tax_details'] = [{'tax_payer_country': 'USA', 'tax_payer_id': cip_id}]
    else:
        payload['tax_details_not_required'] = True
    return payload


def _existing_identity_id(payload: dict) -> str | None:
    for source in (payload, payload.get('details')):
        if not isinstance(source, dict):
            continue
        existing = (source.get('meta') or {}).get('existing') or {}
        if existing.get('id'):
            return existing['id']
    return None


@dataclass(frozen=True)
class SubmissionResult:
    identity_id: str
    account_id: str | None
    profile_id: str | None
    session: IssuedSession


def submit_onboarding(
    draft: OnboardingDraft,
    claims: SessionClaims,
    client: PaxosClient | None = None,
    issuer: SessionIssuer | None = None,
) -> SubmissionResult:
    """
    Create the identity and account for a completed draft.

    Raises:
        ExternalServiceError: Paxos rejected the identity or account
    """
    client = client or get_paxos_client()
    issuer = issuer or get_session_issuer()

    try:
        identity = paxos_services.create_identity(build_identity_payload(draft), client=client)
        identity_id = identity.get('id')
    except ExternalServiceError as e:
        if e.upstream_status != status.HTTP_409_CONFLICT:
            raise
        identity_id = _existing_identity_id(e.payload)
        if not identity_id:
            raise ExternalServiceError(
                'Identity already exists but could not retrieve ID',
                upstream_status=e.upstream_status,
                payload=e.payload,
            ) from e
        logger.info(f'Reusing existing identity {identity_id}')

    if sandbox_tools_enabled():
        try:
            paxos_services.approve_identity_in_sandbox(identity_id, client=client)
        except ExternalServiceError as e:
            logger.warning(f'Sandbox approval failed for identity {identity_id}: {e.message}')

    account_id = None
    profile_id = None
    try:
        account = paxos_services.create_account(identity_id, client=client)
        account_id = account.get('id')
        profile_id = account.get('profile_id')
    except ExternalServiceError as e:
        if e.upstream_status != status.HTTP_409_CONFLICT:
            raise
        logger.info(f'Account already exists for identity {identity_id}')

    session = issuer.resync(
        claims,
        onboarding_status=OnboardingStatus.PROFILE_CREATED.value,
        identity_id=identity_id,
        account_id=account_id,
        profile_id=profile_id,
    )
    return SubmissionResult(
        identity_id=identity_id,
        account_id=account_id,
        profile_id=profile_id,
        session=session,
    )


def approve_instantly(identity_id: str, client: PaxosClient | None = None) -> dict:
    """
    Sandbox shortcut that marks an identity APPROVED without real verification.

    Raises:
        PermissionDeniedError: sandbox tools are off or Paxos is not a sandbox host
    """
    if not sandbox_tools_enabled():
        logger.warning(f'Refused instant approval for identity {identity_id}')
        raise PermissionDeniedError('Sandbox tools are disabled in this environment')
    return paxos_services.approve_identity_in_sandbox(identity_id, client=client)
