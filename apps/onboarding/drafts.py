"""
Onboarding Draft

The in-progress KYC application. It is client-held: persisted in the
browser's signed session cookie, never in the database. Uploaded document
binaries live only for the request that carries them and are never persisted.
"""
import copy
import logging
from dataclasses import dataclass, field, fields

logger = logging.getLogger(__name__)

DRAFT_SESSION_KEY = 'onboarding_draft'

# Document payloads that only exist in memory
BINARY_DOCUMENT_FIELDS = ('front_file', 'back_file', 'selfie_file')


def default_person_info() -> dict:
    return {
        'first_name': '',
        'middle_name': '',
        'last_name': '',
        'date_of_birth': '',
        'email': '',
        'phone': '',
        'nationality': '',
    }


def default_institution_info() -> dict:
    return {
        'name': '',
        'entity_type': '',
        'registration_number': '',
        'country_of_incorporation': '',
        'description': '',
        'website': '',
    }


def default_address() -> dict:
    return {
        'street1': '',
        'street2': '',
        'city': '',
        'state': '',
        'postal_code': '',
        'country': 'US',
    }


def default_tax_info() -> dict:
    return {
        'tax_id_type': 'SSN',
        'tax_id': '',
        'tax_country': 'US',
    }


def default_documents() -> dict:
    return {
        'document_type': 'PASSPORT',
        'document_ids': [],
        'skipped': False,
    }


@dataclass
class OnboardingDraft:
    current_step: int = 1
    identity_type: str = 'PERSON'
    person_info: dict = field(default_factory=default_person_info)
    institution_info: dict = field(default_factory=default_institution_info)
    address: dict = field(default_factory=default_address)
    tax_info: dict = field(default_factory=default_tax_info)
    documents: dict = field(default_factory=default_documents)
    terms_accepted: bool = False
    identity_id: str | None = None
    account_id: str | None = None
    profile_id: str | None = None

    def to_dict(self) -> dict:
        """Persistable form; binary document payloads are left out."""
        data = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if f.name == 'documents':
                value = {k: v for k, v in value.items() if k not in BINARY_DOCUMENT_FIELDS}
            data[f.name] = copy.deepcopy(value)
        return data

    @classmethod
    def from_dict(cls, data: dict | None) -> 'OnboardingDraft':
        """
        Rebuild a draft from its persisted form.

        Unknown keys are ignored; sections are merged over their defaults so
        a draft saved before a field existed still loads.
        """
        draft = cls()
        if not data:
            return draft

        for f in fields(cls):
            if f.name not in data:
                continue
            value = data[f.name]
            current = getattr(draft, f.name)
            if isinstance(current, dict) and isinstance(value, dict):
                current.update({k: v for k, v in value.items() if k not in BINARY_DOCUMENT_FIELDS})
            else:
                setattr(draft, f.name, value)
        return draft

    def has_upload(self, side: str) -> bool:
        """True when `side` (front/back/selfie) was uploaded in this or an earlier request."""
        if self.documents.get(f'{side}_file'):
            return True
        return any(ref.startswith(f'{side}:') for ref in self.documents.get('document_ids', []))


class SessionDraftStore:
    """
    Persists the draft in request.session.

    Usage:
        store = SessionDraftStore(request)
        draft = store.load()
        ...
        store.save(draft)
    """

    def __init__(self, request):
        self.session = request.session

    def load(self) -> OnboardingDraft:
        return OnboardingDraft.from_dict(self.session.get(DRAFT_SESSION_KEY))

    def save(self, draft: OnboardingDraft) -> None:
        self.session[DRAFT_SESSION_KEY] = draft.to_dict()

    def clear(self) -> None:
        if self.session.pop(DRAFT_SESSION_KEY, None) is not None:
            logger.debug('Cleared onboarding draft')
