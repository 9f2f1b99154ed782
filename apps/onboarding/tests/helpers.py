"""
Draft builders shared by the onboarding tests.
"""
from django.core.files.uploadedfile import SimpleUploadedFile

from apps.onboarding.drafts import OnboardingDraft

PERSON = {
    'first_name': 'Alice',
    'middle_name': '',
    'last_name': 'Anders',
    'date_of_birth': '1990-04-12',
    'email': 'alice@test.com',
    'phone': '',
    'nationality': 'US',
}

ADDRESS = {
    'street1': '1 Main St',
    'street2': '',
    'city': 'Springfield',
    'state': 'IL',
    'postal_code': '62701',
    'country': 'US',
}

TAX = {'tax_id_type': 'SSN', 'tax_id': '123-45-6789', 'tax_country': 'US'}


def front_upload(name='passport.jpg'):
    return SimpleUploadedFile(name, b'\xff\xd8\xff jpeg bytes', content_type='image/jpeg')


def complete_draft(**overrides) -> OnboardingDraft:
    """A draft with every step filled in and valid."""
    draft = OnboardingDraft(
        current_step=6,
        person_info=dict(PERSON),
        address=dict(ADDRESS),
        tax_info=dict(TAX),
        documents={'document_type': 'PASSPORT', 'document_ids': ['front:passport.jpg'], 'skipped': False},
        terms_accepted=True,
    )
    for name, value in overrides.items():
        setattr(draft, name, value)
    return draft
