"""
Onboarding Step Validators

Each validator takes the draft and returns {field: message}; an empty dict
means the step may continue.
"""
from datetime import date

from django.utils.dateparse import parse_date

from .constants import DOCUMENT_TYPES, IDENTITY_TYPES, TAX_ID_TYPES, Step
from .drafts import OnboardingDraft

REQUIRED = 'This field is required'

PERSON_REQUIRED_FIELDS = ('first_name', 'last_name', 'date_of_birth', 'email')
INSTITUTION_REQUIRED_FIELDS = ('name', 'entity_type', 'country_of_incorporation')
ADDRESS_REQUIRED_FIELDS = ('street1', 'city', 'state', 'postal_code', 'country')


def _blank(value) -> bool:
    return not str(value or '').strip()


def _missing(section: dict, required: tuple) -> dict:
    return {name: REQUIRED for name in required if _blank(section.get(name))}


def validate_identity_type(draft: OnboardingDraft) -> dict:
    if draft.identity_type not in IDENTITY_TYPES:
        return {'identity_type': 'Choose an individual or institution account'}
    return {}


def validate_personal_info(draft: OnboardingDraft) -> dict:
    if draft.identity_type == 'INSTITUTION':
        return _missing(draft.institution_info, INSTITUTION_REQUIRED_FIELDS)

    errors = _missing(draft.person_info, PERSON_REQUIRED_FIELDS)
    if 'date_of_birth' not in errors:
        try:
            born = parse_date(str(draft.person_info['date_of_birth']))
        except ValueError:
            born = None
        if born is None:
            errors['date_of_birth'] = 'Enter a valid date (YYYY-MM-DD)'
        elif born > date.today():
            errors['date_of_birth'] = 'Date of birth cannot be in the future'
    if 'email' not in errors and '@' not in draft.person_info['email']:
        errors['email'] = 'Enter a valid email address'
    return errors


def validate_address(draft: OnboardingDraft) -> dict:
    return _missing(draft.address, ADDRESS_REQUIRED_FIELDS)


def validate_tax_details(draft: OnboardingDraft) -> dict:
    tax_id_type = draft.tax_info.get('tax_id_type')
    if tax_id_type not in TAX_ID_TYPES:
        return {'tax_id_type': f"Tax ID type must be one of {', '.join(TAX_ID_TYPES)}"}
    if tax_id_type == 'NONE':
        return {}
    return _missing(
        {'tax_id': draft.tax_info.get('tax_id'), 'tax_country': draft.tax_info.get('tax_country')},
        ('tax_id', 'tax_country'),
    )


def validate_documents(draft: OnboardingDraft) -> dict:
    errors = {}
    if draft.documents.get('document_type') not in DOCUMENT_TYPES:
        errors['document_type'] = f"Document type must be one of {', '.join(DOCUMENT_TYPES)}"
    if not draft.documents.get('skipped') and not draft.has_upload('front'):
        errors['front_file'] = 'Upload the front of your document'
    return errors


def validate_review(draft: OnboardingDraft) -> dict:
    if draft.terms_accepted is not True:
        return {'terms_accepted': 'You must accept the terms to submit'}
    return {}


STEP_VALIDATORS = {
    Step.IDENTITY_TYPE: validate_identity_type,
    Step.PERSONAL_INFO: validate_personal_info,
    Step.ADDRESS: validate_address,
    Step.TAX_DETAILS: validate_tax_details,
    Step.DOCUMENTS: validate_documents,
    Step.REVIEW: validate_review,
}


def validate_step(step: Step, draft: OnboardingDraft) -> dict:
    validator = STEP_VALIDATORS.get(step)
    if validator is None:
        return {}
    return validator(draft)
