"""
Onboarding Constants

Wizard steps and the values each step accepts.
"""
from enum import Enum


class Step(str, Enum):
    """Wizard states, in order. Values double as URL slugs under /onboarding/."""
    WELCOME = 'welcome'
    IDENTITY_TYPE = 'identity'
    PERSONAL_INFO = 'personal-info'
    ADDRESS = 'address'
    TAX_DETAILS = 'tax-details'
    DOCUMENTS = 'documents'
    REVIEW = 'review'
    PENDING = 'pending'
    APPROVED = 'approved'
    DENIED = 'denied'


# Steps that carry draft data; their position + 1 is the draft's step index
DRAFT_STEPS = (
    Step.IDENTITY_TYPE,
    Step.PERSONAL_INFO,
    Step.ADDRESS,
    Step.TAX_DETAILS,
    Step.DOCUMENTS,
    Step.REVIEW,
)

IDENTITY_TYPES = ('PERSON', 'INSTITUTION')
TAX_ID_TYPES = ('SSN', 'ITIN', 'EIN', 'FOREIGN_TIN', 'NONE')
DOCUMENT_TYPES = ('PASSPORT', 'DRIVERS_LICENSE', 'NATIONAL_ID', 'RESIDENCE_PERMIT')
DOCUMENT_SIDES = ('front', 'back', 'selfie')


def step_index(step: Step) -> int:
    """1-based draft index of a data step."""
    return DRAFT_STEPS.index(step) + 1


def step_for_index(index: int) -> Step:
    index = min(max(index, 1), len(DRAFT_STEPS))
    return DRAFT_STEPS[index - 1]
