"""
Onboarding State Machine

welcome -> identity -> personal-info -> address -> tax-details -> documents
-> review -> pending -> {approved | denied}

Forward moves need the current step to validate; backward moves are always
allowed and keep entered data.
"""
import logging

from apps.core.constants import VerificationStatus
from apps.core.exceptions import ValidationError

from .constants import DOCUMENT_SIDES, DRAFT_STEPS, Step, step_for_index, step_index
from .drafts import OnboardingDraft
from .validators import validate_step

logger = logging.getLogger(__name__)

TRUTHY = (True, 'true', 'True', 'on', '1', 1)


class OnboardingWizard:
    """
    Drives one user's draft through the wizard.

    Usage:
        wizard = OnboardingWizard(store.load())
        next_step = wizard.submit_step(Step.ADDRESS, request.data)
        store.save(wizard.draft)
    """

    def __init__(self, draft: OnboardingDraft | None = None):
        self.draft = draft or OnboardingDraft()

    # =========================================================================
    # Navigation
    # =========================================================================

    def start(self) -> Step:
        return Step.IDENTITY_TYPE

    def next_step(self, step: Step) -> Step:
        if step == Step.WELCOME:
            return Step.IDENTITY_TYPE
        if step == Step.REVIEW:
            return Step.PENDING
        return DRAFT_STEPS[DRAFT_STEPS.index(step) + 1]

    def previous_step(self, step: Step) -> Step:
        if step in (Step.WELCOME, Step.IDENTITY_TYPE):
            return Step.WELCOME
        if step not in DRAFT_STEPS:
            return Step.REVIEW
        return DRAFT_STEPS[DRAFT_STEPS.index(step) - 1]

    def back(self, step: Step) -> Step:
        """Previous step. Data already entered is kept."""
        previous = self.previous_step(step)
        if previous in DRAFT_STEPS:
            self.draft.current_step = step_index(previous)
        return previous

    def can_enter(self, step: Step) -> bool:
        """A step is reachable once every earlier data step validates."""
        if step == Step.WELCOME:
            return True
        if step in (Step.PENDING, Step.APPROVED, Step.DENIED):
            return bool(self.draft.identity_id)
        return self.first_incomplete_step(before=step) is None

    def first_incomplete_step(self, before: Step | None = None) -> Step | None:
        for step in DRAFT_STEPS:
            if step == before:
                return None
            if validate_step(step, self.draft):
                return step
        return None

    def current(self) -> Step:
        return step_for_index(self.draft.current_step)

    # =========================================================================
    # Data entry
    # =========================================================================

    def save_step(self, step: Step, data) -> None:
        """Merge entered data without validating or moving."""
        if step not in DRAFT_STEPS:
            raise ValidationError(f'Nothing to save on {step.value}')
        self._merge(step, data)

    def submit_step(self, step: Step, data) -> Step:
        """
        Merge `data` into the draft, validate, and advance.

        Raises:
            ValidationError: step not reachable yet, or its fields are invalid.
                Entered data stays merged either way.
        """
        if step not in DRAFT_STEPS:
            raise ValidationError(f'{step.value} does not accept data')

        self._merge(step, data)

        if not self.can_enter(step):
            blocking = self.first_incomplete_step()
            raise ValidationError(
                f'Complete {blocking.value} first',
                details={'step': blocking.value},
            )

        errors = validate_step(step, self.draft)
        if errors:
            raise ValidationError.for_fields(errors)

        following = self.next_step(step)
        if following in DRAFT_STEPS:
            self.draft.current_step = max(self.draft.current_step, step_index(following))
        return following

    def skip_documents(self) -> Step:
        """Documents are optional; keep the chosen type, drop any uploads."""
        self.draft.documents.update({
            'document_ids': [],
            'skipped': True,
            **{f'{side}_file': None for side in DOCUMENT_SIDES},
        })
        self.draft.current_step = max(self.draft.current_step, step_index(Step.REVIEW))
        return Step.REVIEW

    def _merge(self, step: Step, data) -> None:
        data = data or {}

        if step == Step.IDENTITY_TYPE:
            if 'identity_type' in data:
                self.draft.identity_type = data.get('identity_type')
        elif step == Step.PERSONAL_INFO:
            section = (
                self.draft.institution_info
                if self.draft.identity_type == 'INSTITUTION'
                else self.draft.person_info
            )
            self._update_section(section, data)
        elif step == Step.ADDRESS:
            self._update_section(self.draft.address, data)
        elif step == Step.TAX_DETAILS:
            self._update_section(self.draft.tax_info, data)
        elif step == Step.DOCUMENTS:
            self._merge_documents(data)
        elif step == Step.REVIEW:
            if 'terms_accepted' in data:
                self.draft.terms_accepted = data.get('terms_accepted') in TRUTHY

    def _update_section(self, section: dict, data) -> None:
        for name in section:
            if name in data:
                section[name] = data.get(name)

    def _merge_documents(self, data) -> None:
        documents = self.draft.documents
        if 'document_type' in data:
            documents['document_type'] = data.get('document_type')

        for side in DOCUMENT_SIDES:
            upload = data.get(f'{side}_file')
            if not upload:
                continue
            documents[f'{side}_file'] = upload
            reference = f"{side}:{getattr(upload, 'name', side)}"
            documents['document_ids'] = [
                ref for ref in documents.get('document_ids', [])
                if not ref.startswith(f'{side}:')
            ] + [reference]
            documents['skipped'] = False

    # =========================================================================
    # Submission and outcome
    # =========================================================================

    def mark_submitted(
        self,
        identity_id: str,
        account_id: str | None = None,
        profile_id: str | None = None,
    ) -> Step:
        self.draft.identity_id = identity_id
        self.draft.account_id = account_id or self.draft.account_id
        self.draft.profile_id = profile_id or self.draft.profile_id
        logger.info(f'Onboarding submitted for identity {identity_id}')
        return Step.PENDING

    def resolve(self, verification_status: str) -> Step:
        """
        Apply a verification outcome.

        APPROVED clears the draft; DENIED keeps it for correction and
        resubmission; anything else stays pending.
        """
        if verification_status == VerificationStatus.APPROVED:
            self.draft = OnboardingDraft()
            return Step.APPROVED
        if verification_status == VerificationStatus.DENIED:
            return Step.DENIED
        return Step.PENDING
