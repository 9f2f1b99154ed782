"""
Onboarding API Views

Endpoints for the KYC onboarding wizard:
- GET/POST /onboarding/welcome - Draft summary / start
- GET/POST /onboarding/{step} - Step data / continue, back, save, skip
- POST /onboarding/review - Submit application
- GET /onboarding/pending - Check verification status now
- GET /onboarding/pending/stream - SSE stream of verification status
- POST /onboarding/pending/sandbox-approve - Instant approval (sandbox only)
- GET /onboarding/approved - Finish onboarding
- GET /onboarding/denied - Denial reason and guidance
- DELETE /onboarding/draft - Discard draft
"""
import logging

from django.http import HttpResponseRedirect
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.core.authentication import get_session_issuer, get_user_context, set_session_cookie
from apps.core.constants import DASHBOARD_PATH, OnboardingStatus, VerificationStatus
from apps.core.exceptions import ConflictError, ExternalServiceError, ValidationError
from apps.core.permissions import IsAuthenticated, SandboxToolsEnabled
from apps.paxos import services as paxos_services

from .constants import DRAFT_STEPS, Step
from .denial import FALLBACK_DENIAL_DETAILS, DenialInfo
from .drafts import SessionDraftStore
from .poller import StatusPoller, extract_denial, fetch_identity_status
from .state_machine import OnboardingWizard
from .submission import approve_instantly, submit_onboarding

logger = logging.getLogger(__name__)

CONTINUE = 'continue'
BACK = 'back'
SAVE = 'save'
SKIP = 'skip'
ACTIONS = (CONTINUE, BACK, SAVE, SKIP)


def step_path(step: Step) -> str:
    return f'/onboarding/{step.value}'


def _step_section(wizard: OnboardingWizard, step: Step):
    draft = wizard.draft
    return {
        Step.IDENTITY_TYPE: {'identity_type': draft.identity_type},
        Step.PERSONAL_INFO: (
            draft.institution_info if draft.identity_type == 'INSTITUTION' else draft.person_info
        ),
        Step.ADDRESS: draft.address,
        Step.TAX_DETAILS: draft.tax_info,
        Step.DOCUMENTS: draft.to_dict()['documents'],
        Step.REVIEW: draft.to_dict(),
    }[step]


class OnboardingView(APIView):
    """Base view: loads the caller's draft into a wizard."""
    permission_classes = [IsAuthenticated]

    def get_wizard(self, request) -> OnboardingWizard:
        self.store = SessionDraftStore(request)
        wizard = OnboardingWizard(self.store.load())

        # A draft lost with the browser session still knows the submitted identity
        user = get_user_context(request)
        if user and not wizard.draft.identity_id and user.identity_id:
            wizard.draft.identity_id = user.identity_id
            wizard.draft.account_id = user.account_id
            wizard.draft.profile_id = user.profile_id
        return wizard

    def get_identity_id(self, wizard: OnboardingWizard) -> str:
        if not wizard.draft.identity_id:
            raise ValidationError(
                'No submitted application',
                details={'step': wizard.current().value},
            )
        return wizard.draft.identity_id

    def get_poller(self, identity_id: str) -> StatusPoller:
        return StatusPoller(lambda: fetch_identity_status(identity_id))


class WelcomeView(OnboardingView):
    """
    GET  /onboarding/welcome - Current draft summary
    POST /onboarding/welcome - Start (or resume) the wizard
    """

    def get(self, request):
        wizard = self.get_wizard(request)
        return Response({
            'step': Step.WELCOME.value,
            'current_step': wizard.draft.current_step,
            'resume': step_path(wizard.current()),
            'draft': wizard.draft.to_dict(),
        })

    def post(self, request):
        wizard = self.get_wizard(request)
        following = wizard.start()
        self.store.save(wizard.draft)
        return Response({'step': following.value, 'redirect': step_path(following)})


class WizardStepView(OnboardingView):
    """
    GET  /onboarding/{step} - Step data (redirects to the first incomplete step
         when an earlier step is not done yet)
    POST /onboarding/{step} - Body: {"action": "continue"|"back"|"save"|"skip", ...fields}

    Response (200):
        {"step": "address", "redirect": "/onboarding/address"}

    Errors:
        400: Field validation failed (details per field)
    """
    step: Step = None

    def get(self, request):
        wizard = self.get_wizard(request)
        if not wizard.can_enter(self.step):
            return HttpResponseRedirect(step_path(wizard.first_incomplete_step(before=self.step)))

        return Response({
            'step': self.step.value,
            'current_step': wizard.draft.current_step,
            'data': _step_section(wizard, self.step),
            'back': step_path(wizard.previous_step(self.step)),
        })

    def post(self, request):
        action = request.data.get('action') or CONTINUE
        if action not in ACTIONS:
            raise ValidationError.for_fields({'action': f"Action must be one of {', '.join(ACTIONS)}"})

        wizard = self.get_wizard(request)

        if action == BACK:
            following = wizard.back(self.step)
        elif action == SAVE:
            wizard.save_step(self.step, request.data)
            following = self.step
        elif action == SKIP:
            if self.step != Step.DOCUMENTS:
                raise ValidationError.for_fields({'action': 'Only the documents step can be skipped'})
            following = wizard.skip_documents()
        else:
            try:
                following = wizard.submit_step(self.step, request.data)
            except ValidationError:
                # Keep what was typed even though the step did not advance
                self.store.save(wizard.draft)
                raise

        self.store.save(wizard.draft)
        return Response({'step': following.value, 'redirect': step_path(following)})


class ReviewView(WizardStepView):
    """
    GET  /onboarding/review - Everything entered so far
    POST /onboarding/review - Body: {"terms_accepted": true}

    Submits the application: creates the Paxos identity and account, links
    them to the user and reissues the session cookie.

    Response (200):
        {"step": "pending", "redirect": "/onboarding/pending", "identity_id": ...}
    """
    step = Step.REVIEW

    def post(self, request):
        action = request.data.get('action') or CONTINUE
        if action != CONTINUE:
            return super().post(request)

        wizard = self.get_wizard(request)
        try:
            wizard.submit_step(Step.REVIEW, request.data)
        except ValidationError:
            self.store.save(wizard.draft)
            raise

        result = submit_onboarding(wizard.draft, get_user_context(request))
        following = wizard.mark_submitted(result.identity_id, result.account_id, result.profile_id)
        self.store.save(wizard.draft)

        response = Response({
            'step': following.value,
            'redirect': step_path(following),
            'identity_id': result.identity_id,
            'account_id': result.account_id,
            'profile_id': result.profile_id,
        })
        return set_session_cookie(response, result.session.token)


class PendingView(OnboardingView):
    """
    GET /onboarding/pending - One verification status check ("check now")

    Response (200):
        {"status": "PENDING", "redirect": null}
        {"status": "APPROVED", "redirect": "/onboarding/approved"}
    """

    def get(self, request):
        wizard = self.get_wizard(request)
        identity_id = self.get_identity_id(wizard)

        result = self.get_poller(identity_id).check_now()
        outcome = wizard.resolve(result.status)
        redirect = step_path(outcome) if outcome != Step.PENDING else None
        return Response({
            'identity_id': identity_id,
            'status': result.status,
            'redirect': redirect,
        })


class SandboxApproveView(OnboardingView):
    """
    POST /onboarding/pending/sandbox-approve

    Skip verification in the sandbox. Refused unless sandbox tools are on.
    """
    permission_classes = [IsAuthenticated, SandboxToolsEnabled]

    def post(self, request):
        wizard = self.get_wizard(request)
        identity_id = self.get_identity_id(wizard)
        approve_instantly(identity_id)
        return Response({
            'identity_id': identity_id,
            'status': VerificationStatus.APPROVED.value,
            'redirect': step_path(Step.APPROVED),
        })


class ApprovedView(OnboardingView):
    """
    GET /onboarding/approved

    Confirms approval, marks the user APPROVED, clears the draft and reissues
    the session cookie.

    Errors:
        409: Verification is not approved yet
    """

    def get(self, request):
        wizard = self.get_wizard(request)
        identity_id = self.get_identity_id(wizard)
        account_id = wizard.draft.account_id
        profile_id = wizard.draft.profile_id

        result = self.get_poller(identity_id).check_now()
        if wizard.resolve(result.status) != Step.APPROVED:
            raise ConflictError(f'Identity verification is {result.status}')

        session = get_session_issuer().resync(
            get_user_context(request),
            onboarding_status=OnboardingStatus.APPROVED.value,
            identity_id=identity_id,
            account_id=account_id,
            profile_id=profile_id,
        )
        self.store.clear()
        logger.info(f'Onboarding approved for user {session.claims.id}')

        response = Response({
            'status': VerificationStatus.APPROVED.value,
            'identity_id': identity_id,
            'account_id': session.claims.account_id,
            'profile_id': session.claims.profile_id,
            'redirect': DASHBOARD_PATH,
        })
        return set_session_cookie(response, session.token)


class DeniedView(OnboardingView):
    """
    GET /onboarding/denied

    Response (200):
        {
            "reason": "DOCUMENT_ISSUE",
            "details": "...",
            "guidance": {"title": "Document Issue", "description": "..."},
            "resubmit": "/onboarding/review"
        }
    """

    def get(self, request):
        wizard = self.get_wizard(request)
        identity_id = self.get_identity_id(wizard)

        try:
            denial = extract_denial(paxos_services.get_identity(identity_id))
        except ExternalServiceError as e:
            logger.warning(f'Could not load denial reason for identity {identity_id}: {e.message}')
            denial = DenialInfo(details=FALLBACK_DENIAL_DETAILS)

        # Draft is retained so the user can correct and resubmit
        self.store.save(wizard.draft)
        return Response({
            'identity_id': identity_id,
            **denial.to_dict(),
            'resubmit': step_path(Step.REVIEW),
        })


class DraftView(OnboardingView):
    """DELETE /onboarding/draft - Discard the draft."""

    def delete(self, request):
        SessionDraftStore(request).clear()
        return Response(status=status.HTTP_204_NO_CONTENT)


def step_view(step: Step):
    """WizardStepView bound to one data step."""
    if step == Step.REVIEW:
        return ReviewView.as_view()
    if step not in DRAFT_STEPS:
        raise ValueError(f'{step.value} is not a data step')
    return WizardStepView.as_view(step=step)
