"""
Onboarding URL Configuration

Routes for the onboarding wizard, mounted at /onboarding/.
"""
from django.urls import path

from .constants import Step
from .sse import IdentityStatusSSEView
from .views import (
    ApprovedView,
    DeniedView,
    DraftView,
    PendingView,
    SandboxApproveView,
    WelcomeView,
    step_view,
)

urlpatterns = [
    path('welcome', WelcomeView.as_view(), name='onboarding_welcome'),

    # Wizard steps
    path('identity', step_view(Step.IDENTITY_TYPE), name='onboarding_identity'),
    path('personal-info', step_view(Step.PERSONAL_INFO), name='onboarding_personal_info'),
    path('address', step_view(Step.ADDRESS), name='onboarding_address'),
    path('tax-details', step_view(Step.TAX_DETAILS), name='onboarding_tax_details'),
    path('documents', step_view(Step.DOCUMENTS), name='onboarding_documents'),
    path('review', step_view(Step.REVIEW), name='onboarding_review'),

    # Verification
    path('pending', PendingView.as_view(), name='onboarding_pending'),
    path('pending/stream', IdentityStatusSSEView.as_view(), name='onboarding_pending_stream'),
    path('pending/sandbox-approve', SandboxApproveView.as_view(), name='onboarding_sandbox_approve'),
    path('approved', ApprovedView.as_view(), name='onboarding_approved'),
    path('denied', DeniedView.as_view(), name='onboarding_denied'),

    path('draft', DraftView.as_view(), name='onboarding_draft'),
]
