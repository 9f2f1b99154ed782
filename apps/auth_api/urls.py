"""
Authentication API URLs

Page-level routes (/sign-in, /sign-up) and /api/auth/ routes.
"""
from django.urls import path

from . import views

page_urlpatterns = [
    path('sign-up', views.SignUpView.as_view(), name='sign_up'),
    path('sign-in', views.SignInView.as_view(), name='sign_in'),
]

# Relative to /api/auth/
urlpatterns = [
    path('sign-up/validate', views.SignUpValidateView.as_view(), name='auth_sign_up_validate'),
    path('sign-out', views.SignOutView.as_view(), name='auth_sign_out'),
    path('session', views.SessionView.as_view(), name='auth_session'),
    path('update-onboarding', views.UpdateOnboardingView.as_view(), name='auth_update_onboarding'),
]
