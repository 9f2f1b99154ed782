"""
URL Configuration for Aureum Backend

Pages (/sign-in, /sign-up, /onboarding/..., /dashboard) are gated by
RouteAuthorizationMiddleware; everything under /api/ is exempt from it.
"""
from django.urls import include, path

from apps.auth_api.urls import page_urlpatterns as auth_page_urlpatterns
from apps.core.views import health_check

urlpatterns = [
    # Health check endpoint (public)
    path('api/health', health_check, name='health_check'),

    # Sign-up / sign-in
    path('', include(auth_page_urlpatterns)),

    # Authentication endpoints
    path('api/auth/', include('apps.auth_api.urls')),

    # Paxos proxy endpoints
    path('api/paxos/', include('apps.paxos.urls')),

    # Onboarding wizard
    path('onboarding/', include('apps.onboarding.urls')),

    # App area
    path('', include('apps.dashboard.urls')),
]
