"""
ASGI config for Aureum Backend.

The onboarding status stream is served as a streaming response, so ASGI
deployments keep long-lived connections off the worker threads.
"""
import os

from django.core.asgi import get_asgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings.development')

application = get_asgi_application()
