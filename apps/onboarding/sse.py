"""
Server-Sent Events (SSE) for Identity Verification Status

Streams verification status while the user waits on the pending page.
Replaces client-side polling: the server polls Paxos every
ONBOARDING_POLL_INTERVAL seconds and pushes each observed status.
"""
import json
import logging

from django.conf import settings
from django.http import StreamingHttpResponse
from rest_framework.views import APIView

from apps.core.authentication import get_user_context
from apps.core.constants import VerificationStatus
from apps.core.permissions import IsAuthenticated

from .drafts import SessionDraftStore
from .poller import StatusPoller, extract_denial, fetch_identity_status

logger = logging.getLogger(__name__)


def _event(name: str, data: dict) -> str:
    return f"event: {name}\ndata: {json.dumps(data)}\n\n"


class IdentityStatusSSEView(APIView):
    """
    GET /onboarding/pending/stream

    Server-Sent Events stream for the submitted identity's verification.
    Connection closes when the status is APPROVED/DENIED or after
    ONBOARDING_POLL_MAX_DURATION seconds. A client disconnect closes the
    generator, which cancels the poller.
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        user = get_user_context(request)
        identity_id = SessionDraftStore(request).load().identity_id or user.identity_id
        if not identity_id:
            return StreamingHttpResponse(
                self._error_stream('No submitted application'),
                content_type='text/event-stream',
                status=400
            )

        poller = StatusPoller(lambda: fetch_identity_status(identity_id))
        response = StreamingHttpResponse(
            self._event_stream(poller, identity_id),
            content_type='text/event-stream'
        )
        # Disable buffering for real-time streaming
        response['Cache-Control'] = 'no-cache'
        response['X-Accel-Buffering'] = 'no'  # For nginx
        return response

    def _error_stream(self, message: str):
        """Generate an error event and close stream."""
        yield _event('error', {'error': message})

    def _event_stream(self, poller: StatusPoller, identity_id: str):
        """
        Events:
        - status: still pending (or disabled)
        - approved: verification passed; continue to /onboarding/approved
        - denied: verification failed, with reason and guidance
        - timeout: stream timeout (client should reconnect)
        """
        last = None
        for result in poller.iter_statuses(max_duration=settings.ONBOARDING_POLL_MAX_DURATION):
            last = result
            data = {'identity_id': identity_id, 'status': result.status}

            if result.status == VerificationStatus.APPROVED:
                yield _event('approved', {**data, 'redirect': '/onboarding/approved'})
            elif result.status == VerificationStatus.DENIED:
                yield _event('denied', {
                    **data,
                    **extract_denial(result.payload).to_dict(),
                    'redirect': '/onboarding/denied',
                })
            else:
                yield _event('status', data)

        if last is None or not last.is_terminal:
            logger.debug(f'Status stream for identity {identity_id} timed out')
            yield _event('timeout', {'message': 'Stream timeout'})
