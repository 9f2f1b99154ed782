"""
Paxos Proxy Base View

Each proxy route forwards to one fixed upstream path and relays the upstream
JSON and status. Failures are relayed as {"error", "details"} with the
upstream status, or 500 when the request never got a response.
"""
import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.core.exceptions import ExternalServiceError
from apps.core.permissions import IsAuthenticated

from .client import get_paxos_client

logger = logging.getLogger(__name__)


class PaxosProxyView(APIView):
    permission_classes = [IsAuthenticated]

    # Forwarded query parameters; None forwards everything
    allowed_params: tuple | None = None
    excluded_params: tuple = ()

    def get_client(self):
        return get_paxos_client()

    def forwarded_params(self, request) -> dict:
        params = {}
        for key, value in request.query_params.items():
            if key in self.excluded_params:
                continue
            if self.allowed_params is not None and key not in self.allowed_params:
                continue
            if value == '' and self.allowed_params is not None:
                continue
            params[key] = value
        return params

    def forward(self, method: str, path: str, params: dict | None = None, body=None,
                success_status: int = status.HTTP_200_OK) -> Response:
        data = self.get_client().request(method, path, params=params, body=body)
        return self.relay(data, success_status)

    def bad_request(self, message: str) -> Response:
        return Response({'error': message}, status=status.HTTP_400_BAD_REQUEST)

    def upstream_error_message(self, exc: ExternalServiceError) -> str:
        return exc.message or 'Internal server error'

    def handle_exception(self, exc):
        if isinstance(exc, ExternalServiceError):
            logger.warning(
                f'Relaying Paxos failure on {self.request.path}: '
                f'{exc.upstream_status or 500} {exc.message}'
            )
            return Response(
                {'error': self.upstream_error_message(exc), 'details': exc.payload},
                status=exc.upstream_status or status.HTTP_500_INTERNAL_SERVER_ERROR,
            )
        return super().handle_exception(exc)

    def relay(self, data, success_status: int = status.HTTP_200_OK) -> Response:
        return Response(data, status=success_status)
