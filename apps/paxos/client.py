"""
Paxos API Client

Thin httpx wrapper over the Paxos v2 REST API:
- OAuth2 client-credentials token, cached until shortly before expiry
- Bearer auth + JSON on every call
- Non-2xx responses and transport failures raise ExternalServiceError
"""
import logging
import time
from dataclasses import dataclass

import httpx
from django.conf import settings

from apps.core.exceptions import ExternalServiceError

logger = logging.getLogger(__name__)

# Refresh the access token this many seconds before it expires
TOKEN_EXPIRY_MARGIN = 60


@dataclass
class AccessToken:
    value: str
    expires_at: float

    def is_fresh(self, now: float | None = None) -> bool:
        now = time.monotonic() if now is None else now
        return now < self.expires_at - TOKEN_EXPIRY_MARGIN


def _error_payload(response: httpx.Response) -> dict:
    try:
        payload = response.json()
    except ValueError:
        payload = {'message': response.reason_phrase or response.text}
    if not isinstance(payload, dict):
        payload = {'message': str(payload)}
    return {'status': response.status_code, **payload}


def _error_message(payload: dict) -> str:
    return (
        payload.get('message')
        or payload.get('detail')
        or payload.get('title')
        or 'Internal server error'
    )


class PaxosClient:
    """
    Usage:
        paxos = get_paxos_client()
        identity = paxos.post('/identity/identities', body)
    """

    def __init__(
        self,
        base_url: str | None = None,
        auth_url: str | None = None,
        client_id: str | None = None,
        client_secret: str | None = None,
        scopes: list[str] | None = None,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        self.base_url = (base_url or settings.PAXOS_BASE_URL).rstrip('/')
        self.auth_url = auth_url or settings.PAXOS_AUTH_URL
        self.client_id = client_id if client_id is not None else settings.PAXOS_CLIENT_ID
        self.client_secret = client_secret if client_secret is not None else settings.PAXOS_CLIENT_SECRET
        self.scopes = scopes if scopes is not None else list(settings.PAXOS_SCOPES)
        self.timeout = timeout or settings.PAXOS_TIMEOUT
        self.transport = transport
        self._token: AccessToken | None = None

    @property
    def is_sandbox(self) -> bool:
        return 'sandbox' in self.base_url

    def _http(self) -> httpx.Client:
        return httpx.Client(timeout=self.timeout, transport=self.transport)

    # =========================================================================
    # OAuth2
    # =========================================================================

    def get_access_token(self) -> str:
        if self._token is not None and self._token.is_fresh():
            return self._token.value

        try:
            with self._http() as client:
                response = client.post(
                    self.auth_url,
                    data={
                        'grant_type': 'client_credentials',
                        'client_id': self.client_id,
                        'client_secret': self.client_secret,
                        'scope': ' '.join(self.scopes),
                    },
                )
        except httpx.RequestError as e:
            logger.error(f'Paxos auth request error: {e}')
            raise ExternalServiceError('Paxos authentication unavailable') from e

        if not response.is_success:
            logger.error(f'Paxos auth failed: {response.status_code} {response.text}')
            raise ExternalServiceError(
                f'Paxos auth failed: {response.status_code}',
                upstream_status=response.status_code,
                payload=_error_payload(response),
            )

        try:
            data = response.json()
            access_token = data['access_token']
        except (ValueError, KeyError, TypeError) as e:
            logger.error(f'Paxos auth returned an unreadable body: {e}')
            raise ExternalServiceError('Paxos authentication unavailable') from e

        self._token = AccessToken(
            value=access_token,
            expires_at=time.monotonic() + float(data.get('expires_in', 0)),
        )
        return self._token.value

    # =========================================================================
    # Requests
    # =========================================================================

    def request(self, method: str, path: str, params: dict | None = None, body=None) -> dict:
        url = f'{self.base_url}{path}'
        headers = {
            'Authorization': f'Bearer {self.get_access_token()}',
            'Content-Type': 'application/json',
        }

        try:
            with self._http() as client:
                response = client.request(
                    method,
                    url,
                    params=params or None,
                    json=body,
                    headers=headers,
                )
        except httpx.RequestError as e:
            logger.error(f'Paxos request error: {method} {path}: {e}')
            raise ExternalServiceError('Paxos service unavailable') from e

        if not response.is_success:
            payload = _error_payload(response)
            logger.warning(f'Paxos {method} {path} failed with {response.status_code}')
            raise ExternalServiceError(
                _error_message(payload),
                upstream_status=response.status_code,
                payload=payload,
            )

        if response.status_code == 204 or not response.content:
            return {}
        try:
            return response.json()
        except ValueError as e:
            logger.error(f'Paxos {method} {path} returned a non-JSON body')
            raise ExternalServiceError('Invalid response from Paxos') from e

    def get(self, path: str, params: dict | None = None) -> dict:
        return self.request('GET', path, params=params)

    def post(self, path: str, body=None) -> dict:
        return self.request('POST', path, body=body)

    def put(self, path: str, body=None) -> dict:
        return self.request('PUT', path, body=body)

    def patch(self, path: str, body=None) -> dict:
        return self.request('PATCH', path, body=body)

    def delete(self, path: str, body=None) -> dict:
        return self.request('DELETE', path, body=body)


_client: PaxosClient | None = None


def get_paxos_client() -> PaxosClient:
    """Process-wide client so the access token cache is shared."""
    global _client
    if _client is None:
        _client = PaxosClient()
    return _client
