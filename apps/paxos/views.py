"""
Paxos Proxy Views

Routes under /api/paxos/:
- identities, identities/{id}, accounts, account-members
- balances, crypto-destination-addresses, market-data, pricing, quotes
- orchestration-rules, paxos-transfers, transfers
- sandbox-deposit, sandbox-identity (sandbox only)
"""
import logging

from rest_framework import status

from apps.core.permissions import IsAuthenticated, SandboxToolsEnabled

from . import services
from .proxy import PaxosProxyView

logger = logging.getLogger(__name__)

MARKET_DATA_TYPES = ('tickers', 'order-book', 'recent-executions')
PRICING_ENDPOINTS = ('prices', 'tickers', 'historical_prices')

DESTINATION_ADDRESS_FORBIDDEN = (
    'Insufficient API permissions to save destination addresses. '
    'The transfer:write_crypto_destination_address scope is required.'
)


# =============================================================================
# Identity
# =============================================================================

class IdentitiesView(PaxosProxyView):
    """
    GET  /api/paxos/identities - List identities (query forwarded)
    POST /api/paxos/identities - Create identity (201)
    """

    def get(self, request):
        return self.forward('GET', services.IDENTITIES_PATH, params=self.forwarded_params(request))

    def post(self, request):
        return self.forward(
            'POST', services.IDENTITIES_PATH,
            body=request.data,
            success_status=status.HTTP_201_CREATED,
        )


class IdentityDetailView(PaxosProxyView):
    """GET /api/paxos/identities/{identity_id}"""

    def get(self, request, identity_id):
        return self.forward('GET', f'{services.IDENTITIES_PATH}/{identity_id}')


class AccountsView(PaxosProxyView):
    """
    GET  /api/paxos/accounts
    POST /api/paxos/accounts - Body: {"account": {"identity_id": ...}, "create_profile": true}
    """

    def get(self, request):
        return self.forward('GET', services.ACCOUNTS_PATH, params=self.forwarded_params(request))

    def post(self, request):
        return self.forward(
            'POST', services.ACCOUNTS_PATH,
            body=request.data,
            success_status=status.HTTP_201_CREATED,
        )


class AccountMembersView(PaxosProxyView):
    """
    GET    /api/paxos/account-members
    POST   /api/paxos/account-members (201)
    DELETE /api/paxos/account-members - Body: {"member_id": ...}
    """
    path = '/identity/account-members'

    def get(self, request):
        return self.forward('GET', self.path, params=self.forwarded_params(request))

    def post(self, request):
        return self.forward('POST', self.path, body=request.data, success_status=status.HTTP_201_CREATED)

    def delete(self, request):
        member_id = request.data.get('member_id')
        if not member_id:
            return self.bad_request('member_id is required in the request body')
        return self.forward('DELETE', f'{self.path}/{member_id}')


# =============================================================================
# Funding and transfers
# =============================================================================

class BalancesView(PaxosProxyView):
    """GET /api/paxos/balances?profile_id={id}"""

    def get(self, request):
        profile_id = request.query_params.get('profile_id')
        if not profile_id:
            return self.bad_request('profile_id query parameter is required')
        return self.forward('GET', f'/profiles/{profile_id}/balances')


class CryptoDestinationAddressesView(PaxosProxyView):
    """
    GET  /api/paxos/crypto-destination-addresses
    POST /api/paxos/crypto-destination-addresses - Saved upstream with PUT
        Body: {"crypto_network", "address", "name"?, "profile_id"?}
    """

    def get(self, request):
        return self.forward(
            'GET', '/transfer/crypto-destination-addresses',
            params=self.forwarded_params(request),
        )

    def post(self, request):
        payload = {
            'crypto_network': request.data.get('crypto_network'),
            'address': request.data.get('address'),
        }
        if request.data.get('name'):
            payload['nickname'] = request.data.get('name')
        if request.data.get('profile_id'):
            payload['profile_id'] = request.data.get('profile_id')

        return self.forward('PUT', '/transfer/crypto-destination-address', body=payload)

    def upstream_error_message(self, exc):
        if exc.upstream_status == status.HTTP_403_FORBIDDEN:
            return DESTINATION_ADDRESS_FORBIDDEN
        return (
            exc.payload.get('detail')
            or exc.payload.get('message')
            or exc.payload.get('title')
            or 'Failed to save address'
        )


class PaxosTransfersView(PaxosProxyView):
    """POST /api/paxos/paxos-transfers (201)"""

    def post(self, request):
        return self.forward(
            'POST', '/transfer/paxos-transfers',
            body=request.data,
            success_status=status.HTTP_201_CREATED,
        )


class TransfersView(PaxosProxyView):
    """GET /api/paxos/transfers?profile_id=&type=&limit=&cursor="""
    allowed_params = ('profile_id', 'type', 'limit', 'cursor')

    def get(self, request):
        return self.forward('GET', '/transfer/transfers', params=self.forwarded_params(request))


class OrchestrationRulesView(PaxosProxyView):
    """
    GET    /api/paxos/orchestration-rules
    POST   /api/paxos/orchestration-rules (201)
    DELETE /api/paxos/orchestration-rules - Body: {"rule_id": ...}
    """
    path = '/orchestration-rules'

    def get(self, request):
        return self.forward('GET', self.path, params=self.forwarded_params(request))

    def post(self, request):
        return self.forward('POST', self.path, body=request.data, success_status=status.HTTP_201_CREATED)

    def delete(self, request):
        rule_id = request.data.get('rule_id')
        if not rule_id:
            return self.bad_request('rule_id is required in the request body')
        return self.forward('DELETE', f'{self.path}/{rule_id}')


# =============================================================================
# Market data
# =============================================================================

class MarketDataView(PaxosProxyView):
    """GET /api/paxos/market-data?market=BTCUSD&type=tickers"""
    excluded_params = ('type',)

    def get(self, request):
        market = request.query_params.get('market')
        data_type = request.query_params.get('type')

        if not market:
            return self.bad_request('market query parameter is required')
        if not data_type:
            return self.bad_request(
                f"type query parameter is required ({', '.join(MARKET_DATA_TYPES)})"
            )
        if data_type not in MARKET_DATA_TYPES:
            return self.bad_request(f"Invalid type. Must be one of: {', '.join(MARKET_DATA_TYPES)}")

        return self.forward('GET', f'/markets/{market}/{data_type}', params=self.forwarded_params(request))


class PricingView(PaxosProxyView):
    """GET /api/paxos/pricing?endpoint=prices|tickers|historical_prices"""
    excluded_params = ('endpoint',)

    def get(self, request):
        endpoint = request.query_params.get('endpoint')
        if not endpoint:
            return self.bad_request(
                f"endpoint query parameter is required ({', '.join(PRICING_ENDPOINTS)})"
            )
        if endpoint not in PRICING_ENDPOINTS:
            return self.bad_request(f"Invalid endpoint. Must be one of: {', '.join(PRICING_ENDPOINTS)}")

        path = '/pricing/historical-prices' if endpoint == 'historical_prices' else f'/pricing/{endpoint}'
        return self.forward('GET', path, params=self.forwarded_params(request))


class QuotesView(PaxosProxyView):
    """GET /api/paxos/quotes?market=&side=&amount=&profile_id="""
    allowed_params = ('market', 'side', 'amount', 'profile_id')

    def get(self, request):
        return self.forward('GET', '/quotes', params=self.forwarded_params(request))


# =============================================================================
# Sandbox tools
# =============================================================================

class SandboxDepositView(PaxosProxyView):
    """
    POST /api/paxos/sandbox-deposit

    Body: {"profile_id", "asset", "amount", "crypto_network"?}
    """
    permission_classes = [IsAuthenticated, SandboxToolsEnabled]

    def post(self, request):
        profile_id = request.data.get('profile_id')
        asset = request.data.get('asset')
        amount = request.data.get('amount')
        if not profile_id or not asset or not amount:
            return self.bad_request('profile_id, asset, and amount are required')

        data = services.sandbox_deposit(
            profile_id, asset, amount,
            crypto_network=request.data.get('crypto_network'),
            client=self.get_client(),
        )
        return self.relay(data)


class SandboxIdentityView(PaxosProxyView):
    """
    POST /api/paxos/sandbox-identity

    Body: {"identity_id": ...} - marks the identity APPROVED in the sandbox.
    """
    permission_classes = [IsAuthenticated, SandboxToolsEnabled]

    def post(self, request):
        identity_id = request.data.get('identity_id')
        if not identity_id:
            return self.bad_request('identity_id is required in the request body')

        data = services.approve_identity_in_sandbox(identity_id, client=self.get_client())
        return self.relay(data)
