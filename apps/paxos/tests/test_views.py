"""
Paxos Proxy View Tests
"""
import httpx
import pytest
from rest_framework import status

from apps.paxos.views import DESTINATION_ADDRESS_FORBIDDEN


@pytest.fixture
def client(authenticated_client, fake_paxos):
    api_client, _ = authenticated_client
    return api_client


@pytest.mark.django_db
class TestProxyAccess:

    def test_requires_session(self, api_client, fake_paxos):
        response = api_client.get('/api/paxos/identities')

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert fake_paxos.requests == []

    def test_not_redirected_by_middleware(self, api_client):
        response = api_client.get('/api/paxos/quotes')
        assert response.status_code != status.HTTP_302_FOUND


@pytest.mark.django_db
class TestIdentities:

    def test_list_forwards_query(self, client, fake_paxos):
        fake_paxos.add('GET', '/identity/identities', 200, {'items': [{'id': 'idt-1'}]})

        response = client.get('/api/paxos/identities', {'id': 'idt-1'})

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {'items': [{'id': 'idt-1'}]}
        assert fake_paxos.calls('GET', '/identity/identities')[0].url.params['id'] == 'idt-1'

    def test_create_returns_201(self, client, fake_paxos):
        fake_paxos.add('POST', '/identity/identities', 200, {'id': 'idt-1'})

        response = client.post('/api/paxos/identities', {'ref_id': 'r-1'}, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert fake_paxos.body(fake_paxos.calls('POST', '/identity/identities')[0]) == {'ref_id': 'r-1'}

    def test_detail(self, client, fake_paxos):
        fake_paxos.add('GET', '/identity/identities/idt-1', 200, {'id': 'idt-1', 'summary_status': 'PENDING'})

        response = client.get('/api/paxos/identities/idt-1')

        assert response.json()['summary_status'] == 'PENDING'

    def test_upstream_error_relayed(self, client, fake_paxos):
        fake_paxos.add('POST', '/identity/identities', 422, {'message': 'invalid cip_id'})

        response = client.post('/api/paxos/identities', {}, format='json')

        assert response.status_code == 422
        assert response.json() == {
            'error': 'invalid cip_id',
            'details': {'status': 422, 'message': 'invalid cip_id'},
        }

    def test_transport_error_relayed_as_500(self, client, fake_paxos):
        def handler(request):
            if request.url.path == fake_paxos.TOKEN_PATH:
                return fake_paxos(request)
            raise httpx.ReadTimeout('timed out', request=request)

        fake_paxos.client.transport = httpx.MockTransport(handler)

        response = client.get('/api/paxos/identities')

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.json()['error'] == 'Paxos service unavailable'


@pytest.mark.django_db
class TestRequiredParameters:

    def test_balances_requires_profile(self, client, fake_paxos):
        response = client.get('/api/paxos/balances')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json() == {'error': 'profile_id query parameter is required'}

    def test_balances(self, client, fake_paxos):
        fake_paxos.add('GET', '/profiles/prf-1/balances', 200, {'items': []})
        assert client.get('/api/paxos/balances', {'profile_id': 'prf-1'}).status_code == 200

    def test_market_data_validation(self, client, fake_paxos):
        assert client.get('/api/paxos/market-data', {'type': 'tickers'}).status_code == 400
        assert client.get('/api/paxos/market-data', {'market': 'BTCUSD'}).status_code == 400

        response = client.get('/api/paxos/market-data', {'market': 'BTCUSD', 'type': 'candles'})
        assert response.json()['error'] == (
            'Invalid type. Must be one of: tickers, order-book, recent-executions'
        )

    def test_market_data_forwards_without_type(self, client, fake_paxos):
        fake_paxos.add('GET', '/markets/BTCUSD/order-book', 200, {'bids': []})

        response = client.get('/api/paxos/market-data', {'market': 'BTCUSD', 'type': 'order-book'})

        assert response.status_code == 200
        params = fake_paxos.calls('GET', '/markets/BTCUSD/order-book')[0].url.params
        assert 'type' not in params
        assert params['market'] == 'BTCUSD'

    def test_pricing_endpoints(self, client, fake_paxos):
        fake_paxos.add('GET', '/pricing/historical-prices', 200, {'prices': []})

        assert client.get('/api/paxos/pricing').status_code == 400
        assert client.get('/api/paxos/pricing', {'endpoint': 'spot'}).status_code == 400

        response = client.get('/api/paxos/pricing', {'endpoint': 'historical_prices', 'market': 'ETHUSD'})
        assert response.status_code == 200
        assert 'endpoint' not in fake_paxos.calls('GET', '/pricing/historical-prices')[0].url.params

    def test_quotes_forward_known_params_only(self, client, fake_paxos):
        fake_paxos.add('GET', '/quotes', 200, {'items': []})

        client.get('/api/paxos/quotes', {'market': 'BTCUSD', 'side': 'BUY', 'junk': '1'})

        params = fake_paxos.calls('GET', '/quotes')[0].url.params
        assert dict(params) == {'market': 'BTCUSD', 'side': 'BUY'}

    def test_delete_needs_ids_in_body(self, client, fake_paxos):
        fake_paxos.add('DELETE', '/identity/account-members/m-1', 204)

        assert client.delete('/api/paxos/account-members', {}, format='json').status_code == 400
        assert client.delete('/api/paxos/orchestration-rules', {}, format='json').status_code == 400

        response = client.delete('/api/paxos/account-members', {'member_id': 'm-1'}, format='json')
        assert response.status_code == 200


@pytest.mark.django_db
class TestCryptoDestinationAddresses:

    def test_post_is_sent_upstream_as_put(self, client, fake_paxos):
        fake_paxos.add('PUT', '/transfer/crypto-destination-address', 200, {'id': 'addr-1'})

        response = client.post('/api/paxos/crypto-destination-addresses', {
            'crypto_network': 'ETHEREUM',
            'address': '0xabc',
            'name': 'Cold wallet',
        }, format='json')

        assert response.status_code == status.HTTP_200_OK
        body = fake_paxos.body(fake_paxos.calls('PUT', '/transfer/crypto-destination-address')[0])
        assert body == {'crypto_network': 'ETHEREUM', 'address': '0xabc', 'nickname': 'Cold wallet'}

    def test_forbidden_gets_scope_message(self, client, fake_paxos):
        fake_paxos.add('PUT', '/transfer/crypto-destination-address', 403, {'title': 'Forbidden'})

        response = client.post('/api/paxos/crypto-destination-addresses', {
            'crypto_network': 'ETHEREUM',
            'address': '0xabc',
        }, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json()['error'] == DESTINATION_ADDRESS_FORBIDDEN


@pytest.mark.django_db
class TestSandboxTools:

    def test_sandbox_identity_approves(self, client, fake_paxos):
        fake_paxos.add('PUT', '/identity/identities/idt-1/sandbox-status', 200, {'id': 'idt-1'})

        response = client.post('/api/paxos/sandbox-identity', {'identity_id': 'idt-1'}, format='json')

        assert response.status_code == status.HTTP_200_OK
        body = fake_paxos.body(fake_paxos.calls('PUT', '/identity/identities/idt-1/sandbox-status')[0])
        assert body == {
            'id_verification_status': 'APPROVED',
            'sanctions_verification_status': 'APPROVED',
        }

    def test_sandbox_deposit_requires_fields(self, client, fake_paxos):
        response = client.post('/api/paxos/sandbox-deposit', {'profile_id': 'prf-1'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json() == {'error': 'profile_id, asset, and amount are required'}

    def test_sandbox_deposit(self, client, fake_paxos):
        fake_paxos.add('POST', '/sandbox/profiles/prf-1/deposit', 200, {'id': 'dep-1'})

        response = client.post('/api/paxos/sandbox-deposit', {
            'profile_id': 'prf-1', 'asset': 'USD', 'amount': '100',
        }, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert fake_paxos.body(fake_paxos.calls('POST', '/sandbox/profiles/prf-1/deposit')[0]) == {
            'asset': 'USD', 'amount': '100',
        }

    def test_refused_when_gate_off(self, client, fake_paxos, settings):
        settings.SANDBOX_TOOLS_ENABLED = False

        response = client.post('/api/paxos/sandbox-identity', {'identity_id': 'idt-1'}, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert fake_paxos.requests == []
