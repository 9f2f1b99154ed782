"""
Onboarding Wizard View Tests
"""
import httpx
import pytest
from rest_framework import status

from apps.core.models import User
from tests.fakes import ACCOUNT_ID, IDENTITY_ID, PROFILE_ID

from .helpers import ADDRESS, PERSON, TAX, front_upload


@pytest.fixture
def client(authenticated_client):
    api_client, _ = authenticated_client
    return api_client


def walk_to(client, last_step):
    """Complete every wizard step up to and including `last_step`."""
    steps = [
        ('identity', {'identity_type': 'PERSON'}),
        ('personal-info', PERSON),
        ('address', ADDRESS),
        ('tax-details', TAX),
        ('documents', None),
    ]
    for slug, data in steps:
        if slug == 'documents':
            response = client.post(
                '/onboarding/documents',
                {'document_type': 'PASSPORT', 'front_file': front_upload()},
                format='multipart',
            )
        else:
            response = client.post(f'/onboarding/{slug}', data, format='json')
        assert response.status_code == status.HTTP_200_OK, response.json()
        if slug == last_step:
            return response


def submit(client):
    walk_to(client, 'documents')
    return client.post('/onboarding/review', {'terms_accepted': True}, format='json')


@pytest.mark.django_db
class TestWelcome:

    def test_requires_session(self, api_client):
        response = api_client.get('/onboarding/welcome')

        assert response.status_code == status.HTTP_302_FOUND
        assert response['Location'].startswith('/sign-in?callbackUrl=')

    def test_empty_draft(self, client):
        response = client.get('/onboarding/welcome')

        assert response.status_code == status.HTTP_200_OK
        assert response.json()['current_step'] == 1
        assert response.json()['resume'] == '/onboarding/identity'

    def test_start(self, client):
        response = client.post('/onboarding/welcome', format='json')
        assert response.json() == {'step': 'identity', 'redirect': '/onboarding/identity'}

    def test_resume_after_progress(self, client):
        walk_to(client, 'address')
        assert client.get('/onboarding/welcome').json()['resume'] == '/onboarding/tax-details'


@pytest.mark.django_db
class TestWizardSteps:

    def test_continue_advances(self, client):
        response = client.post('/onboarding/identity', {'identity_type': 'PERSON'}, format='json')
        assert response.json() == {'step': 'personal-info', 'redirect': '/onboarding/personal-info'}

    def test_errors_are_inline_and_data_kept(self, client):
        client.post('/onboarding/identity', {'identity_type': 'PERSON'}, format='json')

        response = client.post('/onboarding/personal-info', {'first_name': 'Alice'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()['details']['last_name'] == 'This field is required'
        data = client.get('/onboarding/personal-info').json()['data']
        assert data['first_name'] == 'Alice'

    def test_unreachable_step_redirects(self, client):
        response = client.get('/onboarding/tax-details')

        assert response.status_code == status.HTTP_302_FOUND
        assert response['Location'] == '/onboarding/personal-info'

    def test_back(self, client):
        walk_to(client, 'address')

        response = client.post('/onboarding/tax-details', {'action': 'back'}, format='json')

        assert response.json()['redirect'] == '/onboarding/address'
        assert client.get('/onboarding/address').json()['data']['city'] == 'Springfield'

    def test_save_without_validation(self, client):
        response = client.post('/onboarding/personal-info', {'action': 'save', 'first_name': 'Al'}, format='json')

        assert response.json()['step'] == 'personal-info'
        assert client.get('/onboarding/personal-info').json()['data']['first_name'] == 'Al'

    def test_unknown_action(self, client):
        response = client.post('/onboarding/identity', {'action': 'jump'}, format='json')
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_only_documents_can_be_skipped(self, client):
        response = client.post('/onboarding/address', {'action': 'skip'}, format='json')
        assert response.json()['details'] == {'action': 'Only the documents step can be skipped'}

    def test_document_binary_not_in_draft(self, client):
        walk_to(client, 'documents')

        documents = client.get('/onboarding/documents').json()['data']

        assert documents['document_ids'] == ['front:passport.jpg']
        assert 'front_file' not in documents

    def test_skip_documents(self, client):
        walk_to(client, 'tax-details')

        response = client.post('/onboarding/documents', {'action': 'skip'}, format='json')

        assert response.json()['redirect'] == '/onboarding/review'
        assert client.get('/onboarding/review').status_code == status.HTTP_200_OK

    def test_discard_draft(self, client):
        walk_to(client, 'address')

        assert client.delete('/onboarding/draft').status_code == status.HTTP_204_NO_CONTENT
        assert client.get('/onboarding/welcome').json()['current_step'] == 1


@pytest.mark.django_db
class TestReview:

    def test_terms_required(self, client, paxos_onboarding):
        walk_to(client, 'documents')

        response = client.post('/onboarding/review', {'terms_accepted': False}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'terms_accepted' in response.json()['details']
        assert paxos_onboarding.requests == []

    def test_submit(self, authenticated_client, paxos_onboarding):
        client, user = authenticated_client

        response = submit(client)

        assert response.status_code == status.HTTP_200_OK
        assert response.json()['redirect'] == '/onboarding/pending'
        assert response.json()['identity_id'] == IDENTITY_ID

        user.refresh_from_db()
        assert user.onboarding_status == 'PROFILE_CREATED'
        assert (user.identity_id, user.account_id, user.profile_id) == (IDENTITY_ID, ACCOUNT_ID, PROFILE_ID)

        session = client.get('/api/auth/session').json()['user']
        assert session['onboarding_status'] == 'PROFILE_CREATED'

    def test_upstream_rejection(self, client, fake_paxos):
        fake_paxos.add('POST', '/identity/identities', 422, {'message': 'invalid cip_id'})
        walk_to(client, 'documents')

        response = client.post('/onboarding/review', {'terms_accepted': True}, format='json')

        assert response.status_code == 422
        assert response.json()['message'] == 'invalid cip_id'


@pytest.mark.django_db
class TestVerification:

    def test_pending_without_submission(self, client):
        response = client.get('/onboarding/pending')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()['message'] == 'No submitted application'

    def test_pending(self, client, paxos_onboarding):
        submit(client)

        response = client.get('/onboarding/pending')

        assert response.json() == {'identity_id': IDENTITY_ID, 'status': 'PENDING', 'redirect': None}

    def test_pending_survives_upstream_outage(self, client, paxos_onboarding):
        submit(client)
        paxos_onboarding.add('GET', f'/identity/identities/{IDENTITY_ID}', 503, {'message': 'down'})

        assert client.get('/onboarding/pending').json()['status'] == 'PENDING'

    def test_pending_survives_unreadable_response(self, client, paxos_onboarding):
        submit(client)
        paxos_onboarding.add(
            'GET', f'/identity/identities/{IDENTITY_ID}',
            handler=lambda request: httpx.Response(200, text='<html>gateway</html>'),
        )

        response = client.get('/onboarding/pending')

        assert response.status_code == status.HTTP_200_OK
        assert response.json()['status'] == 'PENDING'

    def test_pending_sees_approval(self, client, paxos_onboarding, identity_status):
        submit(client)
        identity_status['summary_status'] = 'APPROVED'

        assert client.get('/onboarding/pending').json()['redirect'] == '/onboarding/approved'

    def test_approved_before_approval(self, client, paxos_onboarding):
        submit(client)

        response = client.get('/onboarding/approved')

        assert response.status_code == status.HTTP_409_CONFLICT

    def test_approved(self, authenticated_client, paxos_onboarding, identity_status):
        client, user = authenticated_client
        submit(client)
        identity_status['summary_status'] = 'APPROVED'

        response = client.get('/onboarding/approved')

        assert response.status_code == status.HTTP_200_OK
        assert response.json()['redirect'] == '/dashboard'
        assert User.objects.get(pk=user.pk).onboarding_status == 'APPROVED'
        assert client.get('/dashboard').status_code == status.HTTP_200_OK

    def test_denied(self, client, paxos_onboarding, identity_status):
        submit(client)
        identity_status.update(summary_status='DENIED', summary={'reason': 'INFO_MISMATCH'})

        response = client.get('/onboarding/denied')

        assert response.json()['reason'] == 'INFO_MISMATCH'
        assert response.json()['guidance']['title'] == 'Information Mismatch'
        assert response.json()['resubmit'] == '/onboarding/review'

    def test_denied_when_identity_unreadable(self, client, paxos_onboarding):
        submit(client)
        paxos_onboarding.add('GET', f'/identity/identities/{IDENTITY_ID}', 500, {})

        response = client.get('/onboarding/denied')

        assert response.json()['reason'] == 'VERIFICATION_FAILED'
        assert response.json()['details'] == 'Your identity verification was not successful. Please try again.'

    def test_sandbox_approve(self, client, paxos_onboarding):
        submit(client)

        response = client.post('/onboarding/pending/sandbox-approve')

        assert response.json()['redirect'] == '/onboarding/approved'
        assert len(paxos_onboarding.calls('PUT', f'/identity/identities/{IDENTITY_ID}/sandbox-status')) == 2

    def test_sandbox_approve_disabled(self, client, paxos_onboarding, settings):
        submit(client)
        settings.SANDBOX_TOOLS_ENABLED = False

        response = client.post('/onboarding/pending/sandbox-approve')

        assert response.status_code == status.HTTP_403_FORBIDDEN


def read_events(response) -> str:
    return b''.join(response.streaming_content).decode()


@pytest.mark.django_db
class TestStatusStream:

    def test_no_submission(self, client):
        response = client.get('/onboarding/pending/stream')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'event: error' in read_events(response)

    def test_approved_event(self, client, paxos_onboarding, identity_status):
        submit(client)
        identity_status['summary_status'] = 'APPROVED'

        response = client.get('/onboarding/pending/stream')

        assert response['Content-Type'] == 'text/event-stream'
        events = read_events(response)
        assert 'event: approved' in events
        assert '"redirect": "/onboarding/approved"' in events

    def test_denied_event_carries_guidance(self, client, paxos_onboarding, identity_status):
        submit(client)
        identity_status.update(summary_status='DENIED', summary={'reason': 'DOCUMENT_ISSUE'})

        events = read_events(client.get('/onboarding/pending/stream'))

        assert 'event: denied' in events
        assert 'Document Issue' in events

    def test_timeout(self, client, paxos_onboarding, settings):
        submit(client)
        settings.ONBOARDING_POLL_MAX_DURATION = 0

        events = read_events(client.get('/onboarding/pending/stream'))

        assert events.startswith('event: status')
        assert events.rstrip().endswith('data: {"message": "Stream timeout"}')
