"""
Session Issuer and Token Authentication Tests
"""
import pytest
from django.conf import settings
from django.contrib.auth.hashers import check_password, make_password
from django.http import HttpResponse
from rest_framework import exceptions
from rest_framework.test import APIRequestFactory

from apps.core.authentication import (
    SessionIssuer,
    SessionTokenAuthentication,
    SessionTokenCodec,
    clear_session_cookie,
    read_session_token,
    set_session_cookie,
)
from apps.core.constants import OnboardingStatus
from apps.core.exceptions import DuplicateAccount, InvalidCredentials, NoSuchAccount
from apps.core.models import User
from apps.core.repositories import DjangoUserRepository, InMemoryUserRepository, UserRecord


@pytest.fixture
def issuer(memory_repository):
    return SessionIssuer(repository=memory_repository)


class TestSignUp:

    def test_sign_up_creates_not_started_user(self, issuer, memory_repository):
        session = issuer.sign_up('alice@test.com', 'Passw0rd!')

        record = memory_repository.get_by_email('alice@test.com')
        assert record.onboarding_status == OnboardingStatus.NOT_STARTED
        assert record.password != 'Passw0rd!'
        assert session.claims.onboarding_status == OnboardingStatus.NOT_STARTED
        assert session.claims.summary()['onboarding_status'] == 'NOT_STARTED'

    def test_name_defaults_to_email_local_part(self, issuer):
        session = issuer.sign_up('alice@test.com', 'Passw0rd!')
        assert session.claims.name == 'alice'

    def test_email_is_normalized(self, issuer, memory_repository):
        issuer.sign_up('  Alice@Test.COM ', 'Passw0rd!')
        assert memory_repository.get_by_email('alice@test.com') is not None

    def test_duplicate_email_rejected_and_record_untouched(self, issuer, memory_repository):
        issuer.sign_up('alice@test.com', 'Passw0rd!', name='Alice')
        before = memory_repository.get_by_email('alice@test.com')

        with pytest.raises(DuplicateAccount) as exc_info:
            issuer.sign_up('alice@test.com', 'another-password', name='Mallory')

        assert exc_info.value.status_code == 409
        assert exc_info.value.message == 'User already exists'
        assert memory_repository.get_by_email('alice@test.com') == before

    @pytest.mark.django_db
    def test_concurrent_sign_up_keeps_first_record(self):
        issuer = SessionIssuer(repository=DjangoUserRepository())
        # Row written by another request between lookup and insert
        User.objects.create(email='alice@test.com', name='Alice', password=make_password('Passw0rd!'))

        with pytest.raises(DuplicateAccount):
            issuer.sign_up('alice@test.com', 'another-password', name='Mallory')

        stored = User.objects.get(email='alice@test.com')
        assert stored.name == 'Alice'
        assert check_password('Passw0rd!', stored.password)

    def test_authenticate_dispatches_on_action(self, issuer):
        issuer.authenticate('alice@test.com', 'Passw0rd!', action='signup')
        session = issuer.authenticate('alice@test.com', 'Passw0rd!', action='signin')
        assert session.claims.email == 'alice@test.com'


class TestSignIn:

    def test_unknown_email(self, issuer):
        with pytest.raises(NoSuchAccount) as exc_info:
            issuer.sign_in('nobody@test.com', 'Passw0rd!')
        assert exc_info.value.message == 'No account found with this email'

    def test_wrong_password(self, issuer):
        issuer.sign_up('alice@test.com', 'Passw0rd!')
        with pytest.raises(InvalidCredentials) as exc_info:
            issuer.sign_in('alice@test.com', 'wrong-password')
        assert exc_info.value.message == 'Invalid password'

    def test_token_reflects_stored_status_and_ids(self, memory_repository, issuer):
        memory_repository.upsert(UserRecord(
            email='bob@test.com',
            password=make_password('Passw0rd!'),
            onboarding_status=OnboardingStatus.PROFILE_CREATED.value,
            identity_id='idt-1',
            account_id='acc-1',
            profile_id='prf-1',
        ))

        session = issuer.sign_in('bob@test.com', 'Passw0rd!')
        claims = issuer.decode(session.token)

        assert claims.onboarding_status == OnboardingStatus.PROFILE_CREATED
        assert (claims.identity_id, claims.account_id, claims.profile_id) == ('idt-1', 'acc-1', 'prf-1')


class TestResync:

    def test_resync_updates_store_and_reissues(self, issuer, memory_repository):
        session = issuer.sign_up('alice@test.com', 'Passw0rd!')

        updated = issuer.resync(
            session.claims,
            onboarding_status=OnboardingStatus.APPROVED.value,
            identity_id='idt-1',
            account_id=None,
        )

        assert updated.token != session.token
        assert updated.claims.onboarding_status == OnboardingStatus.APPROVED
        assert updated.claims.identity_id == 'idt-1'
        assert memory_repository.get_by_email('alice@test.com').onboarding_status == 'APPROVED'

    def test_resync_never_regresses_status(self, issuer):
        session = issuer.sign_up('alice@test.com', 'Passw0rd!')
        approved = issuer.resync(session.claims, onboarding_status='APPROVED')

        again = issuer.resync(approved.claims, onboarding_status='IDENTITY_CREATED')

        assert again.claims.onboarding_status == 'APPROVED'

    def test_resync_ignores_unknown_fields(self, issuer, memory_repository):
        session = issuer.sign_up('alice@test.com', 'Passw0rd!')
        issuer.resync(session.claims, password='hijack', email='other@test.com')

        assert issuer.sign_in('alice@test.com', 'Passw0rd!')


class TestSessionTokenCodec:

    def test_decode_rejects_other_secret(self):
        record = UserRecord(email='alice@test.com', password='x')
        token = SessionTokenCodec(secret='one-secret').encode(record).token

        assert SessionTokenCodec(secret='another-secret').decode(token) is None

    def test_decode_rejects_garbage(self):
        assert SessionTokenCodec().decode('not-a-token') is None


class TestSessionCookie:

    def test_cookie_attributes(self):
        response = set_session_cookie(HttpResponse(), 'tok')
        cookie = response.cookies[settings.SESSION_TOKEN_COOKIE_NAME]

        assert cookie.value == 'tok'
        assert cookie['httponly'] is True
        assert cookie['samesite'] == 'Lax'
        assert cookie['path'] == '/'
        assert cookie['max-age'] == settings.SESSION_TOKEN_MAX_AGE

    def test_reissue_overwrites_same_cookie(self):
        response = set_session_cookie(HttpResponse(), 'first')
        set_session_cookie(response, 'second')

        assert response.cookies[settings.SESSION_TOKEN_COOKIE_NAME].value == 'second'
        assert len(response.cookies) == 1

    def test_clear_cookie_expires_it(self):
        response = clear_session_cookie(HttpResponse())
        cookie = response.cookies[settings.SESSION_TOKEN_COOKIE_NAME]

        assert cookie.value == ''
        assert cookie['max-age'] == 0


class TestSessionTokenAuthentication:

    def setup_method(self):
        self.factory = APIRequestFactory()
        self.auth = SessionTokenAuthentication()
        self.issuer = SessionIssuer(repository=InMemoryUserRepository())

    def test_no_token_is_anonymous(self):
        assert self.auth.authenticate(self.factory.get('/api/auth/session')) is None

    def test_cookie_token(self):
        session = self.issuer.sign_up('alice@test.com', 'Passw0rd!')
        request = self.factory.get('/api/auth/session')
        request.COOKIES[settings.SESSION_TOKEN_COOKIE_NAME] = session.token

        claims, token = self.auth.authenticate(request)

        assert claims.email == 'alice@test.com'
        assert token == session.token

    def test_bearer_header(self):
        session = self.issuer.sign_up('alice@test.com', 'Passw0rd!')
        request = self.factory.get('/api/auth/session', HTTP_AUTHORIZATION=f'Bearer {session.token}')

        assert read_session_token(request) == session.token

    def test_invalid_token_raises(self):
        request = self.factory.get('/api/auth/session')
        request.COOKIES[settings.SESSION_TOKEN_COOKIE_NAME] = 'garbage'

        with pytest.raises(exceptions.AuthenticationFailed):
            self.auth.authenticate(request)
