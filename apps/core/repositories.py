"""
Credential Store

Callers depend on the `UserRepository` protocol (lookup by email, insert,
upsert, partial update) rather than on the ORM, so the store can be swapped through
the USER_REPOSITORY_CLASS setting.
"""
import logging
import uuid
from dataclasses import asdict, dataclass, field, replace
from typing import Protocol

from django.conf import settings
from django.db import IntegrityError, transaction
from django.utils.module_loading import import_string

from .constants import OnboardingStatus
from .exceptions import DuplicateAccount, NoSuchAccount

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = frozenset({
    'name',
    'password',
    'identity_id',
    'account_id',
    'profile_id',
    'onboarding_status',
})


def normalize_email(email: str) -> str:
    return (email or '').strip().lower()


@dataclass(frozen=True)
class UserRecord:
    """Snapshot of a stored user, detached from any storage backend."""
    email: str
    password: str
    name: str = ''
    id: uuid.UUID = field(default_factory=uuid.uuid4)
    identity_id: str | None = None
    account_id: str | None = None
    profile_id: str | None = None
    onboarding_status: str = OnboardingStatus.NOT_STARTED.value

    def to_dict(self) -> dict:
        data = asdict(self)
        data.pop('password')
        data['id'] = str(self.id)
        return data


def _apply_changes(record: UserRecord, changes: dict) -> UserRecord:
    unknown = set(changes) - UPDATABLE_FIELDS
    if unknown:
        raise ValueError(f"Cannot update fields: {', '.join(sorted(unknown))}")

    changes = dict(changes)
    if 'onboarding_status' in changes:
        # Status never regresses; a lower proposal keeps the stored value
        changes['onboarding_status'] = OnboardingStatus.advance(
            record.onboarding_status, changes['onboarding_status']
        )
    return replace(record, **changes)


class UserRepository(Protocol):
    def get_by_email(self, email: str) -> UserRecord | None: ...

    def insert(self, record: UserRecord) -> UserRecord: ...

    def upsert(self, record: UserRecord) -> UserRecord: ...

    def update(self, email: str, /, **changes) -> UserRecord: ...


class InMemoryUserRepository:
    """Dict-backed store for isolated tests and local tooling."""

    def __init__(self, records: list[UserRecord] | None = None):
        self._records: dict[str, UserRecord] = {}
        for record in records or []:
            self.upsert(record)

    def get_by_email(self, email: str) -> UserRecord | None:
        return self._records.get(normalize_email(email))

    def insert(self, record: UserRecord) -> UserRecord:
        if normalize_email(record.email) in self._records:
            raise DuplicateAccount()
        return self.upsert(record)

    def upsert(self, record: UserRecord) -> UserRecord:
        record = replace(record, email=normalize_email(record.email))
        existing = self._records.get(record.email)
        if existing is not None:
            record = replace(record, id=existing.id)
        self._records[record.email] = record
        return record

    def update(self, email: str, /, **changes) -> UserRecord:
        record = self.get_by_email(email)
        if record is None:
            raise NoSuchAccount()
        return self.upsert(_apply_changes(record, changes))

    def __len__(self):
        return len(self._records)


class DjangoUserRepository:
    """ORM-backed store over apps.core.models.User."""

    def _to_record(self, user) -> UserRecord:
        return UserRecord(
            id=user.id,
            email=user.email,
            name=user.name,
            password=user.password,
            identity_id=user.identity_id,
            account_id=user.account_id,
            profile_id=user.profile_id,
            onboarding_status=user.onboarding_status,
        )

    def get_by_email(self, email: str) -> UserRecord | None:
        from .models import User

        user = User.objects.filter(email=normalize_email(email)).first()
        if user is None:
            return None
        return self._to_record(user)

    def insert(self, record: UserRecord) -> UserRecord:
        """Create a new user; a concurrent sign-up for the same email loses with DuplicateAccount."""
        from .models import User

        try:
            with transaction.atomic():
                user = User.objects.create(
                    id=record.id,
                    email=normalize_email(record.email),
                    name=record.name,
                    password=record.password,
                    identity_id=record.identity_id,
                    account_id=record.account_id,
                    profile_id=record.profile_id,
                    onboarding_status=record.onboarding_status,
                )
        except IntegrityError as e:
            raise DuplicateAccount() from e
        logger.info(f'Created user record {user.id}')
        return self._to_record(user)

    @transaction.atomic
    def upsert(self, record: UserRecord) -> UserRecord:
        from .models import User

        defaults = {
            'name': record.name,
            'password': record.password,
            'identity_id': record.identity_id,
            'account_id': record.account_id,
            'profile_id': record.profile_id,
            'onboarding_status': record.onboarding_status,
        }
        user, created = User.objects.update_or_create(
            email=normalize_email(record.email),
            defaults=defaults,
            create_defaults={'id': record.id, **defaults},
        )
        if created:
            logger.info(f'Created user record {user.id}')
        return self._to_record(user)

    @transaction.atomic
    def update(self, email: str, /, **changes) -> UserRecord:
        from .models import User

        user = User.objects.select_for_update().filter(email=normalize_email(email)).first()
        if user is None:
            raise NoSuchAccount()

        record = _apply_changes(self._to_record(user), changes)
        for name in changes:
            setattr(user, name, getattr(record, name))
        user.save(update_fields=[*changes, 'updated_at'])
        return record


def get_user_repository() -> UserRepository:
    """Instantiate the configured credential store."""
    repository_class = import_string(settings.USER_REPOSITORY_CLASS)
    return repository_class()
