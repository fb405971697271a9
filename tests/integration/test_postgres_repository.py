"""
Integration tests for the PostgreSQL repository adapters.

Tests repository operations against a real PostgreSQL database.
Requires PostgreSQL to be running (DATABASE_URL); skipped otherwise.
"""

import uuid
from concurrent.futures import ThreadPoolExecutor
from datetime import date, datetime, timedelta, timezone

import pytest
from psycopg_pool import ConnectionPool

from emailgate.adapters.repository.postgres import (
    PostgresAccountRepository,
    PostgresPendingVerificationRepository,
)
from emailgate.domain.exceptions import StorageError
from emailgate.domain.ports import PendingVerification

pytestmark = [pytest.mark.integration, pytest.mark.usefixtures("clean_database")]

T0 = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def accounts(pool: ConnectionPool) -> PostgresAccountRepository:
    return PostgresAccountRepository(pool)


@pytest.fixture
def pending(pool: ConnectionPool) -> PostgresPendingVerificationRepository:
    return PostgresPendingVerificationRepository(pool)


def create_ann(accounts: PostgresAccountRepository):
    return accounts.create_account("Ann Lee", "ann@example.com", "$2b$10$hash", date(1990, 1, 1))


def record(account_id: str, token_hash: str, created_at: datetime = T0) -> PendingVerification:
    return PendingVerification(
        account_id=account_id,
        token_hash=token_hash,
        created_at=created_at,
        expires_at=created_at + timedelta(hours=6),
    )


class TestAccounts:
    """Tests for PostgresAccountRepository."""

    def test_create_account_returns_record(self, accounts: PostgresAccountRepository) -> None:
        account = create_ann(accounts)
        assert account is not None
        assert uuid.UUID(account.id)
        assert account.verified is False
        assert account.date_of_birth == date(1990, 1, 1)

    def test_create_duplicate_email_returns_none(self, accounts: PostgresAccountRepository) -> None:
        """Duplicate email returns None (not exception)."""
        assert create_ann(accounts) is not None
        assert create_ann(accounts) is None

    def test_find_by_email_and_id(self, accounts: PostgresAccountRepository) -> None:
        account = create_ann(accounts)
        assert accounts.find_account_by_email("ann@example.com") == account
        assert accounts.find_account_by_id(account.id) == account
        assert accounts.find_account_by_email("ANN@example.com") is None

    def test_malformed_id_is_not_found(self, accounts: PostgresAccountRepository) -> None:
        """Ids from links that are not UUIDs never reach SQL."""
        assert accounts.find_account_by_id("6543b9e9a569b0b7b9f06498") is None
        assert accounts.update_account_verified("not-a-uuid") is False
        assert accounts.delete_account("not-a-uuid") is False

    def test_update_verified(self, accounts: PostgresAccountRepository) -> None:
        account = create_ann(accounts)
        assert accounts.update_account_verified(account.id) is True
        assert accounts.find_account_by_id(account.id).verified is True

    def test_delete_account_cascades_pending(
        self, accounts: PostgresAccountRepository, pending: PostgresPendingVerificationRepository
    ) -> None:
        account = create_ann(accounts)
        pending.create_pending(record(account.id, "$2b$10$token"))
        assert accounts.delete_account(account.id) is True
        assert pending.find_pending_by_account_id(account.id) is None

    def test_concurrent_create_exactly_one_succeeds(self, pool: ConnectionPool) -> None:
        """UNIQUE constraint admits exactly one account per email."""

        def attempt() -> bool:
            return create_ann(PostgresAccountRepository(pool)) is not None

        with ThreadPoolExecutor(max_workers=5) as executor:
            results = [f.result() for f in [executor.submit(attempt) for _ in range(10)]]

        assert results.count(True) == 1

    def test_ping(self, accounts: PostgresAccountRepository) -> None:
        accounts.ping()


class TestPendingVerifications:
    """Tests for PostgresPendingVerificationRepository."""

    def test_round_trip(
        self, accounts: PostgresAccountRepository, pending: PostgresPendingVerificationRepository
    ) -> None:
        account = create_ann(accounts)
        stored = record(account.id, "$2b$10$token")
        pending.create_pending(stored)
        assert pending.find_pending_by_account_id(account.id) == stored

    def test_most_recent_record_returned(
        self, accounts: PostgresAccountRepository, pending: PostgresPendingVerificationRepository
    ) -> None:
        account = create_ann(accounts)
        pending.create_pending(record(account.id, "newer", T0 + timedelta(minutes=1)))
        pending.create_pending(record(account.id, "older", T0))
        assert pending.find_pending_by_account_id(account.id).token_hash == "newer"

    def test_delete_pending_removes_all(
        self, accounts: PostgresAccountRepository, pending: PostgresPendingVerificationRepository
    ) -> None:
        account = create_ann(accounts)
        pending.create_pending(record(account.id, "one"))
        pending.create_pending(record(account.id, "two", T0 + timedelta(seconds=1)))
        assert pending.delete_pending(account.id) == 2
        assert pending.find_pending_by_account_id(account.id) is None

    def test_pending_for_unknown_account_is_storage_error(
        self, pending: PostgresPendingVerificationRepository
    ) -> None:
        """Foreign key violation surfaces as StorageError."""
        with pytest.raises(StorageError):
            pending.create_pending(record(str(uuid.uuid4()), "orphan"))
