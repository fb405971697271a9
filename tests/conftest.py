"""
Shared test fixtures and configuration.

This module provides pytest fixtures for:
- In-memory stores and a low-cost bcrypt hasher
- A controllable clock for expiry tests
- A recording email sender that captures verification links
- Domain services wired from the above
"""

from collections.abc import Callable
from datetime import datetime, timedelta, timezone

import pytest

from emailgate.adapters.repository.memory import (
    InMemoryAccountRepository,
    InMemoryPendingVerificationRepository,
)
from emailgate.domain.exceptions import MailDeliveryError
from emailgate.domain.hashing import BcryptHasher
from emailgate.domain.registration import RegistrationService
from emailgate.domain.signin import SignInService
from emailgate.domain.verification import VerificationService


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now += delta


class RecordingEmailSender:
    """EmailSender that stores every (email, link) pair it is given."""

    def __init__(self) -> None:
        self.sent: list[tuple[str, str]] = []
        self.fail = False

    def send_verification_link(self, email: str, link: str) -> None:
        if self.fail:
            raise MailDeliveryError("relay unavailable")
        self.sent.append((email, link))

    @property
    def last_link(self) -> str:
        return self.sent[-1][1]


def split_link(link: str) -> tuple[str, str]:
    """Return (account_id, raw_token) from a verification link."""
    *_, account_id, raw_token = link.split("/")
    return account_id, raw_token


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc))


@pytest.fixture(scope="session")
def hasher() -> BcryptHasher:
    """bcrypt at minimum cost to keep the suite fast."""
    return BcryptHasher(cost=4)


@pytest.fixture
def accounts() -> InMemoryAccountRepository:
    return InMemoryAccountRepository()


@pytest.fixture
def pending() -> InMemoryPendingVerificationRepository:
    return InMemoryPendingVerificationRepository()


@pytest.fixture
def sender() -> RecordingEmailSender:
    return RecordingEmailSender()


@pytest.fixture
def registration(
    accounts: InMemoryAccountRepository,
    pending: InMemoryPendingVerificationRepository,
    sender: RecordingEmailSender,
    hasher: BcryptHasher,
    clock: FakeClock,
) -> RegistrationService:
    return RegistrationService(
        accounts=accounts,
        pending=pending,
        email_sender=sender,
        hasher=hasher,
        base_url="http://localhost:3000",
        clock=clock,
    )


@pytest.fixture
def verification(
    accounts: InMemoryAccountRepository,
    pending: InMemoryPendingVerificationRepository,
    hasher: BcryptHasher,
    clock: FakeClock,
) -> VerificationService:
    return VerificationService(accounts=accounts, pending=pending, hasher=hasher, clock=clock)


@pytest.fixture
def signin_service(accounts: InMemoryAccountRepository, hasher: BcryptHasher) -> SignInService:
    return SignInService(accounts=accounts, hasher=hasher)


@pytest.fixture
def link_parts() -> Callable[[str], tuple[str, str]]:
    return split_link
