"""
Port interfaces - Protocol definitions for infrastructure abstraction.

This module defines the entities and interfaces (ports) that the domain
requires from infrastructure. Adapters implement these protocols.
"""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Protocol


@dataclass(frozen=True)
class Account:
    """Stored account record."""

    id: str
    name: str
    email: str
    password_hash: str
    date_of_birth: date
    verified: bool = False


@dataclass(frozen=True)
class AccountProfile:
    """Non-sensitive view of an account returned after sign-in."""

    id: str
    name: str
    email: str
    date_of_birth: date
    verified: bool

    @classmethod
    def from_account(cls, account: Account) -> "AccountProfile":
        return cls(
            id=account.id,
            name=account.name,
            email=account.email,
            date_of_birth=account.date_of_birth,
            verified=account.verified,
        )


@dataclass(frozen=True)
class PendingVerification:
    """
    Time-boxed, single-use token record gating an account's verification.

    Only the hash of the raw token is stored. expires_at is computed once
    at creation and never extended.
    """

    account_id: str
    token_hash: str
    created_at: datetime
    expires_at: datetime


class RegisterStatus(str, Enum):
    """Terminal status of a registration request."""

    PENDING = "PENDING"
    FAILED = "FAILED"


class VerifyResult(Enum):
    """
    Result of a verification attempt.

    Used by VerificationService.verify() to indicate success or the
    specific reason the link was refused.
    """

    VERIFIED = "verified"
    EXPIRED = "expired"
    INVALID_TOKEN = "invalid_token"
    NOT_FOUND = "not_found"


class AccountRepository(Protocol):
    """
    Port interface for account persistence.

    Every method raises StorageError on infrastructure failure.
    """

    def find_account_by_email(self, email: str) -> Account | None:
        """Return the account with exactly this email, if any."""
        ...

    def find_account_by_id(self, account_id: str) -> Account | None:
        """Return the account with this id, if any."""
        ...

    def create_account(
        self, name: str, email: str, password_hash: str, date_of_birth: date
    ) -> Account | None:
        """
        Atomically create an unverified account.

        Returns:
            The created account, or None if the email is already taken
        """
        ...

    def update_account_verified(self, account_id: str) -> bool:
        """Set verified=true. Returns False if the account does not exist."""
        ...

    def delete_account(self, account_id: str) -> bool:
        """Delete the account. Returns False if it did not exist."""
        ...

    def ping(self) -> None:
        """Check that the store is reachable."""
        ...


class PendingVerificationRepository(Protocol):
    """
    Port interface for pending-verification persistence.

    Every method raises StorageError on infrastructure failure.
    """

    def find_pending_by_account_id(self, account_id: str) -> PendingVerification | None:
        """Return the most recent pending record for the account, if any."""
        ...

    def create_pending(self, pending: PendingVerification) -> None:
        """Persist a new pending record."""
        ...

    def delete_pending(self, account_id: str) -> int:
        """Delete all pending records for the account. Returns the count removed."""
        ...


class EmailSender(Protocol):
    """Port interface for email delivery."""

    def send_verification_link(self, email: str, link: str) -> None:
        """
        Send the verification link to the email address.

        Raises:
            MailDeliveryError: If the message could not be delivered
        """
        ...


class CredentialHasher(Protocol):
    """Port interface for one-way secret hashing."""

    def hash(self, secret: str | bytes) -> str:
        """Return a salted one-way hash of the secret."""
        ...

    def verify(self, secret: str | bytes, hashed: str) -> bool:
        """Return True if the secret matches the hash."""
        ...
