"""
Registration domain service - signup and verification token issuance.

Registration flow (short-circuits on the first failure):

    validate input -> duplicate check -> hash password -> create account
        -> issue token -> persist pending record -> send verification link

The password is never hashed before the duplicate check passes.

The raw verification token (random nonce + account id) only ever exists in
the emailed link. The store keeps its bcrypt hash and an absolute expiry,
computed once as created_at + verification_ttl.
"""

import logging
import re
import secrets
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone

from .exceptions import (
    EmailAlreadyRegistered,
    InfrastructureError,
    InternalError,
    ValidationFailed,
)
from .ports import (
    Account,
    AccountRepository,
    CredentialHasher,
    EmailSender,
    PendingVerification,
    PendingVerificationRepository,
    RegisterStatus,
)

logger = logging.getLogger(__name__)

NAME_PATTERN = re.compile(r"^[A-Za-z ]*$")
EMAIL_PATTERN = re.compile(r"^[\w.-]+@([\w-]+\.)+[\w-]{2,4}$", re.ASCII)
MIN_PASSWORD_LENGTH = 8
DEFAULT_VERIFICATION_TTL = timedelta(hours=6)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class RegistrationOutcome:
    """Result of a successful registration request."""

    status: RegisterStatus
    message: str
    account_id: str


@dataclass
class RegistrationService:
    """
    Domain service for user registration.

    Orchestrates the registration flow: input validation, duplicate
    check, password hashing, account persistence and token issuance.
    """

    accounts: AccountRepository
    pending: PendingVerificationRepository
    email_sender: EmailSender
    hasher: CredentialHasher
    base_url: str = "http://localhost:5000"
    verification_ttl: timedelta = DEFAULT_VERIFICATION_TTL
    clock: Callable[[], datetime] = field(default=utc_now)

    def register(
        self, name: str, email: str, password: str, date_of_birth: str
    ) -> RegistrationOutcome:
        """
        Register a new, unverified account and email its verification link.

        Args:
            name: Display name (letters and spaces)
            email: Email address, matched exactly after trimming
            password: Plaintext password (min 8 characters)
            date_of_birth: ISO calendar date, e.g. 1990-01-01

        Returns:
            PENDING outcome carrying the new account id

        Raises:
            ValidationFailed: If any input is malformed
            EmailAlreadyRegistered: If an account already uses the email
            InternalError: If storage, hashing or mail delivery failed
        """
        name, email, password, date_of_birth = (
            name.strip(),
            email.strip(),
            password.strip(),
            date_of_birth.strip(),
        )
        birth_date = self._validate(name, email, password, date_of_birth)

        try:
            existing = self.accounts.find_account_by_email(email)
        except InfrastructureError as e:
            logger.exception("Duplicate check failed")
            raise InternalError("An error occurred while checking for existing user!") from e
        if existing is not None:
            raise EmailAlreadyRegistered("User with the provided email already exists")

        try:
            password_hash = self.hasher.hash(password)
        except InfrastructureError as e:
            logger.exception("Password hashing failed")
            raise InternalError("An error occurred while hashing password!") from e

        try:
            account = self.accounts.create_account(name, email, password_hash, birth_date)
        except InfrastructureError as e:
            logger.exception("Account creation failed")
            raise InternalError("An error occurred while saving user account!") from e
        if account is None:
            # Lost a race against a concurrent registration for the same email
            raise EmailAlreadyRegistered("User with the provided email already exists")

        logger.info("Account %s created, issuing verification token", account.id)
        self._send_verification(account)
        return RegistrationOutcome(
            status=RegisterStatus.PENDING,
            message="Verification email sent",
            account_id=account.id,
        )

    def verification_link(self, account_id: str, raw_token: str) -> str:
        """Build the link embedding the account id and raw token."""
        return f"{self.base_url.rstrip('/')}/v1/user/verify/{account_id}/{raw_token}"

    def _send_verification(self, account: Account) -> None:
        raw_token = self._generate_raw_token(account.id)

        try:
            token_hash = self.hasher.hash(raw_token)
        except InfrastructureError as e:
            logger.exception("Token hashing failed for account %s", account.id)
            self._discard_account(account)
            raise InternalError("An error occurred while hashing email data!") from e

        created_at = self.clock()
        record = PendingVerification(
            account_id=account.id,
            token_hash=token_hash,
            created_at=created_at,
            expires_at=created_at + self.verification_ttl,
        )
        try:
            self.pending.create_pending(record)
        except InfrastructureError as e:
            logger.exception("Saving pending verification failed for account %s", account.id)
            self._discard_account(account)
            raise InternalError("Couldn't save verification email data!") from e

        try:
            self.email_sender.send_verification_link(
                account.email, self.verification_link(account.id, raw_token)
            )
        except InfrastructureError as e:
            logger.exception("Verification email failed for account %s", account.id)
            raise InternalError("Verification email failed!") from e

    def _discard_account(self, account: Account) -> None:
        """Remove an account that never received a pending record."""
        try:
            self.accounts.delete_account(account.id)
        except InfrastructureError:
            logger.exception("Could not discard account %s without pending record", account.id)

    def _validate(self, name: str, email: str, password: str, date_of_birth: str) -> date:
        if not name or not email or not password or not date_of_birth:
            raise ValidationFailed("Empty input fields!")
        if not NAME_PATTERN.match(name):
            raise ValidationFailed("Invalid name entered")
        if not EMAIL_PATTERN.match(email):
            raise ValidationFailed("Invalid email entered")
        birth_date = parse_date_of_birth(date_of_birth)
        if birth_date is None:
            raise ValidationFailed("Invalid date of birth entered (expected YYYY-MM-DD)")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationFailed("Password is too short!")
        return birth_date

    def _generate_raw_token(self, account_id: str) -> str:
        """
        Generate the raw verification token.

        Uses secrets module for cryptographic randomness. The nonce is
        URL-safe so the token can be embedded in a link path.
        """
        return secrets.token_urlsafe(32) + account_id


def parse_date_of_birth(value: str) -> date | None:
    """Parse an ISO date or datetime string, returning None if invalid."""
    try:
        return date.fromisoformat(value)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(value).date()
    except ValueError:
        return None
