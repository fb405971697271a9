"""
Sign-in domain service - credential check against a verified account.

An unknown email yields a generic InvalidCredentials so account existence
is not revealed. An unverified account yields AccountNotVerified before
the password is compared.
"""

import logging
from dataclasses import dataclass

from .exceptions import (
    AccountNotVerified,
    InfrastructureError,
    InternalError,
    InvalidCredentials,
    InvalidPassword,
    ValidationFailed,
)
from .ports import AccountProfile, AccountRepository, CredentialHasher

logger = logging.getLogger(__name__)


@dataclass
class SignInService:
    """Domain service for credential-based sign-in."""

    accounts: AccountRepository
    hasher: CredentialHasher

    def signin(self, email: str, password: str) -> AccountProfile:
        """
        Authenticate an account by email and password.

        Returns:
            Profile of the authenticated account (never the password hash)

        Raises:
            ValidationFailed: If either field is empty
            InvalidCredentials: If no account uses the email
            AccountNotVerified: If the account email is not verified yet
            InvalidPassword: If the password does not match
            InternalError: If storage or hashing failed
        """
        email = email.strip()
        password = password.strip()
        if not email or not password:
            raise ValidationFailed("Empty credentials supplied")
        if not _is_encodable(email):
            # No stored email can contain it; registration only admits ASCII
            raise InvalidCredentials("Invalid credentials entered!")

        try:
            account = self.accounts.find_account_by_email(email)
        except InfrastructureError as e:
            logger.exception("Account lookup failed during sign-in")
            raise InternalError("An error occurred while checking for existing user") from e

        if account is None:
            raise InvalidCredentials("Invalid credentials entered!")
        if not account.verified:
            raise AccountNotVerified("Email has not been verified yet. Check your inbox.")

        try:
            matches = self.hasher.verify(password, account.password_hash)
        except InfrastructureError as e:
            logger.exception("Password comparison failed for account %s", account.id)
            raise InternalError("An error occurred while comparing passwords") from e

        if not matches:
            raise InvalidPassword("Invalid password entered!")

        logger.info("Account %s signed in", account.id)
        return AccountProfile.from_account(account)


def _is_encodable(value: str) -> bool:
    try:
        value.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True
