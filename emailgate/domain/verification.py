"""
Verification domain service - resolves an emailed verification link.

State machine for a (account_id, raw_token) pair:

    lookup pending record
      - none                    -> NOT_FOUND
      - now >= expires_at       -> delete pending + account, EXPIRED
      - token hash mismatch     -> INVALID_TOKEN (record kept, retry possible)
      - token hash match        -> mark verified, delete pending, VERIFIED

NOT_FOUND deliberately covers both unknown ids and accounts that were
already verified; the two cases are not distinguished.

An expired account is deleted: an unverified account is never kept past
its verification window.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime

from .exceptions import InfrastructureError, InternalError
from .ports import (
    AccountRepository,
    CredentialHasher,
    PendingVerificationRepository,
    VerifyResult,
)
from .registration import utc_now

logger = logging.getLogger(__name__)

VERIFY_MESSAGES: dict[VerifyResult, str] = {
    VerifyResult.VERIFIED: "Your email has been verified. You can now sign in.",
    VerifyResult.EXPIRED: "Link has expired. Please sign up again.",
    VerifyResult.INVALID_TOKEN: "Invalid verification details passed. Check your inbox.",
    VerifyResult.NOT_FOUND: (
        "Account record doesn't exist or has been verified already. "
        "Please sign up or log in."
    ),
}


@dataclass
class VerificationService:
    """Domain service resolving verification links against stored records."""

    accounts: AccountRepository
    pending: PendingVerificationRepository
    hasher: CredentialHasher
    clock: Callable[[], datetime] = field(default=utc_now)

    def verify(self, account_id: str, raw_token: str) -> VerifyResult:
        """
        Verify an account from the id and raw token of its emailed link.

        Args:
            account_id: Account id from the link
            raw_token: Unhashed token from the link

        Returns:
            VerifyResult indicating success or the refusal reason

        Raises:
            InternalError: If storage or hashing failed
        """
        try:
            record = self.pending.find_pending_by_account_id(account_id)
        except InfrastructureError as e:
            logger.exception("Pending verification lookup failed")
            raise InternalError(
                "An error occurred while checking for existing user verification record"
            ) from e

        if record is None:
            return VerifyResult.NOT_FOUND

        if self.clock() >= record.expires_at:
            self._discard_expired(account_id)
            logger.info("Verification link for account %s expired, registration discarded", account_id)
            return VerifyResult.EXPIRED

        try:
            matches = self.hasher.verify(raw_token, record.token_hash)
        except InfrastructureError as e:
            logger.exception("Token comparison failed for account %s", account_id)
            raise InternalError("An error occurred while comparing unique strings.") from e

        if not matches:
            logger.warning("Invalid verification token for account %s", account_id)
            return VerifyResult.INVALID_TOKEN

        try:
            self.accounts.update_account_verified(account_id)
        except InfrastructureError as e:
            logger.exception("Marking account %s verified failed", account_id)
            raise InternalError(
                "An error occurred while updating user record to show verified"
            ) from e

        try:
            self.pending.delete_pending(account_id)
        except InfrastructureError as e:
            # Account stays verified; the stale pending record is harmless
            logger.exception("Deleting pending verification for account %s failed", account_id)
            raise InternalError(
                "An error occurred while finalizing successful verification."
            ) from e

        logger.info("Account %s verified", account_id)
        return VerifyResult.VERIFIED

    def _discard_expired(self, account_id: str) -> None:
        try:
            self.pending.delete_pending(account_id)
        except InfrastructureError as e:
            logger.exception("Clearing expired pending verification failed")
            raise InternalError(
                "An error occurred while clearing expired user verification record"
            ) from e

        try:
            self.accounts.delete_account(account_id)
        except InfrastructureError as e:
            logger.exception("Clearing expired account %s failed", account_id)
            raise InternalError("Clearing user with expired unique string failed") from e
