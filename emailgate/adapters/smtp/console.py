"""
Console email sender adapter - Implements EmailSender protocol.

This module provides a console-based implementation of the domain's
email sender port, logging verification links for development.
"""

import logging

logger = logging.getLogger(__name__)


class ConsoleEmailSender:
    """
    Implements EmailSender protocol via console logging.

    Uses structural subtyping - no explicit inheritance from Protocol.
    For development purposes - prints verification links to the log.
    """

    def send_verification_link(self, email: str, link: str) -> None:
        """
        Log verification link (simulates email delivery).

        The link is logged at INFO level to be visible in container logs.

        Args:
            email: Recipient email address
            link: Verification link embedding the raw token
        """
        logger.info("[VERIFICATION] Email: %s Link: %s", email, link)

    def check_connection(self) -> bool:
        return True
