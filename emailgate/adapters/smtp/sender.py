"""
SMTP email sender adapter - Implements EmailSender protocol over smtplib.

Sends the verification email as plain text with an HTML alternative.
Uses SMTP_SSL (implicit TLS, e.g. port 465) or SMTP + STARTTLS depending
on configuration. Every transport failure is raised as MailDeliveryError.
"""

import html
import logging
import smtplib
from email.message import EmailMessage
from email.utils import formataddr, parseaddr

from emailgate.domain.exceptions import MailDeliveryError

logger = logging.getLogger(__name__)

SUBJECT = "Verify Your Email"


def build_verification_message(sender: str, recipient: str, link: str) -> EmailMessage:
    """Compose the verification email for the given link."""
    display_name, address = parseaddr(sender)
    msg = EmailMessage()
    msg["From"] = formataddr((display_name or "emailgate", address or sender))
    msg["To"] = recipient
    msg["Subject"] = SUBJECT
    msg.set_content(
        "Verify your email address to complete the signup and log into your account.\n"
        "This link expires in 6 hours.\n\n"
        f"{link}\n"
    )
    safe_link = html.escape(link, quote=True)
    msg.add_alternative(
        "<p>Verify your email address to complete the signup and log into your account.</p>"
        "<p>This link <b>expires in 6 hours</b>.</p>"
        f'<p>Press <a href="{safe_link}">here</a> to proceed.</p>',
        subtype="html",
    )
    return msg


class SmtpEmailSender:
    """
    Implements EmailSender protocol via an SMTP relay.

    A new SMTP session is opened per message.
    """

    def __init__(
        self,
        host: str,
        port: int,
        username: str,
        password: str,
        sender: str = "",
        use_ssl: bool = True,
        timeout: float = 20.0,
    ) -> None:
        self._host = host
        self._port = port
        self._username = username
        self._password = password
        self._sender = sender or username
        self._use_ssl = use_ssl
        self._timeout = timeout

    def _open(self) -> smtplib.SMTP:
        if self._use_ssl:
            client: smtplib.SMTP = smtplib.SMTP_SSL(self._host, self._port, timeout=self._timeout)
        else:
            client = smtplib.SMTP(self._host, self._port, timeout=self._timeout)
        try:
            if not self._use_ssl:
                client.starttls()
            if self._username:
                client.login(self._username, self._password)
        except Exception:
            client.close()
            raise
        return client

    def send_verification_link(self, email: str, link: str) -> None:
        """
        Send the verification email.

        Raises:
            MailDeliveryError: If connecting, authenticating or sending failed
        """
        msg = build_verification_message(self._sender, email, link)
        try:
            with self._open() as client:
                client.send_message(msg, from_addr=parseaddr(self._sender)[1] or None)
        except (smtplib.SMTPException, OSError) as e:
            raise MailDeliveryError(f"SMTP delivery to {self._host}:{self._port} failed") from e
        logger.info("Verification email sent to %s", email)

    def check_connection(self) -> bool:
        """
        Open and close an authenticated session to check the relay.

        Returns False instead of raising; used for a startup readiness log.
        """
        try:
            with self._open():
                pass
        except (smtplib.SMTPException, OSError) as e:
            logger.error("SMTP relay %s:%s not ready: %s", self._host, self._port, e)
            return False
        logger.info("SMTP relay %s:%s ready for messages", self._host, self._port)
        return True
