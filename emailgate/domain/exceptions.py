"""
Domain exceptions - Semantic error types for account workflows.

This module defines two families of exceptions:

- AccountError and its subclasses communicate business rule violations
  to the HTTP layer. Their message is safe to show to the user.
- InfrastructureError and its subclasses are raised by adapters
  (storage, mail, hashing). Workflows never let them reach the caller;
  they are logged and replaced by a generic InternalError.
"""


class AccountError(Exception):
    """Base class for account domain errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationFailed(AccountError):
    """Malformed or missing input, correctable by the user."""

    pass


class EmailAlreadyRegistered(AccountError):
    """An account already exists for the email address."""

    pass


class AuthenticationFailed(AccountError):
    """Base class for sign-in failures."""

    pass


class InvalidCredentials(AuthenticationFailed):
    """No account matches the supplied email."""

    pass


class InvalidPassword(AuthenticationFailed):
    """Password does not match the stored hash."""

    pass


class AccountNotVerified(AuthenticationFailed):
    """Account exists but its email address has not been verified."""

    pass


class InternalError(AccountError):
    """Infrastructure failure reported to the caller as a generic message."""

    pass


class InfrastructureError(Exception):
    """Base class for adapter failures."""

    pass


class StorageError(InfrastructureError):
    """Persistence layer failure."""

    pass


class MailDeliveryError(InfrastructureError):
    """Outbound mail could not be delivered."""

    pass


class HashingError(InfrastructureError):
    """Hashing primitive failed or a stored hash is malformed."""

    pass
