"""
Domain layer - Pure business logic with zero framework imports.

This package contains the account registration, email verification and
sign-in workflows. It defines its own port interfaces for infrastructure
abstraction; adapters live in emailgate.adapters.
"""

from .exceptions import (
    AccountError,
    AccountNotVerified,
    AuthenticationFailed,
    EmailAlreadyRegistered,
    HashingError,
    InfrastructureError,
    InternalError,
    InvalidCredentials,
    InvalidPassword,
    MailDeliveryError,
    StorageError,
    ValidationFailed,
)
from .hashing import BcryptHasher
from .ports import (
    Account,
    AccountProfile,
    AccountRepository,
    CredentialHasher,
    EmailSender,
    PendingVerification,
    PendingVerificationRepository,
    RegisterStatus,
    VerifyResult,
)
from .registration import RegistrationOutcome, RegistrationService
from .signin import SignInService
from .verification import VERIFY_MESSAGES, VerificationService

__all__ = [
    "VERIFY_MESSAGES",
    "Account",
    "AccountError",
    "AccountNotVerified",
    "AccountProfile",
    "AccountRepository",
    "AuthenticationFailed",
    "BcryptHasher",
    "CredentialHasher",
    "EmailAlreadyRegistered",
    "EmailSender",
    "HashingError",
    "InfrastructureError",
    "InternalError",
    "InvalidCredentials",
    "InvalidPassword",
    "MailDeliveryError",
    "PendingVerification",
    "PendingVerificationRepository",
    "RegisterStatus",
    "RegistrationOutcome",
    "RegistrationService",
    "SignInService",
    "StorageError",
    "ValidationFailed",
    "VerificationService",
    "VerifyResult",
]
