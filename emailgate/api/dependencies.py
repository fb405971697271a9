"""
FastAPI dependencies - Dependency injection factories.

This module provides Depends() factories for injecting domain services
into routes. The stores, hasher and mail sender are process-scoped: they
are created once in the application lifespan and kept on app.state.
"""

from datetime import timedelta

from fastapi import Request

from emailgate.config.settings import Settings
from emailgate.domain.ports import (
    AccountRepository,
    CredentialHasher,
    EmailSender,
    PendingVerificationRepository,
)
from emailgate.domain.registration import RegistrationService
from emailgate.domain.signin import SignInService
from emailgate.domain.verification import VerificationService


def get_app_settings(request: Request) -> Settings:
    """Get the settings the application was created with."""
    return request.app.state.settings


def get_account_repository(request: Request) -> AccountRepository:
    return request.app.state.accounts


def get_pending_repository(request: Request) -> PendingVerificationRepository:
    return request.app.state.pending


def get_email_sender(request: Request) -> EmailSender:
    return request.app.state.email_sender


def get_hasher(request: Request) -> CredentialHasher:
    return request.app.state.hasher


def get_registration_service(request: Request) -> RegistrationService:
    """
    Create registration service with injected dependencies.

    Wires together the stores, hasher and email sender for the domain service.
    """
    settings = get_app_settings(request)
    return RegistrationService(
        accounts=get_account_repository(request),
        pending=get_pending_repository(request),
        email_sender=get_email_sender(request),
        hasher=get_hasher(request),
        base_url=settings.base_url,
        verification_ttl=timedelta(seconds=settings.verification_ttl_seconds),
    )


def get_verification_service(request: Request) -> VerificationService:
    return VerificationService(
        accounts=get_account_repository(request),
        pending=get_pending_repository(request),
        hasher=get_hasher(request),
    )


def get_signin_service(request: Request) -> SignInService:
    return SignInService(
        accounts=get_account_repository(request),
        hasher=get_hasher(request),
    )
