"""
Unit tests for domain ports and exceptions.

Tests verify:
- Result enums are properly defined
- Exceptions are properly structured
- Domain purity (zero framework imports)
"""

from enum import Enum
from pathlib import Path

import pytest

from emailgate.domain.exceptions import (
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
from emailgate.domain.ports import RegisterStatus, VerifyResult

DOMAIN_DIR = Path(__file__).resolve().parents[2] / "emailgate" / "domain"


class TestVerifyResultEnum:
    """Tests for VerifyResult enum."""

    def test_verify_result_is_enum(self) -> None:
        assert issubclass(VerifyResult, Enum)

    @pytest.mark.parametrize(
        "member,value",
        [
            ("VERIFIED", "verified"),
            ("EXPIRED", "expired"),
            ("INVALID_TOKEN", "invalid_token"),
            ("NOT_FOUND", "not_found"),
        ],
    )
    def test_members(self, member: str, value: str) -> None:
        assert VerifyResult[member].value == value


class TestRegisterStatusEnum:
    def test_register_status_is_str_mixin(self) -> None:
        """RegisterStatus uses str mixin for JSON serialization."""
        assert issubclass(RegisterStatus, str)
        assert RegisterStatus.PENDING.value == "PENDING"
        assert RegisterStatus.FAILED.value == "FAILED"


class TestDomainExceptions:
    """Tests for domain exception hierarchy."""

    @pytest.mark.parametrize(
        "error",
        [ValidationFailed, EmailAlreadyRegistered, AuthenticationFailed, InternalError],
    )
    def test_business_errors_inherit_account_error(self, error: type) -> None:
        assert issubclass(error, AccountError)

    @pytest.mark.parametrize("error", [StorageError, MailDeliveryError, HashingError])
    def test_adapter_errors_inherit_infrastructure_error(self, error: type) -> None:
        assert issubclass(error, InfrastructureError)
        assert not issubclass(error, AccountError)

    @pytest.mark.parametrize("error", [InvalidCredentials, InvalidPassword, AccountNotVerified])
    def test_signin_errors_inherit_authentication_failed(self, error: type) -> None:
        assert issubclass(error, AuthenticationFailed)

    def test_message_attribute(self) -> None:
        error = ValidationFailed("Invalid name entered")
        assert error.message == "Invalid name entered"
        assert str(error) == "Invalid name entered"


class TestDomainPurity:
    """Tests for domain purity - zero framework imports."""

    @pytest.mark.parametrize("module", ["fastapi", "pydantic", "psycopg", "psycopg_pool"])
    def test_no_framework_imports_in_domain(self, module: str) -> None:
        """Domain layer imports no web or database framework."""
        offenders = [
            path.name
            for path in DOMAIN_DIR.glob("*.py")
            for line in path.read_text().splitlines()
            if line.startswith((f"from {module} ", f"from {module}.", f"import {module}"))
        ]
        assert offenders == [], f"{module} imported in domain: {offenders}"
