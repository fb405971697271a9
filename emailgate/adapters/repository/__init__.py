"""Repository adapters - Database implementations."""

from .memory import InMemoryAccountRepository, InMemoryPendingVerificationRepository
from .postgres import (
    PostgresAccountRepository,
    PostgresPendingVerificationRepository,
    run_migrations,
)

__all__ = [
    "InMemoryAccountRepository",
    "InMemoryPendingVerificationRepository",
    "PostgresAccountRepository",
    "PostgresPendingVerificationRepository",
    "run_migrations",
]
