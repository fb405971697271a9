"""
PostgreSQL repository adapters - Implement the account and pending
verification store protocols.

This module provides the PostgreSQL implementations of the domain's
repository ports using psycopg3 with raw SQL.

Email uniqueness is enforced by the accounts_email_unique constraint.
create_account uses INSERT ... ON CONFLICT DO NOTHING, so two concurrent
registrations for the same email can never both succeed.

Every psycopg error, and any parameter that cannot be encoded for the
wire, is translated into the domain's StorageError.
"""

import logging
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import date
from pathlib import Path

import psycopg
from psycopg_pool import ConnectionPool

from emailgate.domain.exceptions import StorageError
from emailgate.domain.ports import Account, PendingVerification

logger = logging.getLogger(__name__)

_ACCOUNT_COLUMNS = "id, name, email, password_hash, date_of_birth, verified"


def _as_uuid(account_id: str) -> uuid.UUID | None:
    """Parse an account id taken from user input; None if malformed."""
    try:
        return uuid.UUID(account_id)
    except (ValueError, AttributeError, TypeError):
        return None


def _row_to_account(row: tuple) -> Account:
    return Account(
        id=str(row[0]),
        name=row[1],
        email=row[2],
        password_hash=row[3],
        date_of_birth=row[4],
        verified=row[5],
    )


class _PostgresRepository:
    def __init__(self, pool: ConnectionPool) -> None:
        """
        Initialize repository with connection pool.

        Args:
            pool: psycopg3 ConnectionPool for database connections
        """
        self._pool = pool

    @contextmanager
    def _connection(self) -> Iterator[psycopg.Connection]:
        try:
            with self._pool.connection() as conn:
                yield conn
        except (psycopg.Error, UnicodeEncodeError) as e:
            raise StorageError(f"database operation failed: {e.__class__.__name__}") from e


class PostgresAccountRepository(_PostgresRepository):
    """
    Implements AccountRepository protocol via psycopg3.

    Uses structural subtyping - no explicit inheritance from Protocol.
    All SQL uses parameterized queries for security.
    """

    def find_account_by_email(self, email: str) -> Account | None:
        sql = f"SELECT {_ACCOUNT_COLUMNS} FROM accounts WHERE email = %s"
        with self._connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (email,))
            row = cursor.fetchone()
        return _row_to_account(row) if row is not None else None

    def find_account_by_id(self, account_id: str) -> Account | None:
        key = _as_uuid(account_id)
        if key is None:
            return None
        sql = f"SELECT {_ACCOUNT_COLUMNS} FROM accounts WHERE id = %s"
        with self._connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (key,))
            row = cursor.fetchone()
        return _row_to_account(row) if row is not None else None

    def create_account(
        self, name: str, email: str, password_hash: str, date_of_birth: date
    ) -> Account | None:
        """
        Atomically create an unverified account.

        Returns:
            The created account, or None if the email is already taken
        """
        sql = f"""
            INSERT INTO accounts (name, email, password_hash, date_of_birth, verified)
            VALUES (%s, %s, %s, %s, FALSE)
            ON CONFLICT (email) DO NOTHING
            RETURNING {_ACCOUNT_COLUMNS}
        """
        with self._connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (name, email, password_hash, date_of_birth))
            row = cursor.fetchone()
            conn.commit()
        return _row_to_account(row) if row is not None else None

    def update_account_verified(self, account_id: str) -> bool:
        key = _as_uuid(account_id)
        if key is None:
            return False
        with self._connection() as conn, conn.cursor() as cursor:
            cursor.execute("UPDATE accounts SET verified = TRUE WHERE id = %s", (key,))
            conn.commit()
            return cursor.rowcount == 1

    def delete_account(self, account_id: str) -> bool:
        key = _as_uuid(account_id)
        if key is None:
            return False
        with self._connection() as conn, conn.cursor() as cursor:
            cursor.execute("DELETE FROM accounts WHERE id = %s", (key,))
            conn.commit()
            return cursor.rowcount == 1

    def ping(self) -> None:
        with self._connection() as conn:
            conn.execute("SELECT 1")


class PostgresPendingVerificationRepository(_PostgresRepository):
    """Implements PendingVerificationRepository protocol via psycopg3."""

    def find_pending_by_account_id(self, account_id: str) -> PendingVerification | None:
        """Return the most recent pending record for the account."""
        key = _as_uuid(account_id)
        if key is None:
            return None
        sql = """
            SELECT account_id, token_hash, created_at, expires_at
            FROM pending_verifications
            WHERE account_id = %s
            ORDER BY created_at DESC, id DESC
            LIMIT 1
        """
        with self._connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (key,))
            row = cursor.fetchone()
        if row is None:
            return None
        return PendingVerification(
            account_id=str(row[0]),
            token_hash=row[1],
            created_at=row[2],
            expires_at=row[3],
        )

    def create_pending(self, pending: PendingVerification) -> None:
        key = _as_uuid(pending.account_id)
        if key is None:
            raise StorageError(f"invalid account id: {pending.account_id!r}")
        sql = """
            INSERT INTO pending_verifications (account_id, token_hash, created_at, expires_at)
            VALUES (%s, %s, %s, %s)
        """
        with self._connection() as conn:
            conn.execute(sql, (key, pending.token_hash, pending.created_at, pending.expires_at))
            conn.commit()

    def delete_pending(self, account_id: str) -> int:
        key = _as_uuid(account_id)
        if key is None:
            return 0
        with self._connection() as conn, conn.cursor() as cursor:
            cursor.execute("DELETE FROM pending_verifications WHERE account_id = %s", (key,))
            conn.commit()
            return cursor.rowcount


def run_migrations(pool: ConnectionPool) -> None:
    """
    Execute all SQL migration files from the migrations directory.

    Migrations are executed in sorted order (alphabetically by filename).
    Each migration should be idempotent (use IF NOT EXISTS, etc.).

    Args:
        pool: psycopg3 ConnectionPool instance
    """
    # Structure: emailgate/adapters/repository/postgres.py -> migrations/
    migrations_dir = Path(__file__).parent.parent.parent.parent / "migrations"

    if not migrations_dir.exists():
        logger.warning("Migrations directory not found: %s", migrations_dir)
        return

    sql_files = sorted(migrations_dir.glob("*.sql"))

    if not sql_files:
        logger.info("No migration files found")
        return

    logger.info("Running %d migration(s)", len(sql_files))

    for sql_file in sql_files:
        logger.info("Executing migration: %s", sql_file.name)
        try:
            sql_content = sql_file.read_text()

            with pool.connection() as conn:
                conn.execute(sql_content)

            logger.info("Migration complete: %s", sql_file.name)
        except Exception as e:
            logger.error("Migration failed: %s - %s", sql_file.name, e)
            raise RuntimeError(f"Database migration failed: {sql_file.name}") from e
