"""
Shared fixtures for PostgreSQL integration tests.

Tests using the pool fixture are skipped when DATABASE_URL is unreachable.
"""

from collections.abc import Generator

import psycopg
import pytest
from psycopg_pool import ConnectionPool

from emailgate.adapters.repository.postgres import run_migrations
from emailgate.config.settings import get_settings


@pytest.fixture(scope="module")
def pool() -> Generator[ConnectionPool, None, None]:
    """Create migrated connection pool for integration tests."""
    settings = get_settings()
    try:
        psycopg.connect(settings.database_url, connect_timeout=2).close()
    except psycopg.OperationalError as e:
        pytest.skip(f"PostgreSQL not available: {e}")

    pool = ConnectionPool(
        conninfo=settings.database_url,
        min_size=1,
        max_size=10,
        open=True,
    )
    run_migrations(pool)
    yield pool
    pool.close()


@pytest.fixture
def clean_database(pool: ConnectionPool) -> Generator[None, None, None]:
    """Clean tables before each test."""
    with pool.connection() as conn:
        conn.execute("DELETE FROM pending_verifications")
        conn.execute("DELETE FROM accounts")
        conn.commit()
    yield
