"""
In-memory repository adapters - process-local account and pending stores.

Used for development (STORAGE_BACKEND=memory) and tests. Each store guards
its state with a lock so the duplicate-email check in create_account is
atomic, mirroring the UNIQUE constraint of the PostgreSQL schema.
"""

import threading
import uuid
from dataclasses import replace
from datetime import date

from emailgate.domain.ports import Account, PendingVerification


class InMemoryAccountRepository:
    """Implements AccountRepository protocol with a dict keyed by id."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._accounts: dict[str, Account] = {}

    def find_account_by_email(self, email: str) -> Account | None:
        with self._lock:
            for account in self._accounts.values():
                if account.email == email:
                    return account
        return None

    def find_account_by_id(self, account_id: str) -> Account | None:
        with self._lock:
            return self._accounts.get(account_id)

    def create_account(
        self, name: str, email: str, password_hash: str, date_of_birth: date
    ) -> Account | None:
        with self._lock:
            if any(a.email == email for a in self._accounts.values()):
                return None
            account = Account(
                id=str(uuid.uuid4()),
                name=name,
                email=email,
                password_hash=password_hash,
                date_of_birth=date_of_birth,
                verified=False,
            )
            self._accounts[account.id] = account
            return account

    def update_account_verified(self, account_id: str) -> bool:
        with self._lock:
            account = self._accounts.get(account_id)
            if account is None:
                return False
            self._accounts[account_id] = replace(account, verified=True)
            return True

    def delete_account(self, account_id: str) -> bool:
        with self._lock:
            return self._accounts.pop(account_id, None) is not None

    def ping(self) -> None:
        return None

    def __len__(self) -> int:
        with self._lock:
            return len(self._accounts)


class InMemoryPendingVerificationRepository:
    """Implements PendingVerificationRepository protocol."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._records: dict[str, list[PendingVerification]] = {}

    def find_pending_by_account_id(self, account_id: str) -> PendingVerification | None:
        with self._lock:
            records = self._records.get(account_id)
            if not records:
                return None
            # max() keeps the first of equal timestamps; prefer the last inserted
            return max(reversed(records), key=lambda r: r.created_at)

    def create_pending(self, pending: PendingVerification) -> None:
        with self._lock:
            self._records.setdefault(pending.account_id, []).append(pending)

    def delete_pending(self, account_id: str) -> int:
        with self._lock:
            return len(self._records.pop(account_id, []))

    def __len__(self) -> int:
        with self._lock:
            return sum(len(records) for records in self._records.values())
