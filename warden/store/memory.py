"""
In-Memory Credential Store
==========================

Process-local account store for tests and local development
(``STORE_BACKEND=memory``). A single ``asyncio.Lock`` makes each
uniqueness check atomic with the write it guards.

Version: 0.1.0
"""

import asyncio
import uuid
from typing import Any

from warden.errors import DuplicateError
from warden.logging import get_logger
from warden.models.account import Account, Role, utcnow
from warden.store.base import CredentialStore, check_changes

logger = get_logger(__name__)


class MemoryCredentialStore(CredentialStore):
    """Dict-backed store keyed by account ID."""

    backend = "memory"

    def __init__(self) -> None:
        self._accounts: dict[str, Account] = {}
        self._lock = asyncio.Lock()

    async def ping(self) -> bool:
        return True

    def _taken(self, *, username: str | None = None, email: str | None = None, exclude: str | None = None) -> bool:
        for account in self._accounts.values():
            if account.id == exclude:
                continue
            if username is not None and account.username == username:
                return True
            if email is not None and account.email == email:
                return True
        return False

    async def create(
        self,
        username: str,
        email: str,
        password_hash: str,
        role: Role = Role.USER,
    ) -> Account:
        async with self._lock:
            if self._taken(username=username, email=email):
                logger.info("account_duplicate_rejected", username=username)
                raise DuplicateError()
            now = utcnow()
            account = Account(
                id=uuid.uuid4().hex,
                username=username,
                email=email,
                password_hash=password_hash,
                role=role,
                created_at=now,
                updated_at=now,
            )
            self._accounts[account.id] = account
            return account.model_copy()

    async def get_by_id(self, account_id: str) -> Account | None:
        account = self._accounts.get(account_id)
        return account.model_copy() if account else None

    async def get_by_username(self, username: str) -> Account | None:
        for account in self._accounts.values():
            if account.username == username:
                return account.model_copy()
        return None

    async def list_usernames(self) -> list[str]:
        return sorted(a.username for a in self._accounts.values())

    async def update(self, account_id: str, changes: dict[str, Any]) -> Account | None:
        changes = check_changes(changes)
        async with self._lock:
            current = self._accounts.get(account_id)
            if current is None:
                return None
            if "email" in changes and self._taken(email=changes["email"], exclude=account_id):
                raise DuplicateError()
            updated = current.model_copy(update={**changes, "updated_at": utcnow()})
            # model_copy skips validation; re-validate so role strings become Role
            updated = Account.model_validate(updated.model_dump())
            self._accounts[account_id] = updated
            return updated.model_copy()

    async def delete(self, account_id: str) -> bool:
        async with self._lock:
            return self._accounts.pop(account_id, None) is not None
