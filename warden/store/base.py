"""
Credential Store Interface
==========================

Contract shared by the MongoDB and in-memory account stores.

Version: 0.1.0
"""

from abc import ABC, abstractmethod
from typing import Any

from warden.models.account import Account, Role


class CredentialStore(ABC):
    """
    Persists account records and enforces username/email uniqueness.

    Implementations raise ``DuplicateError`` when a create or update would
    violate uniqueness, leaving state untouched, and ``StoreError`` on
    backend failure. Lookups return ``None`` when nothing matches.
    """

    backend: str = "abstract"

    async def connect(self) -> None:
        """Open connections and make sure indexes exist."""

    async def close(self) -> None:
        """Release backend resources."""

    @abstractmethod
    async def ping(self) -> bool:
        """Return True if the backend is reachable."""

    @abstractmethod
    async def create(
        self,
        username: str,
        email: str,
        password_hash: str,
        role: Role = Role.USER,
    ) -> Account:
        """Insert a new account."""

    @abstractmethod
    async def get_by_id(self, account_id: str) -> Account | None:
        """Look up an account by its opaque ID."""

    @abstractmethod
    async def get_by_username(self, username: str) -> Account | None:
        """Look up an account by exact username."""

    @abstractmethod
    async def list_usernames(self) -> list[str]:
        """Return all usernames, sorted ascending."""

    @abstractmethod
    async def update(self, account_id: str, changes: dict[str, Any]) -> Account | None:
        """
        Apply field changes (``email``, ``password_hash``, ``role``).

        Returns the updated account, or None if it no longer exists.
        """

    @abstractmethod
    async def delete(self, account_id: str) -> bool:
        """Delete an account; return False if it did not exist."""


UPDATABLE_FIELDS = frozenset({"email", "password_hash", "role"})


def check_changes(changes: dict[str, Any]) -> dict[str, Any]:
    """Reject unknown fields and normalise enum values for storage."""
    unknown = set(changes) - UPDATABLE_FIELDS
    if unknown:
        raise ValueError(f"unsupported account fields: {sorted(unknown)}")
    normalised = dict(changes)
    if isinstance(normalised.get("role"), Role):
        normalised["role"] = normalised["role"].value
    return normalised
