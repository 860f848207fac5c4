"""
Password Hashing
================

Argon2id password hashing with configurable cost parameters.

Hashes are self-describing (``$argon2id$v=19$m=...,t=...,p=...$salt$digest``)
so verification needs no external parameter state.

Version: 0.1.0
"""

import asyncio

from passlib.context import CryptContext

from warden.config import Argon2Settings
from warden.errors import InternalError, PasswordHashError
from warden.logging import get_logger

logger = get_logger(__name__)


class PasswordHasher:
    """Hash and verify passwords with Argon2id."""

    def __init__(self, settings: Argon2Settings | None = None) -> None:
        self.settings = settings or Argon2Settings()
        self._context = CryptContext(
            schemes=["argon2"],
            deprecated="auto",
            argon2__type="id",
            argon2__memory_cost=self.settings.memory_cost,
            argon2__rounds=self.settings.time_cost,
            argon2__parallelism=self.settings.parallelism,
        )

    def hash(self, password: str) -> str:
        """
        Hash a password for storage.

        Args:
            password: Plain text password

        Returns:
            str: Encoded Argon2id hash

        Raises:
            InternalError: If the hash could not be computed
        """
        try:
            return self._context.hash(password)
        except (MemoryError, ValueError, TypeError) as e:
            logger.error("password_hash_failed", error_type=type(e).__name__)
            raise InternalError() from e

    def verify(self, password_hash: str, password: str) -> bool:
        """
        Verify a password against its hash.

        Args:
            password_hash: Stored Argon2id hash
            password: Plain text password to check

        Returns:
            bool: True if the password matches, False otherwise

        Raises:
            PasswordHashError: If the stored hash is malformed
        """
        try:
            return self._context.verify(password, password_hash)
        except (ValueError, TypeError) as e:
            logger.error("password_hash_malformed", error=str(e))
            raise PasswordHashError("Stored password hash is malformed") from e

    def needs_rehash(self, password_hash: str) -> bool:
        """
        Check if a hash was made with different cost parameters.

        Returns:
            bool: True if the password should be rehashed on next login
        """
        return self._context.needs_update(password_hash)

    async def hash_async(self, password: str) -> str:
        """Hash in a worker thread, bounded by the configured timeout."""
        return await self._run(self.hash, password)

    async def verify_async(self, password_hash: str, password: str) -> bool:
        """Verify in a worker thread, bounded by the configured timeout."""
        return await self._run(self.verify, password_hash, password)

    async def _run(self, func, *args):  # type: ignore[no-untyped-def]
        try:
            return await asyncio.wait_for(
                asyncio.to_thread(func, *args),
                timeout=self.settings.timeout_seconds,
            )
        except TimeoutError as e:
            logger.error(
                "password_hash_timeout",
                operation=func.__name__,
                timeout_seconds=self.settings.timeout_seconds,
            )
            raise InternalError() from e
