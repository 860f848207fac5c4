"""
MongoDB Client
==============

Async MongoDB client using Motor for account documents.

Version: 0.1.0
"""

import time
from typing import Any

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING

from warden.config import MongoSettings
from warden.logging import get_logger

logger = get_logger(__name__)

ACCOUNTS_COLLECTION = "accounts"


class MongoDBClient:
    """
    Async MongoDB client wrapper.

    Manages client lifecycle and provides database access. Every operation
    is bounded by ``timeout_ms`` (client-side operation timeout).
    """

    def __init__(self, settings: MongoSettings) -> None:
        self.settings = settings
        self._client: AsyncIOMotorClient | None = None  # type: ignore[type-arg]

    def get_client(self) -> AsyncIOMotorClient:  # type: ignore[type-arg]
        """Get or create the async client."""
        if self._client is None:
            self._client = AsyncIOMotorClient(
                self.settings.uri,
                maxPoolSize=self.settings.max_pool_size,
                serverSelectionTimeoutMS=self.settings.timeout_ms,
                connectTimeoutMS=self.settings.timeout_ms,
                timeoutMS=self.settings.timeout_ms,
                tz_aware=True,
            )
            logger.info("mongodb_client_created", database=self.settings.db)
        return self._client

    def get_database(self, name: str | None = None) -> AsyncIOMotorDatabase:  # type: ignore[type-arg]
        """
        Get a database instance.

        Args:
            name: Database name (default from settings)

        Returns:
            AsyncIOMotorDatabase instance
        """
        client = self.get_client()
        return client[name or self.settings.db]

    async def close(self) -> None:
        """Close the client and release all connections."""
        if self._client is not None:
            self._client.close()
            self._client = None
            logger.info("mongodb_client_closed")

    async def health_check(self) -> dict[str, Any]:
        """
        Check database health.

        Returns:
            dict with status and latency
        """
        try:
            start = time.perf_counter()
            result = await self.get_client().admin.command("ping")
            latency_ms = (time.perf_counter() - start) * 1000
            return {
                "status": "healthy" if result.get("ok") == 1 else "unhealthy",
                "latency_ms": round(latency_ms, 2),
            }
        except Exception as e:
            logger.error("mongodb_health_check_failed", error=str(e))
            return {
                "status": "unhealthy",
                "error": str(e),
            }

    async def create_indexes(self) -> None:
        """Create the unique indexes that back account uniqueness."""
        accounts = self.get_database()[ACCOUNTS_COLLECTION]
        await accounts.create_index([("username", ASCENDING)], unique=True, name="username_unique")
        await accounts.create_index([("email", ASCENDING)], unique=True, name="email_unique")
        logger.info("mongodb_indexes_created", collection=ACCOUNTS_COLLECTION)
