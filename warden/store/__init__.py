"""
Credential Store
================

Account persistence with username/email uniqueness.

Backends:
- MongoDB (motor), selected with ``STORE_BACKEND=mongodb``
- In-memory, selected with ``STORE_BACKEND=memory``

Usage:
    from warden.store import build_store

    store = build_store(settings)
    await store.connect()
    account = await store.get_by_username("alice")
"""

from warden.config import Settings, StoreBackend
from warden.store.base import CredentialStore
from warden.store.memory import MemoryCredentialStore


def build_store(settings: Settings) -> CredentialStore:
    """Create the store selected by ``settings.store_backend``."""
    if settings.store_backend == StoreBackend.MEMORY:
        return MemoryCredentialStore()

    from warden.database.mongodb import MongoDBClient
    from warden.store.mongodb import MongoCredentialStore

    return MongoCredentialStore(MongoDBClient(settings.mongodb))


__all__ = [
    "CredentialStore",
    "MemoryCredentialStore",
    "build_store",
]
