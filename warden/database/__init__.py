"""
Database Module
===============

Async MongoDB client for the Warden account store.

Usage:
    from warden.database import MongoDBClient

    client = MongoDBClient(settings.mongodb)
    await client.create_indexes()
    accounts = client.get_database()["accounts"]
"""

from warden.database.mongodb import ACCOUNTS_COLLECTION, MongoDBClient


__all__ = [
    "MongoDBClient",
    "ACCOUNTS_COLLECTION",
]
