"""
MongoDB Credential Store
========================

Account persistence on MongoDB via Motor. Uniqueness is enforced by the
``username_unique`` and ``email_unique`` indexes, so concurrent
registrations cannot both succeed.

Version: 0.1.0
"""

from typing import Any

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError, PyMongoError

from warden.database.mongodb import ACCOUNTS_COLLECTION, MongoDBClient
from warden.errors import DuplicateError, StoreError
from warden.logging import get_logger
from warden.models.account import Account, Role, utcnow
from warden.store.base import CredentialStore, check_changes

logger = get_logger(__name__)


def _to_account(doc: dict[str, Any]) -> Account:
    return Account(
        id=str(doc["_id"]),
        username=doc["username"],
        email=doc["email"],
        password_hash=doc["password_hash"],
        role=doc.get("role", Role.USER.value),
        created_at=doc["created_at"],
        updated_at=doc["updated_at"],
    )


def _object_id(account_id: str) -> ObjectId | None:
    try:
        return ObjectId(account_id)
    except (InvalidId, TypeError):
        return None


class MongoCredentialStore(CredentialStore):
    """Motor-backed account store."""

    backend = "mongodb"

    def __init__(self, client: MongoDBClient) -> None:
        self.client = client

    @property
    def collection(self) -> Any:
        return self.client.get_database()[ACCOUNTS_COLLECTION]

    async def connect(self) -> None:
        try:
            await self.client.create_indexes()
        except PyMongoError as e:
            logger.error("mongodb_connect_failed", error=str(e))
            raise StoreError("Credential store unavailable") from e

    async def close(self) -> None:
        await self.client.close()

    async def ping(self) -> bool:
        health = await self.client.health_check()
        return health.get("status") == "healthy"

    async def create(
        self,
        username: str,
        email: str,
        password_hash: str,
        role: Role = Role.USER,
    ) -> Account:
        now = utcnow()
        doc: dict[str, Any] = {
            "username": username,
            "email": email,
            "password_hash": password_hash,
            "role": role.value,
            "created_at": now,
            "updated_at": now,
        }
        try:
            result = await self.collection.insert_one(doc)
        except DuplicateKeyError as e:
            logger.info("account_duplicate_rejected", username=username)
            raise DuplicateError() from e
        except PyMongoError as e:
            logger.error("account_insert_failed", error=str(e))
            raise StoreError() from e
        doc["_id"] = result.inserted_id
        return _to_account(doc)

    async def _find_one(self, query: dict[str, Any]) -> Account | None:
        try:
            doc = await self.collection.find_one(query)
        except PyMongoError as e:
            logger.error("account_lookup_failed", error=str(e))
            raise StoreError() from e
        return _to_account(doc) if doc else None

    async def get_by_id(self, account_id: str) -> Account | None:
        oid = _object_id(account_id)
        if oid is None:
            return None
        return await self._find_one({"_id": oid})

    async def get_by_username(self, username: str) -> Account | None:
        return await self._find_one({"username": username})

    async def list_usernames(self) -> list[str]:
        try:
            cursor = self.collection.find({}, {"username": 1, "_id": 0}).sort("username", 1)
            return [doc["username"] async for doc in cursor]
        except PyMongoError as e:
            logger.error("account_list_failed", error=str(e))
            raise StoreError() from e

    async def update(self, account_id: str, changes: dict[str, Any]) -> Account | None:
        oid = _object_id(account_id)
        if oid is None:
            return None
        fields = check_changes(changes)
        fields["updated_at"] = utcnow()
        try:
            doc = await self.collection.find_one_and_update(
                {"_id": oid},
                {"$set": fields},
                return_document=ReturnDocument.AFTER,
            )
        except DuplicateKeyError as e:
            raise DuplicateError() from e
        except PyMongoError as e:
            logger.error("account_update_failed", error=str(e))
            raise StoreError() from e
        return _to_account(doc) if doc else None

    async def delete(self, account_id: str) -> bool:
        oid = _object_id(account_id)
        if oid is None:
            return False
        try:
            result = await self.collection.delete_one({"_id": oid})
        except PyMongoError as e:
            logger.error("account_delete_failed", error=str(e))
            raise StoreError() from e
        return result.deleted_count == 1
