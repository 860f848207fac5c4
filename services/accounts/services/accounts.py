"""
Account Service
===============

Business logic for registration, login and account management.

Authorization (who may call what) is settled by the route dependencies
before these methods run; the service only enforces data rules.

Version: 0.1.0
"""

from typing import Any

from warden.auth.password import PasswordHasher
from warden.auth.tokens import TokenPair, TokenService
from warden.errors import InvalidCredentialsError, NotFoundError
from warden.logging import get_logger
from warden.models.account import (
    Account,
    AccountCreate,
    AccountPublic,
    AccountUpdate,
    LoginRequest,
    Role,
)
from warden.store.base import CredentialStore

logger = get_logger(__name__)


class AccountService:
    """Account operations over a credential store."""

    def __init__(
        self,
        store: CredentialStore,
        hasher: PasswordHasher,
        tokens: TokenService,
    ) -> None:
        self.store = store
        self.hasher = hasher
        self.tokens = tokens

    async def register(self, data: AccountCreate) -> AccountPublic:
        """
        Create a new account with role ``user``.

        Raises:
            DuplicateError: If the username or email is taken
        """
        password_hash = await self.hasher.hash_async(data.password)
        account = await self.store.create(
            username=data.username,
            email=str(data.email),
            password_hash=password_hash,
            role=Role.USER,
        )
        logger.info("account_registered", account_id=account.id, username=account.username)
        return account.to_public()

    async def login(self, data: LoginRequest) -> tuple[AccountPublic, TokenPair]:
        """
        Check credentials and issue a session token pair.

        Raises:
            InvalidCredentialsError: Unknown username or wrong password
        """
        account = await self.store.get_by_username(data.username)
        if account is None:
            logger.info("login_failed", username=data.username, reason="unknown_user")
            raise InvalidCredentialsError()

        if not await self.hasher.verify_async(account.password_hash, data.password):
            logger.info("login_failed", username=data.username, reason="bad_password")
            raise InvalidCredentialsError()

        if self.hasher.needs_rehash(account.password_hash):
            account = await self._rehash(account, data.password)

        logger.info("login_succeeded", account_id=account.id)
        return account.to_public(), self.tokens.issue_pair(account.id)

    async def _rehash(self, account: Account, password: str) -> Account:
        new_hash = await self.hasher.hash_async(password)
        updated = await self.store.update(account.id, {"password_hash": new_hash})
        logger.info("password_rehashed", account_id=account.id)
        return updated or account

    async def get(self, username: str) -> AccountPublic:
        """
        Look up an account by username.

        Raises:
            NotFoundError: If no such account exists
        """
        account = await self.store.get_by_username(username)
        if account is None:
            raise NotFoundError()
        return account.to_public()

    async def list_usernames(self) -> list[str]:
        return await self.store.list_usernames()

    async def update(
        self,
        principal: AccountPublic,
        username: str,
        data: AccountUpdate,
    ) -> AccountPublic:
        """
        Apply an update to the account named ``username``.

        Role changes requested by non-admins are dropped silently.

        Raises:
            NotFoundError: If the target account does not exist
            DuplicateError: If the new email is taken
        """
        target = await self.store.get_by_username(username)
        if target is None:
            raise NotFoundError()

        changes: dict[str, Any] = {}
        if data.email is not None:
            changes["email"] = str(data.email)
        if data.password is not None:
            changes["password_hash"] = await self.hasher.hash_async(data.password)
        if data.role is not None:
            if principal.is_admin:
                changes["role"] = data.role
            else:
                logger.warning(
                    "role_change_ignored",
                    account_id=principal.id,
                    target=username,
                    requested=data.role.value,
                )

        if not changes:
            return target.to_public()

        updated = await self.store.update(target.id, changes)
        if updated is None:
            raise NotFoundError()

        logger.info(
            "account_updated",
            account_id=updated.id,
            by=principal.id,
            fields=sorted(changes),
        )
        return updated.to_public()

    async def delete(self, principal: AccountPublic, username: str) -> None:
        """
        Delete the account named ``username``.

        Raises:
            NotFoundError: If the target account does not exist
        """
        target = await self.store.get_by_username(username)
        if target is None or not await self.store.delete(target.id):
            raise NotFoundError()
        logger.info("account_deleted", account_id=target.id, by=principal.id)
