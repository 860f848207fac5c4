"""
Accounts Service Dependencies
=============================

Wires the shared components on ``app.state`` into an ``AccountService``.
"""

from typing import Annotated

from fastapi import Depends

from services.accounts.services.accounts import AccountService
from warden.auth.dependencies import get_password_hasher, get_store, get_token_service
from warden.auth.password import PasswordHasher
from warden.auth.tokens import TokenService
from warden.store.base import CredentialStore


def get_account_service(
    store: Annotated[CredentialStore, Depends(get_store)],
    hasher: Annotated[PasswordHasher, Depends(get_password_hasher)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
) -> AccountService:
    return AccountService(store=store, hasher=hasher, tokens=tokens)
