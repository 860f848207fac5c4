"""
Users Routes
============

API endpoints for account registration and management.

Version: 0.1.0
"""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, status

from services.accounts.dependencies import get_account_service
from services.accounts.services.accounts import AccountService
from warden.auth import authorize, get_current_account, not_self, owner_or_admin, require_admin
from warden.logging import get_logger
from warden.models import (
    AccountCreate,
    AccountPublic,
    AccountResponse,
    AccountUpdate,
    ErrorResponse,
    MessageResponse,
    UsernameItem,
    UsernameListResponse,
)

logger = get_logger(__name__)

ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    400: {"model": ErrorResponse, "description": "Invalid payload or duplicate account"},
    401: {"model": ErrorResponse, "description": "Missing, invalid or expired session"},
    403: {"model": ErrorResponse, "description": "Caller lacks the required role or ownership"},
    404: {"model": ErrorResponse, "description": "User not found"},
}

router = APIRouter(responses=ERROR_RESPONSES)


@router.post("", response_model=AccountResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    body: AccountCreate,
    service: Annotated[AccountService, Depends(get_account_service)],
) -> AccountResponse:
    """
    Register a new account.

    The account always starts with role ``user``.
    """
    account = await service.register(body)
    return AccountResponse(message="User created successfully", user=account)


@router.get("", response_model=UsernameListResponse)
async def list_users(
    _principal: Annotated[AccountPublic, Depends(get_current_account)],
    service: Annotated[AccountService, Depends(get_account_service)],
) -> UsernameListResponse:
    """List every account's username."""
    usernames = await service.list_usernames()
    return UsernameListResponse(
        users=[UsernameItem(username=u) for u in usernames],
        count=len(usernames),
    )


@router.get("/{username}", response_model=AccountResponse)
async def get_user(
    username: str,
    _principal: Annotated[AccountPublic, Depends(get_current_account)],
    service: Annotated[AccountService, Depends(get_account_service)],
) -> AccountResponse:
    """Get one account by username."""
    account = await service.get(username)
    return AccountResponse(message="User retrieved successfully", user=account)


@router.put("/{username}", response_model=AccountResponse)
async def update_user(
    username: str,
    body: AccountUpdate,
    principal: Annotated[AccountPublic, Depends(authorize(owner_or_admin))],
    service: Annotated[AccountService, Depends(get_account_service)],
) -> AccountResponse:
    """
    Update an account's email, password or role.

    Callers may update their own account; admins may update any account.
    Role changes from non-admins are ignored.
    """
    account = await service.update(principal, username, body)
    return AccountResponse(message="User updated successfully", user=account)


@router.delete("/{username}", response_model=MessageResponse)
async def delete_user(
    username: str,
    principal: Annotated[AccountPublic, Depends(authorize(require_admin, not_self))],
    service: Annotated[AccountService, Depends(get_account_service)],
) -> MessageResponse:
    """Delete an account (admin only, never the caller's own)."""
    await service.delete(principal, username)
    return MessageResponse(message="User deleted successfully")
