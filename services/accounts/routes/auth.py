"""
Auth Routes
===========

Login endpoint: checks credentials and sets the session cookies.

Version: 0.1.0
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Response

from services.accounts.dependencies import get_account_service
from services.accounts.services.accounts import AccountService
from warden.auth import set_session_cookies
from warden.auth.dependencies import get_app_settings
from warden.config import Settings
from warden.models import AccountResponse, ErrorResponse, LoginRequest

router = APIRouter(
    responses={
        400: {"model": ErrorResponse, "description": "Missing username or password"},
        401: {"model": ErrorResponse, "description": "Invalid username or password"},
    }
)


@router.post("/login", response_model=AccountResponse)
async def login(
    body: LoginRequest,
    response: Response,
    settings: Annotated[Settings, Depends(get_app_settings)],
    service: Annotated[AccountService, Depends(get_account_service)],
) -> AccountResponse:
    """
    Authenticate with username and password.

    On success the ``jwt`` (access) and ``refreshToken`` cookies are set.
    """
    account, pair = await service.login(body)
    set_session_cookies(response, pair, settings)
    return AccountResponse(message="Login successful", user=account)
