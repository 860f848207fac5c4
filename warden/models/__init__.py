"""
Shared Models
=============

Pydantic models shared across Warden services.

Models:
- Account models (Account, AccountPublic, AccountCreate, AccountUpdate)
- Request/response bodies (LoginRequest, AccountResponse, UsernameListResponse)
- Common responses (MessageResponse, ErrorResponse, HealthResponse)
"""

from warden.models.account import (
    Account,
    AccountCreate,
    AccountPublic,
    AccountResponse,
    AccountUpdate,
    LoginRequest,
    Role,
    UsernameItem,
    UsernameListResponse,
)
from warden.models.common import ErrorResponse, HealthResponse, MessageResponse

__all__ = [
    "Account",
    "AccountCreate",
    "AccountPublic",
    "AccountResponse",
    "AccountUpdate",
    "LoginRequest",
    "Role",
    "UsernameItem",
    "UsernameListResponse",
    "ErrorResponse",
    "HealthResponse",
    "MessageResponse",
]
