"""
Authentication Module
=====================

Session authentication and authorization for Warden services.

Features:
- Argon2id password hashing
- Access/refresh JWT issuance, verification and refresh-based re-issuance
- Session resolution with silent cookie renewal
- Composable policy steps (role gate, ownership gate, self-deletion guard)
- FastAPI dependencies for route protection

Usage:
    from warden.auth import authorize, owner_or_admin, require_admin, not_self

    @router.put("/users/{username}")
    async def update(principal: AccountPublic = Depends(authorize(owner_or_admin))):
        ...

    @router.delete("/users/{username}")
    async def delete(principal: AccountPublic = Depends(authorize(require_admin, not_self))):
        ...
"""

from warden.auth.chain import (
    AuthContext,
    AuthOutcome,
    PolicyStep,
    SessionResolver,
    apply_policies,
    not_self,
    owner_or_admin,
    require_admin,
    require_role,
)
from warden.auth.dependencies import (
    authorize,
    get_current_account,
    get_password_hasher,
    get_store,
    get_token_service,
    set_access_cookie,
    set_session_cookies,
)
from warden.auth.password import PasswordHasher
from warden.auth.tokens import (
    IssuedToken,
    TokenData,
    TokenError,
    TokenExpiredError,
    TokenInvalidError,
    TokenKind,
    TokenPair,
    TokenService,
)

__all__ = [
    # Password
    "PasswordHasher",
    # Tokens
    "TokenService",
    "TokenKind",
    "TokenData",
    "TokenPair",
    "IssuedToken",
    "TokenError",
    "TokenExpiredError",
    "TokenInvalidError",
    # Chain
    "AuthContext",
    "AuthOutcome",
    "PolicyStep",
    "SessionResolver",
    "apply_policies",
    "require_role",
    "require_admin",
    "owner_or_admin",
    "not_self",
    # Dependencies
    "authorize",
    "get_current_account",
    "get_password_hasher",
    "get_store",
    "get_token_service",
    "set_access_cookie",
    "set_session_cookies",
]
