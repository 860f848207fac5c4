"""
Authorization Chain
===================

Per-request session resolution and composable policy steps.

Resolution turns the optional access/refresh cookies into a principal:

    access valid            -> AUTHENTICATED
    access expired + refresh -> verify refresh, mint new access -> AUTHENTICATED
    access invalid          -> REJECTED (no refresh fallback)
    refresh only            -> verify refresh, mint new access -> AUTHENTICATED
    nothing                 -> REJECTED

When the refresh path is taken the outcome carries the renewed access token;
the HTTP layer is responsible for attaching it to the response.

Policy steps are plain callables ``(AuthContext, principal) -> principal``
that raise on rejection and are applied in order.

Version: 0.1.0
"""

from collections.abc import Callable, Sequence
from dataclasses import dataclass

from warden.auth.tokens import (
    IssuedToken,
    TokenExpiredError,
    TokenInvalidError,
    TokenKind,
    TokenService,
)
from warden.errors import (
    AccountNotFoundError,
    AuthenticationRequiredError,
    AuthorizationError,
    CannotDeleteSelfError,
    InvalidRefreshTokenError,
    InvalidTokenError,
)
from warden.logging import get_logger
from warden.models.account import AccountPublic, Role
from warden.store.base import CredentialStore

logger = get_logger(__name__)


@dataclass(frozen=True)
class AuthContext:
    """Credentials and routing facts extracted from one request."""

    access_token: str | None = None
    refresh_token: str | None = None
    target_username: str | None = None


@dataclass(frozen=True)
class AuthOutcome:
    """An authenticated principal plus an optional renewed access token."""

    principal: AccountPublic
    renewed_access: IssuedToken | None = None


PolicyStep = Callable[[AuthContext, AccountPublic], AccountPublic]


class SessionResolver:
    """Resolve request credentials to the current account."""

    def __init__(self, tokens: TokenService, store: CredentialStore) -> None:
        self.tokens = tokens
        self.store = store

    async def _load(self, account_id: str) -> AccountPublic:
        account = await self.store.get_by_id(account_id)
        if account is None:
            logger.warning("auth_account_missing", account_id=account_id)
            raise AccountNotFoundError()
        return account.to_public()

    async def resolve(self, ctx: AuthContext) -> AuthOutcome:
        """
        Run the resolution state machine.

        Raises:
            AuthenticationRequiredError: No credentials at all
            InvalidTokenError: Access token invalid, or expired with no refresh token
            InvalidRefreshTokenError: Refresh fallback failed
            AccountNotFoundError: Token subject no longer exists
        """
        if ctx.access_token:
            try:
                account_id = self.tokens.verify(ctx.access_token, TokenKind.ACCESS)
            except TokenExpiredError:
                if not ctx.refresh_token:
                    logger.info("auth_access_expired")
                    raise InvalidTokenError("Not authorized, token expired") from None
                logger.debug("auth_access_expired_trying_refresh")
            except TokenInvalidError as e:
                logger.warning("auth_access_invalid", error=str(e))
                raise InvalidTokenError() from None
            else:
                return AuthOutcome(principal=await self._load(account_id))

        if ctx.refresh_token:
            try:
                renewed = self.tokens.reissue_access_from_refresh(ctx.refresh_token)
            except (TokenExpiredError, TokenInvalidError) as e:
                logger.warning("auth_refresh_rejected", error=str(e))
                raise InvalidRefreshTokenError() from None
            principal = await self._load(renewed.account_id)
            logger.info("session_renewed", account_id=principal.id)
            return AuthOutcome(principal=principal, renewed_access=renewed)

        raise AuthenticationRequiredError()


def require_role(*roles: Role) -> PolicyStep:
    """Build a step admitting only callers whose role is in ``roles``."""
    allowed = frozenset(roles)

    def role_gate(ctx: AuthContext, principal: AccountPublic) -> AccountPublic:
        if principal.role not in allowed:
            logger.warning(
                "insufficient_role",
                account_id=principal.id,
                role=principal.role.value,
                required=sorted(r.value for r in allowed),
            )
            raise AuthorizationError()
        return principal

    return role_gate


def owner_or_admin(ctx: AuthContext, principal: AccountPublic) -> AccountPublic:
    """Admit admins, or the owner of the path-addressed account."""
    if principal.is_admin or principal.username == ctx.target_username:
        return principal
    logger.warning(
        "ownership_denied",
        account_id=principal.id,
        target=ctx.target_username,
    )
    raise AuthorizationError("You do not have permission to update this user")


def not_self(ctx: AuthContext, principal: AccountPublic) -> AccountPublic:
    """Reject operations addressed at the caller's own account."""
    if principal.username == ctx.target_username:
        raise CannotDeleteSelfError()
    return principal


def apply_policies(
    ctx: AuthContext,
    principal: AccountPublic,
    steps: Sequence[PolicyStep],
) -> AccountPublic:
    """Thread the principal through each step in order."""
    for step in steps:
        principal = step(ctx, principal)
    return principal


require_admin = require_role(Role.ADMIN)
