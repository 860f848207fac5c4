"""
Session Token Management
========================

Issues and verifies the two session token kinds:

- access tokens: short-lived, signed with the access secret
- refresh tokens: long-lived, signed with the refresh secret, only usable
  to mint new access tokens

Both carry nothing but the account ID (``sub``) plus expiry and kind
claims; role and username are always re-read from the store.

Version: 0.1.0
"""

from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from enum import Enum
from typing import Any

from jose import ExpiredSignatureError, JWTError, jwt
from pydantic import BaseModel, Field

from warden.config import JWTSettings
from warden.logging import get_logger


logger = get_logger(__name__)


class TokenKind(str, Enum):
    """Session token kinds."""

    ACCESS = "access"
    REFRESH = "refresh"


class TokenError(Exception):
    """Base class for token verification failures."""


class TokenExpiredError(TokenError):
    """The token was well-formed and correctly signed but is past expiry."""


class TokenInvalidError(TokenError):
    """Bad signature, malformed structure, wrong kind or missing subject."""


class IssuedToken(BaseModel):
    """A freshly signed token and when it stops being valid."""

    token: str
    kind: TokenKind
    account_id: str
    expires_at: datetime

    @property
    def max_age(self) -> int:
        """Seconds until expiry, for cookie ``Max-Age``."""
        remaining = (self.expires_at - datetime.now(UTC)).total_seconds()
        return max(int(remaining), 0)


class TokenPair(BaseModel):
    """Access and refresh tokens issued together at login."""

    access: IssuedToken
    refresh: IssuedToken


class TokenData(BaseModel):
    """Decoded token payload."""

    sub: str = Field(..., min_length=1, description="Subject (account ID)")
    exp: datetime = Field(..., description="Expiration time")
    iat: datetime | None = Field(default=None, description="Issued at")
    token_type: TokenKind


def _utcnow() -> datetime:
    return datetime.now(UTC)


class TokenService:
    """
    Stateless signer/verifier for access and refresh tokens.

    Args:
        settings: Secrets, algorithm and lifetimes
        clock: Source of "now" used for issue times (overridable in tests)
    """

    def __init__(
        self,
        settings: JWTSettings,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.settings = settings
        self.clock = clock

    def _secret(self, kind: TokenKind) -> str:
        if kind == TokenKind.ACCESS:
            return self.settings.access_secret.get_secret_value()
        return self.settings.refresh_secret.get_secret_value()

    def _lifetime(self, kind: TokenKind) -> timedelta:
        if kind == TokenKind.ACCESS:
            return timedelta(minutes=self.settings.access_token_expire_minutes)
        return timedelta(days=self.settings.refresh_token_expire_days)

    def _issue(self, account_id: str, kind: TokenKind) -> IssuedToken:
        now = self.clock()
        expire = now + self._lifetime(kind)
        claims: dict[str, Any] = {
            "sub": str(account_id),
            "exp": expire,
            "iat": now,
            "token_type": kind.value,
        }
        encoded = jwt.encode(claims, self._secret(kind), algorithm=self.settings.algorithm)

        logger.debug(
            "session_token_issued",
            kind=kind.value,
            account_id=account_id,
            expires_at=expire.isoformat(),
        )

        return IssuedToken(token=encoded, kind=kind, account_id=str(account_id), expires_at=expire)

    def issue_access_token(self, account_id: str) -> IssuedToken:
        """Sign a short-lived access token for ``account_id``."""
        return self._issue(account_id, TokenKind.ACCESS)

    def issue_refresh_token(self, account_id: str) -> IssuedToken:
        """Sign a long-lived refresh token for ``account_id``."""
        return self._issue(account_id, TokenKind.REFRESH)

    def issue_pair(self, account_id: str) -> TokenPair:
        """Sign both tokens, as done at login."""
        return TokenPair(
            access=self.issue_access_token(account_id),
            refresh=self.issue_refresh_token(account_id),
        )

    def decode(self, token: str, kind: TokenKind) -> TokenData:
        """
        Decode and validate a token of the given kind.

        Raises:
            TokenExpiredError: If the token is past expiry
            TokenInvalidError: For any other verification failure
        """
        try:
            payload = jwt.decode(
                token,
                self._secret(kind),
                algorithms=[self.settings.algorithm],
            )
        except ExpiredSignatureError as e:
            raise TokenExpiredError(f"{kind.value} token expired") from e
        except JWTError as e:
            raise TokenInvalidError(f"{kind.value} token invalid: {e}") from e

        if payload.get("token_type") != kind.value:
            raise TokenInvalidError(
                f"expected {kind.value} token, got {payload.get('token_type')!r}"
            )

        sub = payload.get("sub")
        if not isinstance(sub, str) or not sub:
            raise TokenInvalidError("token subject missing")

        exp = payload.get("exp")
        if not isinstance(exp, int | float):
            raise TokenInvalidError("token expiry missing")

        iat = payload.get("iat")
        return TokenData(
            sub=sub,
            exp=datetime.fromtimestamp(exp, tz=UTC),
            iat=datetime.fromtimestamp(iat, tz=UTC) if isinstance(iat, int | float) else None,
            token_type=kind,
        )

    def verify(self, token: str, kind: TokenKind) -> str:
        """Verify a token and return the account ID it is bound to."""
        return self.decode(token, kind).sub

    def reissue_access_from_refresh(self, refresh_token: str) -> IssuedToken:
        """
        Mint a new access token from a valid refresh token.

        The refresh token itself is left as is; there is no revocation store.

        Raises:
            TokenExpiredError: If the refresh token is past expiry
            TokenInvalidError: If the refresh token fails verification
        """
        account_id = self.verify(refresh_token, TokenKind.REFRESH)
        return self.issue_access_token(account_id)
