"""
Error Taxonomy
==============

Typed exceptions raised by the store, auth and service layers. Each carries
the HTTP status it maps to; the application's exception handlers turn them
into ``{"error": message}`` bodies.

Version: 0.1.0
"""

from typing import Any


class WardenError(Exception):
    """Base class for all Warden errors."""

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None, **context: Any) -> None:
        self.message = message or self.default_message
        self.context = context
        super().__init__(self.message)


class ValidationError(WardenError):
    """Malformed or missing input."""

    status_code = 400
    default_message = "Invalid request"


class CannotDeleteSelfError(ValidationError):
    """An admin attempted to delete the account bound to their own session."""

    default_message = "You cannot delete your own account"


class DuplicateError(WardenError):
    """Username or email collides with an existing account."""

    status_code = 400
    default_message = "User with this email or username already exists"


class AuthenticationError(WardenError):
    """Missing, invalid or expired credentials."""

    status_code = 401
    default_message = "Authentication required"


class AuthenticationRequiredError(AuthenticationError):
    """Neither an access token nor a refresh token was presented."""

    default_message = "Not authorized, no token"


class InvalidTokenError(AuthenticationError):
    """The access token failed verification and no fallback applies."""

    default_message = "Not authorized, token failed"


class InvalidRefreshTokenError(AuthenticationError):
    """The refresh fallback failed."""

    default_message = "Not authorized, invalid refresh token"


class AccountNotFoundError(AuthenticationError):
    """A verified token names an account that no longer exists."""

    default_message = "User not found"


class InvalidCredentialsError(AuthenticationError):
    """Login with an unknown username or wrong password."""

    default_message = "Invalid username or password"


class AuthorizationError(WardenError):
    """Authenticated, but lacking the role or ownership the operation needs."""

    status_code = 403
    default_message = "You do not have permission to perform this action"


class NotFoundError(WardenError):
    """The addressed account does not exist."""

    status_code = 404
    default_message = "User not found"


class InternalError(WardenError):
    """Store, hashing or otherwise unexpected failure."""

    status_code = 500
    default_message = "Internal server error"


class PasswordHashError(InternalError):
    """A stored password hash is structurally malformed."""


class StoreError(InternalError):
    """The credential store backend failed."""


__all__ = [
    "WardenError",
    "ValidationError",
    "CannotDeleteSelfError",
    "DuplicateError",
    "AuthenticationError",
    "AuthenticationRequiredError",
    "InvalidTokenError",
    "InvalidRefreshTokenError",
    "AccountNotFoundError",
    "InvalidCredentialsError",
    "AuthorizationError",
    "NotFoundError",
    "InternalError",
    "PasswordHashError",
    "StoreError",
]
