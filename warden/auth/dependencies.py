"""
FastAPI Authentication Dependencies
===================================

Dependency injection for route protection. The token service, password
hasher and credential store are built once by the application factory and
read from ``request.app.state``.

Version: 0.1.0
"""

from collections.abc import Awaitable, Callable
from typing import Annotated

from fastapi import Depends, Request, Response

from warden.auth.chain import AuthContext, PolicyStep, SessionResolver, apply_policies
from warden.auth.password import PasswordHasher
from warden.auth.tokens import IssuedToken, TokenPair, TokenService
from warden.config import Settings
from warden.logging import bind_context
from warden.models.account import AccountPublic
from warden.store.base import CredentialStore


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_token_service(request: Request) -> TokenService:
    return request.app.state.tokens


def get_password_hasher(request: Request) -> PasswordHasher:
    return request.app.state.hasher


def get_store(request: Request) -> CredentialStore:
    return request.app.state.store


def _set_token_cookie(response: Response, name: str, issued: IssuedToken, settings: Settings) -> None:
    response.set_cookie(
        key=name,
        value=issued.token,
        max_age=issued.max_age,
        expires=issued.expires_at,
        path="/",
        httponly=True,
        secure=settings.is_production,
        samesite=settings.cookies.same_site,  # type: ignore[arg-type]
    )


def set_access_cookie(response: Response, issued: IssuedToken, settings: Settings) -> None:
    """Attach an access token cookie."""
    _set_token_cookie(response, settings.cookies.access_name, issued, settings)


def set_session_cookies(response: Response, pair: TokenPair, settings: Settings) -> None:
    """Attach both access and refresh cookies, as done at login."""
    _set_token_cookie(response, settings.cookies.access_name, pair.access, settings)
    _set_token_cookie(response, settings.cookies.refresh_name, pair.refresh, settings)


def authorize(*steps: PolicyStep) -> Callable[..., Awaitable[AccountPublic]]:
    """
    Create a dependency that authenticates the caller and applies ``steps``.

    The resolved account is returned and bound to ``request.state.account``.
    If the session was renewed from the refresh token, the new access token
    is attached to the response as a cookie.

    Usage:
        @router.delete("/users/{username}")
        async def delete_user(
            principal: AccountPublic = Depends(authorize(require_admin, not_self)),
        ):
            ...
    """

    async def dependency(
        request: Request,
        response: Response,
        settings: Annotated[Settings, Depends(get_app_settings)],
        tokens: Annotated[TokenService, Depends(get_token_service)],
        store: Annotated[CredentialStore, Depends(get_store)],
    ) -> AccountPublic:
        ctx = AuthContext(
            access_token=request.cookies.get(settings.cookies.access_name) or None,
            refresh_token=request.cookies.get(settings.cookies.refresh_name) or None,
            target_username=request.path_params.get("username"),
        )

        outcome = await SessionResolver(tokens, store).resolve(ctx)
        if outcome.renewed_access is not None:
            set_access_cookie(response, outcome.renewed_access, settings)

        request.state.account = outcome.principal
        bind_context(account_id=outcome.principal.id)

        return apply_policies(ctx, outcome.principal, steps)

    return dependency


get_current_account = authorize()
