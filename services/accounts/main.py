"""
Accounts Service - Main Application
===================================

FastAPI application for account registration, login and management.

Version: 0.1.0
"""

import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from services.accounts.ratelimit import RateLimitMiddleware
from services.accounts.routes import auth, health, users
from warden import __version__
from warden.auth.password import PasswordHasher
from warden.auth.tokens import TokenService
from warden.config import Settings, get_settings
from warden.errors import WardenError
from warden.logging import bind_context, clear_context, get_logger, setup_logging
from warden.store import CredentialStore, build_store

logger = get_logger(__name__)


def format_validation_errors(errors: list[dict[str, Any]]) -> str:
    """Render pydantic errors as ``field: message`` joined by commas."""
    parts = []
    for err in errors:
        loc = [str(p) for p in err.get("loc", ()) if p != "body"]
        field = ".".join(loc)
        msg = err.get("msg", "Invalid value")
        parts.append(f"{field}: {msg}" if field else msg)
    return ", ".join(parts) or "Invalid request"


def create_app(
    settings: Settings | None = None,
    store: CredentialStore | None = None,
) -> FastAPI:
    """
    Build the Accounts application.

    Args:
        settings: Validated configuration (default: environment)
        store: Credential store (default: selected by ``settings.store_backend``)
    """
    settings = settings or get_settings()

    setup_logging(
        log_level=settings.log_level.value,
        json_logs=settings.is_production,
        service_name="accounts",
        environment=settings.environment.value,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info(
            "accounts_starting",
            environment=settings.environment.value,
            port=settings.port,
            store=app.state.store.backend,
        )
        try:
            await app.state.store.connect()
        except Exception as e:
            logger.error("startup_failed", error=str(e))
            raise

        yield

        logger.info("accounts_shutting_down")
        await app.state.store.close()

    expose_docs = settings.debug and settings.is_development

    app = FastAPI(
        title="Warden Accounts Service",
        description="User accounts, sessions and role-based authorization",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs" if expose_docs else None,
        redoc_url="/redoc" if expose_docs else None,
    )

    app.state.settings = settings
    app.state.store = store or build_store(settings)
    app.state.hasher = PasswordHasher(settings.argon2)
    app.state.tokens = TokenService(settings.jwt)
    app.state.started_at = time.monotonic()

    # ========================================================================
    # Middleware
    # ========================================================================

    @app.middleware("http")
    async def add_security_headers(request: Request, call_next: Any) -> Any:
        response = await call_next(request)
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("Referrer-Policy", "no-referrer")
        response.headers.setdefault("Cross-Origin-Opener-Policy", "same-origin")
        response.headers.setdefault(
            "Content-Security-Policy", "default-src 'self'; frame-ancestors 'none'"
        )
        if request.url.path.startswith(settings.api_prefix):
            response.headers.setdefault("Cache-Control", "no-store")
        if settings.is_production:
            response.headers.setdefault(
                "Strict-Transport-Security", "max-age=15552000; includeSubDomains"
            )
        return response

    if settings.rate_limit.enabled and not settings.is_testing:
        app.add_middleware(
            RateLimitMiddleware,
            settings=settings.rate_limit,
            api_prefix=settings.api_prefix,
        )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors.origins_list,
        allow_credentials=settings.cors.allow_credentials,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def bind_request_context(request: Request, call_next: Any) -> Any:
        clear_context()
        bind_context(method=request.method, path=request.url.path)
        return await call_next(request)

    # ========================================================================
    # Routers
    # ========================================================================

    app.include_router(health.router, prefix=settings.api_prefix, tags=["Health"])
    app.include_router(auth.router, prefix=settings.api_prefix, tags=["Auth"])
    app.include_router(users.router, prefix=f"{settings.api_prefix}/users", tags=["Users"])

    @app.get("/", tags=["Health"])
    async def root() -> dict[str, str]:
        """Root endpoint."""
        return {"service": "Warden Accounts Service", "version": __version__}

    # ========================================================================
    # Error Handlers
    # ========================================================================

    @app.exception_handler(WardenError)
    async def warden_exception_handler(request: Request, exc: WardenError) -> JSONResponse:
        log = logger.error if exc.status_code >= 500 else logger.warning
        log(
            "request_failed",
            error_type=type(exc).__name__,
            status_code=exc.status_code,
            detail=exc.message,
        )
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        message = format_validation_errors(list(exc.errors()))
        logger.info("request_invalid", detail=message)
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": message})

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        logger.warning("http_exception", status_code=exc.status_code, detail=exc.detail)
        detail = "Not found" if exc.status_code == status.HTTP_404_NOT_FOUND else exc.detail
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            "unhandled_exception",
            error=str(exc),
            error_type=type(exc).__name__,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error"},
        )

    return app


app = create_app()


# ============================================================================
# Run with Uvicorn
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    _settings = get_settings()
    uvicorn.run(
        "services.accounts.main:app",
        host="0.0.0.0",
        port=_settings.port,
        reload=_settings.debug,
        log_level=_settings.log_level.value.lower(),
    )
