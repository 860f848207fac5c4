"""
Configuration Module
====================

Centralized configuration management using Pydantic Settings.
Loads from environment variables with type validation and defaults.

Usage:
    from warden.config import settings

    print(settings.environment)
    print(settings.jwt.access_token_expire_minutes)
"""

from warden.config.settings import (
    Argon2Settings,
    CookieSettings,
    Environment,
    JWTSettings,
    LogLevel,
    MongoSettings,
    RateLimitSettings,
    Settings,
    StoreBackend,
    get_settings,
)


# Global settings instance (singleton)
settings = get_settings()

__all__ = [
    "Settings",
    "get_settings",
    "settings",
    "Environment",
    "LogLevel",
    "StoreBackend",
    "MongoSettings",
    "JWTSettings",
    "Argon2Settings",
    "CookieSettings",
    "RateLimitSettings",
]
