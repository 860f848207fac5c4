"""
Settings Module
===============

Pydantic-based configuration with environment variable loading.

Version: 0.1.0
"""

from enum import Enum
from functools import lru_cache

from pydantic import Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# Placeholder secrets accepted outside production only.
DEFAULT_ACCESS_SECRET = "warden-dev-access-secret-change-me"
DEFAULT_REFRESH_SECRET = "warden-dev-refresh-secret-change-me"


class Environment(str, Enum):
    """Deployment environment."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TESTING = "testing"


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class StoreBackend(str, Enum):
    """Credential store implementations."""

    MONGODB = "mongodb"
    MEMORY = "memory"


class MongoSettings(BaseSettings):
    """MongoDB configuration."""

    model_config = SettingsConfigDict(env_prefix="MONGODB_")

    uri: str = "mongodb://localhost:27017"
    db: str = "warden"
    timeout_ms: int = 5000
    max_pool_size: int = 50

    @field_validator("uri")
    @classmethod
    def validate_uri(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("MONGODB_URI must be set and non-empty")
        s = v.strip()
        if not (s.startswith("mongodb://") or s.startswith("mongodb+srv://")):
            raise ValueError("MONGODB_URI must use mongodb:// or mongodb+srv://")
        return s

    @field_validator("timeout_ms")
    @classmethod
    def validate_timeout(cls, v: int) -> int:
        if v <= 0 or v > 120_000:
            raise ValueError("MONGODB_TIMEOUT_MS must be greater than 0 and at most 120000")
        return v


class JWTSettings(BaseSettings):
    """Session token configuration."""

    model_config = SettingsConfigDict(env_prefix="JWT_")

    access_secret: SecretStr = SecretStr(DEFAULT_ACCESS_SECRET)
    refresh_secret: SecretStr = SecretStr(DEFAULT_REFRESH_SECRET)
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60
    refresh_token_expire_days: int = 7

    @field_validator("access_secret", "refresh_secret")
    @classmethod
    def validate_secret(cls, v: SecretStr) -> SecretStr:
        if not v.get_secret_value() or not v.get_secret_value().strip():
            raise ValueError("JWT secrets must be set and non-empty")
        return v

    @field_validator("algorithm")
    @classmethod
    def validate_algorithm(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("JWT_ALGORITHM must be set and non-empty")
        return v.strip()

    @field_validator("access_token_expire_minutes")
    @classmethod
    def validate_access_expiry(cls, v: int) -> int:
        if v < 1 or v > 10080:
            raise ValueError(
                "JWT_ACCESS_TOKEN_EXPIRE_MINUTES must be between 1 and 10080 (1 min to 7 days)"
            )
        return v

    @field_validator("refresh_token_expire_days")
    @classmethod
    def validate_refresh_expiry(cls, v: int) -> int:
        if v < 1 or v > 365:
            raise ValueError("JWT_REFRESH_TOKEN_EXPIRE_DAYS must be between 1 and 365")
        return v

    @model_validator(mode="after")
    def validate_distinct_secrets(self) -> "JWTSettings":
        if self.access_secret.get_secret_value() == self.refresh_secret.get_secret_value():
            raise ValueError("JWT_ACCESS_SECRET and JWT_REFRESH_SECRET must differ")
        return self


class Argon2Settings(BaseSettings):
    """Password hashing cost parameters."""

    model_config = SettingsConfigDict(env_prefix="ARGON2_")

    memory_cost: int = 2**16
    time_cost: int = 3
    parallelism: int = 1
    timeout_seconds: float = 10.0

    @field_validator("time_cost", "parallelism")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("ARGON2 time cost and parallelism must be at least 1")
        return v

    @field_validator("timeout_seconds")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0 or v > 120:
            raise ValueError("ARGON2_TIMEOUT_SECONDS must be greater than 0 and at most 120")
        return v

    @model_validator(mode="after")
    def validate_memory_cost(self) -> "Argon2Settings":
        # Argon2 requires at least 8 KiB per lane.
        if self.memory_cost < 8 * self.parallelism:
            raise ValueError("ARGON2_MEMORY_COST must be at least 8 * ARGON2_PARALLELISM")
        return self


class CookieSettings(BaseSettings):
    """Session cookie names."""

    model_config = SettingsConfigDict(env_prefix="COOKIE_")

    access_name: str = "jwt"
    refresh_name: str = "refreshToken"
    same_site: str = "strict"


class RateLimitSettings(BaseSettings):
    """Rate limiting configuration."""

    model_config = SettingsConfigDict(env_prefix="RATE_LIMIT_")

    enabled: bool = True
    window_seconds: int = 15 * 60
    max_requests: int = 100
    login_max_requests: int = 5

    @field_validator("window_seconds", "max_requests", "login_max_requests")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("rate limit window and thresholds must be at least 1")
        return v


class CORSSettings(BaseSettings):
    """CORS configuration."""

    model_config = SettingsConfigDict(env_prefix="CORS_")

    origins: str = "http://localhost:3000"
    allow_credentials: bool = True

    @property
    def origins_list(self) -> list[str]:
        """Parse origins string into list."""
        return [o.strip() for o in self.origins.split(",") if o.strip()]


class Settings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables with sensible defaults.
    Build it once at startup (``get_settings()``) and pass it to
    ``create_app``; request handling never reads the environment directly.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # General
    environment: Environment = Environment.DEVELOPMENT
    debug: bool = True
    log_level: LogLevel = LogLevel.INFO
    api_prefix: str = "/api"
    port: int = 5000

    # Credential store
    store_backend: StoreBackend = StoreBackend.MONGODB
    mongodb: MongoSettings = Field(default_factory=MongoSettings)

    # Authentication
    jwt: JWTSettings = Field(default_factory=JWTSettings)
    argon2: Argon2Settings = Field(default_factory=Argon2Settings)
    cookies: CookieSettings = Field(default_factory=CookieSettings)

    # Security
    rate_limit: RateLimitSettings = Field(default_factory=RateLimitSettings)
    cors: CORSSettings = Field(default_factory=CORSSettings)

    @field_validator("log_level", mode="before")
    @classmethod
    def uppercase_log_level(cls, v: str | LogLevel) -> LogLevel:
        """Ensure log level is uppercase."""
        if isinstance(v, str):
            return LogLevel(v.upper())
        return v

    @field_validator("api_prefix")
    @classmethod
    def normalize_api_prefix(cls, v: str) -> str:
        v = v.strip().rstrip("/")
        if v and not v.startswith("/"):
            v = "/" + v
        return v

    @model_validator(mode="after")
    def reject_placeholder_secrets(self) -> "Settings":
        if self.environment == Environment.PRODUCTION:
            placeholders = {DEFAULT_ACCESS_SECRET, DEFAULT_REFRESH_SECRET}
            if (
                self.jwt.access_secret.get_secret_value() in placeholders
                or self.jwt.refresh_secret.get_secret_value() in placeholders
            ):
                raise ValueError("JWT secrets must be configured in production")
        return self

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment == Environment.DEVELOPMENT

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment == Environment.PRODUCTION

    @property
    def is_testing(self) -> bool:
        """Check if running in test mode."""
        return self.environment == Environment.TESTING


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings: Application settings singleton.
    """
    return Settings()
