"""
Logger Implementation
=====================

structlog configuration for Warden services:
- JSON lines in production, colored console output otherwise
- Credentials never reach the log: sensitive keys are redacted and any
  JWT-shaped string value is masked, wherever it appears
- Per-request context (method, path, account) carried in contextvars

Version: 0.1.0
"""

import logging
import re
import sys
from typing import TYPE_CHECKING, Any

import structlog
from structlog.types import EventDict, Processor


if TYPE_CHECKING:
    from structlog.stdlib import BoundLogger


REDACTED = "***REDACTED***"

SENSITIVE_KEYS = frozenset(
    {
        "password",
        "secret",
        "token",
        "cookie",
        "authorization",
        "jwt",
    }
)

# header.payload.signature, each base64url; JWT headers always start with "eyJ"
_JWT_PATTERN = re.compile(r"eyJ[\w-]*\.[\w-]+\.[\w-]*")

_QUIET_LOGGERS = ("httpx", "httpcore", "asyncio", "pymongo", "passlib", "uvicorn.access")


def _is_sensitive(key: str) -> bool:
    key_lower = key.lower()
    return any(s in key_lower for s in SENSITIVE_KEYS)


def _scrub(value: Any) -> Any:
    if isinstance(value, str):
        return _JWT_PATTERN.sub(REDACTED, value)
    if isinstance(value, dict):
        return {k: REDACTED if _is_sensitive(str(k)) else _scrub(v) for k, v in value.items()}
    if isinstance(value, list | tuple):
        return type(value)(_scrub(v) for v in value)
    return value


def censor_secrets(
    logger: logging.Logger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Redact sensitive keys and mask session tokens embedded in values."""
    return _scrub(event_dict)


def _service_context(service_name: str, version: str, environment: str | None) -> Processor:
    """Build a processor stamping service identity onto every entry."""
    static = {"service": service_name, "version": version}
    if environment:
        static["environment"] = environment

    def add_service_context(
        logger: logging.Logger,
        method_name: str,
        event_dict: EventDict,
    ) -> EventDict:
        for key, value in static.items():
            event_dict.setdefault(key, value)
        return event_dict

    return add_service_context


def setup_logging(
    log_level: str = "INFO",
    json_logs: bool = False,
    service_name: str = "warden",
    environment: str | None = None,
) -> None:
    """
    Configure structlog and route stdlib logging through it.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_logs: Emit JSON lines (production) instead of console output
        service_name: Name of the service for context
        environment: Deployment environment added to every entry
    """
    from warden import __version__

    level = getattr(logging, log_level.upper())

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        _service_context(service_name, __version__, environment),
        censor_secrets,
    ]

    renderer: Processor
    if json_logs:
        shared_processors.append(structlog.processors.format_exc_info)
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(
            colors=sys.stdout.isatty(),
            exception_formatter=structlog.dev.RichTracebackFormatter(show_locals=False),
        )

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared_processors,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)


def get_logger(name: str | None = None) -> "BoundLogger":
    """
    Get a structured logger instance.

    Example:
        logger = get_logger(__name__)
        logger.info("account_registered", account_id="abc123")
    """
    return structlog.stdlib.get_logger(name)


def bind_context(**kwargs: Any) -> None:
    """Bind key-value pairs to every later log entry in this async context."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Clear all bound context variables."""
    structlog.contextvars.clear_contextvars()
