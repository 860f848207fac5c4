"""
WARDEN Shared Library
=====================

Account, credential and session primitives shared by the Warden services.

Modules:
    - config: Configuration management with Pydantic Settings
    - logging: Structured logging with structlog
    - errors: Error taxonomy mapped onto HTTP status codes
    - auth: Password hashing, session tokens and authorization chain
    - database: MongoDB client lifecycle
    - store: Credential store backends (MongoDB, in-memory)
    - models: Shared Pydantic models

Version: 0.1.0
"""

__version__ = "0.1.0"
__author__ = "Warden Team"

from warden.config import settings
from warden.logging import get_logger, setup_logging

__all__ = [
    "settings",
    "get_logger",
    "setup_logging",
    "__version__",
]
