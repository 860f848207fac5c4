"""
Common Models
=============

Base response models shared by every route.

Version: 0.1.0
"""

from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, Field


class MessageResponse(BaseModel):
    """Plain acknowledgement."""

    message: str


class ErrorResponse(BaseModel):
    """Error response model: a single human-readable message."""

    error: str


class HealthResponse(BaseModel):
    """Service health check response."""

    status: Literal["OK"] = "OK"
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    database: Literal["connected", "disconnected"]
    uptime: float = Field(..., ge=0, description="Seconds since the service started")
    memory: dict[str, Any] = Field(default_factory=dict)
    version: str
