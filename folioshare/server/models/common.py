"""Common Pydantic models for API requests and responses.

This module contains shared response models used across the API.
"""

from datetime import datetime, timezone
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys, accepting either spelling."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class HealthResponse(BaseModel):
    """Health check response model.

    Attributes:
        status: Service health status
        timestamp: Current server timestamp
        backends: Names of the configured storage tiers, primary first
        database_connected: Whether the database tier answers; None without one
    """

    status: str = Field(default="healthy", description="Service health status")
    timestamp: datetime = Field(
        default_factory=_utcnow, description="Current server timestamp"
    )
    backends: List[str] = Field(
        default_factory=list, description="Configured storage tiers"
    )
    database_connected: Optional[bool] = Field(
        default=None, description="Whether the database tier is reachable"
    )


class InfoResponse(BaseModel):
    """System information response model."""

    app_name: str = Field(..., description="Application name")
    version: str = Field(..., description="Application version")
    status: str = Field(default="running", description="Service status")
    primary_backend: Optional[str] = Field(None, description="Primary storage tier")
    secondary_backend: Optional[str] = Field(None, description="Secondary storage tier")
    timestamp: datetime = Field(
        default_factory=_utcnow, description="Current server timestamp"
    )


class ErrorResponse(BaseModel):
    """Standard error body returned by every failing endpoint.

    Attributes:
        error: Error type, e.g. "NotFoundError"
        details: Human-readable message or structured validation errors
    """

    error: str = Field(..., description="Error type or code")
    details: Optional[Any] = Field(default=None, description="Error details")
