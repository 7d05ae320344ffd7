"""Health check models for the API."""

from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, Field

from patient_directory import __version__


class SourceHealth(BaseModel):
    """Record source health status model.

    Attributes:
        status: Whether the dataset could be loaded
        path: Dataset location
        record_count: Number of records loaded (when available)
        error: Failure reason (when unavailable)
    """
    status: Literal["available", "unavailable"]
    path: str
    record_count: int | None = Field(None, description="Number of records in the dataset")
    error: str | None = Field(None, description="Reason the dataset could not be loaded")


class HealthResponse(BaseModel):
    """Health check response model.

    Attributes:
        status: Overall system status
        timestamp: Current timestamp
        version: Application version
        source: Record source health information
    """
    status: Literal["healthy", "unhealthy"]
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), description="Current UTC timestamp")
    version: str = Field(default=__version__, description="Application version")
    source: SourceHealth
