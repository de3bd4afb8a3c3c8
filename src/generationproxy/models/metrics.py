"""Metrics models for generationproxy."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_serializer

from generationproxy.models.errors import ErrorKind


class GenerationMetrics(BaseModel):
    """Tracking data for one logical generation call."""

    duration_ms: int = Field(..., ge=0, description="Total call time in milliseconds, backoff included")
    model_used: Optional[str] = Field(None, description="Backend model identifier")
    attempts: int = Field(1, ge=1, description="Number of provider attempts made")
    success: bool = Field(..., description="Whether the call reached Success")
    error_kind: Optional[ErrorKind] = Field(None, description="Terminal error kind if success=False")
    text_length: int = Field(0, ge=0, description="Length of the flattened response text")
    timestamp: Optional[datetime] = Field(None, description="When the call completed (UTC)")

    @property
    def retry_count(self) -> int:
        """Retries performed (0 = first attempt was terminal)."""
        return self.attempts - 1

    @field_serializer("timestamp")
    def serialize_timestamp(self, value: datetime | None) -> str | None:
        return value.isoformat() if value else None
