"""
Common response models.

Error schema shared by every router.

Dependencies: pydantic
System role: Common API response structures
"""

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Error response schema."""

    error: str = Field(description="Stable error code")
    message: str | None = Field(default=None, description="Human-readable message")
    details: dict | list | None = Field(default=None, description="Additional error context")


class HealthResponse(BaseModel):
    status: str
    database: str
