"""
Common schemas shared across endpoints.

Dependencies: pydantic
System role: Shared API contracts
"""

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Error body for failed requests."""

    error: str = Field(description="User-facing error message")
    detail: str | None = Field(default=None, description="Error code for clients")


class DeleteResponse(BaseModel):
    """Response for delete operations."""

    success: bool
