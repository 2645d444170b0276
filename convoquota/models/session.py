"""
Session domain models and schemas.

Request/response schemas for session operations.

Dependencies: pydantic
System role: Session API contracts
"""

from pydantic import BaseModel, EmailStr, Field


class OpenSessionRequest(BaseModel):
    """Request schema for opening (get or create) a session."""

    session_id: str = Field(
        min_length=1,
        max_length=255,
        description="Client-held session token",
    )


class SessionStatusResponse(BaseModel):
    """Response schema for session status."""

    session_id: str
    usage_count: int
    remaining: int | None = Field(description="Billable exchanges left, null when unmetered")
    limit: int
    linked_account_id: str | None = None
    is_new: bool


class HistoryEntryResponse(BaseModel):
    """Single entry of the rolling history."""

    role: str = Field(description="Message role: 'user' or 'assistant'")
    content: str = Field(description="Message content")


class SessionHistoryResponse(BaseModel):
    """Response schema for the rolling history of a session."""

    messages: list[HistoryEntryResponse]
    total: int = Field(description="Total number of entries")


class CaptureEmailRequest(BaseModel):
    """Request schema for leaving a contact email on a session."""

    email: EmailStr = Field(description="Visitor contact email")


class CaptureEmailResponse(BaseModel):
    """Response schema for email capture."""

    success: bool = True
    message: str = "Email captured successfully"
