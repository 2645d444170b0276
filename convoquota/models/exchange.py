"""
Exchange domain models and schemas.

Request/response schemas for the question/answer endpoint.

Dependencies: pydantic
System role: Exchange API contracts
"""

from pydantic import BaseModel, Field


class ExchangeRequest(BaseModel):
    """Request schema for one question."""

    session_id: str = Field(min_length=1, max_length=255, description="Client-held session token")
    message: str = Field(min_length=1, max_length=4000, description="User question or message")


class ExchangeResponse(BaseModel):
    """Response schema for an answered exchange."""

    answer_text: str
    usage_count: int
    remaining: int | None = Field(description="Billable exchanges left, null when unmetered")
    billable: bool


class ExchangeDeniedResponse(BaseModel):
    """Response schema when the free-tier limit is reached."""

    error: str
    usage_count: int
    remaining: int = 0
    limit_reached: bool = True


class ExchangeErrorResponse(BaseModel):
    """Response schema when the exchange failed and nothing was charged."""

    error: str
    usage_count: int | None = None
    remaining: int | None = None
