"""
Conversation domain models and schemas.

Response schemas for the per-account conversation list.

Dependencies: pydantic
System role: Conversation API contracts
"""

from datetime import datetime

from pydantic import BaseModel


class ConversationResponse(BaseModel):
    """Conversation list entry."""

    id: str
    session_id: str
    title: str
    last_message: str
    message_count: int
    created_at: datetime
    updated_at: datetime


class ConversationListResponse(BaseModel):
    """Response schema for listing conversations."""

    conversations: list[ConversationResponse]


class ExchangeLogEntry(BaseModel):
    """Persisted question/answer pair."""

    id: str
    question_text: str
    answer_text: str
    billable: bool
    created_at: datetime


class ConversationDetailResponse(BaseModel):
    """Response schema for one conversation with its exchanges."""

    conversation: ConversationResponse
    exchanges: list[ExchangeLogEntry]
