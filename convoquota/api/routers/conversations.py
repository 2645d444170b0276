"""
Conversation API endpoints (linked accounts only).

Routes:
- GET /conversations - List the account's conversations
- GET /conversations/{conversation_id} - Get one conversation with its exchanges
- DELETE /conversations/{conversation_id} - Remove a conversation from the list

Dependencies: convoquota.application.services.conversation_service, convoquota.models
System role: Conversation history HTTP API
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from convoquota.api.deps import get_conversation_service, require_account_id
from convoquota.application.services.conversation_service import ConversationService
from convoquota.core.exceptions import ConversationNotFoundError, StoreUnavailableError
from convoquota.models.common import DeleteResponse
from convoquota.models.conversation import (
    ConversationDetailResponse,
    ConversationListResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/conversations", tags=["conversations"])


@router.get("", response_model=ConversationListResponse)
async def list_conversations(
    account_id: str = Depends(require_account_id),
    conversation_service: ConversationService = Depends(get_conversation_service),
) -> ConversationListResponse:
    """
    List the account's 50 most recent conversations.

    Raises:
        HTTPException(401): No valid bearer credential
        HTTPException(503): Store unavailable
    """
    try:
        conversations = await conversation_service.list_conversations(account_id)
    except StoreUnavailableError:
        logger.exception(f"{__name__}:list_conversations - store unavailable")
        raise HTTPException(status_code=503, detail="Failed to load conversations")
    return ConversationListResponse(conversations=conversations)


@router.get("/{conversation_id}", response_model=ConversationDetailResponse)
async def get_conversation(
    conversation_id: str,
    account_id: str = Depends(require_account_id),
    conversation_service: ConversationService = Depends(get_conversation_service),
) -> ConversationDetailResponse:
    """
    Get one conversation with its exchanges, oldest first.

    Raises:
        HTTPException(401): No valid bearer credential
        HTTPException(404): Not found or owned by another account
        HTTPException(503): Store unavailable
    """
    try:
        detail = await conversation_service.get_conversation(account_id, conversation_id)
    except ConversationNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    except StoreUnavailableError:
        logger.exception(f"{__name__}:get_conversation - store unavailable")
        raise HTTPException(status_code=503, detail="Failed to load conversation")
    return ConversationDetailResponse(**detail)


@router.delete("/{conversation_id}", response_model=DeleteResponse)
async def delete_conversation(
    conversation_id: str,
    account_id: str = Depends(require_account_id),
    conversation_service: ConversationService = Depends(get_conversation_service),
) -> DeleteResponse:
    """
    Remove a conversation from the account's list.

    Raises:
        HTTPException(401): No valid bearer credential
        HTTPException(404): Not found or owned by another account
        HTTPException(503): Store unavailable
    """
    try:
        await conversation_service.delete_conversation(account_id, conversation_id)
    except ConversationNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    except StoreUnavailableError:
        logger.exception(f"{__name__}:delete_conversation - store unavailable")
        raise HTTPException(status_code=503, detail="Failed to delete conversation")
    return DeleteResponse(success=True)
