"""
Test suite for ConversationService.

System role: Verification of conversation list use cases
"""

import pytest

from convoquota.application.services.conversation_service import ConversationService
from convoquota.core.exceptions import ConversationNotFoundError
from convoquota.core.session.records import ExchangeRecord


@pytest.fixture
def conversation_service(memory_store, conversation_index) -> ConversationService:
    """Provide conversation service over in-memory collaborators."""
    return ConversationService(store=memory_store, conversation_index=conversation_index)


async def test_list_conversations(conversation_service, conversation_index):
    await conversation_index.record_exchange("acct-1", "s-1", "question")
    conversations = await conversation_service.list_conversations("acct-1")
    assert len(conversations) == 1
    assert conversations[0]["session_id"] == "s-1"
    assert await conversation_service.list_conversations("acct-2") == []


async def test_get_conversation_includes_exchanges(conversation_service, conversation_index, memory_store):
    conversation = await conversation_index.record_exchange("acct-1", "s-1", "q1")
    await memory_store.save_exchange(
        ExchangeRecord(session_id="s-1", question_text="q1", answer_text="a1", billable=True)
    )

    detail = await conversation_service.get_conversation("acct-1", conversation.id)

    assert detail["conversation"]["id"] == conversation.id
    assert [exchange["question_text"] for exchange in detail["exchanges"]] == ["q1"]


async def test_get_conversation_of_other_account(conversation_service, conversation_index):
    conversation = await conversation_index.record_exchange("acct-1", "s-1", "q1")
    with pytest.raises(ConversationNotFoundError):
        await conversation_service.get_conversation("acct-2", conversation.id)


async def test_delete_conversation(conversation_service, conversation_index):
    conversation = await conversation_index.record_exchange("acct-1", "s-1", "q1")
    await conversation_service.delete_conversation("acct-1", conversation.id)
    with pytest.raises(ConversationNotFoundError):
        await conversation_service.delete_conversation("acct-1", conversation.id)
