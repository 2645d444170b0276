"""
Test suite for AssistantAgent.

Uses LangChain's fake chat model so no network calls are made.

System role: Verification of the inference collaborator
"""

import pytest
from langchain_core.language_models.fake_chat_models import FakeListChatModel
from langchain_core.messages import AIMessage, HumanMessage, SystemMessage

from convoquota.core.agentic_system.agent.assistant_agent import AssistantAgent, PromptContext
from convoquota.core.exceptions import InferenceFailureError
from convoquota.core.history import ASSISTANT_ROLE, USER_ROLE
from convoquota.core.session.records import HistoryEntry


def test_build_messages_orders_system_history_question():
    agent = AssistantAgent(model=FakeListChatModel(responses=["ok"]))
    context = PromptContext(
        session_id="s-1",
        question="And for iOS?",
        history=(
            HistoryEntry(USER_ROLE, "How do I raise eCPM on Android?"),
            HistoryEntry(ASSISTANT_ROLE, "Add bidders."),
        ),
    )

    messages = agent.build_messages(context)

    assert isinstance(messages[0], SystemMessage)
    assert isinstance(messages[1], HumanMessage)
    assert isinstance(messages[2], AIMessage)
    assert messages[-1].content == "And for iOS?"
    assert len(messages) == 4


def test_build_messages_without_history():
    agent = AssistantAgent(model=FakeListChatModel(responses=["ok"]))
    messages = agent.build_messages(PromptContext(session_id="s-1", question="Hi"))
    assert len(messages) == 2


async def test_ainvoke_returns_model_text():
    agent = AssistantAgent(model=FakeListChatModel(responses=["Raise your floors."]))
    answer = await agent(PromptContext(session_id="s-1", question="Tips?"))
    assert answer == "Raise your floors."


async def test_empty_model_output_raises():
    agent = AssistantAgent(model=FakeListChatModel(responses=["   "]))
    with pytest.raises(InferenceFailureError):
        await agent.ainvoke(PromptContext(session_id="s-1", question="Tips?"))


class _StaticRetriever:
    def __init__(self, context: str = "", error: Exception | None = None) -> None:
        self.context = context
        self.error = error
        self.questions: list[str] = []

    async def context_for(self, question: str) -> str:
        self.questions.append(question)
        if self.error is not None:
            raise self.error
        return self.context


def test_system_prompt_renders_knowledge_context():
    agent = AssistantAgent(model=FakeListChatModel(responses=["ok"]))
    context = PromptContext(
        session_id="s-1",
        question="Tips?",
        context="[bidding.md - Relevance: 82.0%]\nHeader bidding lifts eCPM.",
    )

    system = agent.build_messages(context)[0].content

    assert "## Relevant Knowledge Base Content" in system
    assert "Header bidding lifts eCPM." in system


def test_system_prompt_omits_knowledge_section_without_context():
    agent = AssistantAgent(model=FakeListChatModel(responses=["ok"]))
    system = agent.build_messages(PromptContext(session_id="s-1", question="Tips?"))[0].content
    assert "Relevant Knowledge Base Content" not in system


async def test_retrieved_context_reaches_the_model(monkeypatch):
    model = FakeListChatModel(responses=["Add a second bidder."])
    retriever = _StaticRetriever("[bidding.md - Relevance: 82.0%]\nHeader bidding lifts eCPM.")
    agent = AssistantAgent(model=model, retriever=retriever)
    seen = []
    original = FakeListChatModel.ainvoke

    async def capture(self, messages, *args, **kwargs):
        seen.append(messages)
        return await original(self, messages, *args, **kwargs)

    monkeypatch.setattr(FakeListChatModel, "ainvoke", capture)

    answer = await agent(PromptContext(session_id="s-1", question="How do I raise eCPM?"))

    assert answer == "Add a second bidder."
    assert retriever.questions == ["How do I raise eCPM?"]
    assert "Header bidding lifts eCPM." in seen[0][0].content


async def test_retrieval_failure_falls_back_to_plain_prompt(caplog):
    retriever = _StaticRetriever(error=RuntimeError("index unreadable"))
    agent = AssistantAgent(model=FakeListChatModel(responses=["General advice."]), retriever=retriever)

    answer = await agent(PromptContext(session_id="s-1", question="Tips?"))

    assert answer == "General advice."
    assert any("retrieval failed" in record.getMessage() for record in caplog.records)
