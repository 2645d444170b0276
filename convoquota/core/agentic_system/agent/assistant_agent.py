"""
Assistant agent implementation.

Wraps a LangChain chat model behind the inference contract used by the
exchange orchestrator: a prompt context in, answer text out.

Dependencies: langchain_core, langchain_google_genai
System role: Model inference collaborator
"""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, replace

from dotenv import load_dotenv
from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import BaseMessage

from convoquota.core.agentic_system.agent.assistant_prompt import ASSISTANT_PROMPT, render_knowledge
from convoquota.core.exceptions import InferenceFailureError
from convoquota.core.history import ConversationHistoryManager
from convoquota.core.retriever import KnowledgeRetriever
from convoquota.core.session.records import HistoryEntry
from convoquota.observability.log_utils import log_exception_with_context

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PromptContext:
    """
    Everything the model sees for one turn.

    Attributes:
        session_id: Session the turn belongs to
        question: Current user message
        history: Rolling history, most recent last
        context: Knowledge-base passages relevant to the question, empty when none
    """

    session_id: str
    question: str
    history: tuple[HistoryEntry, ...] = ()
    context: str = ""


InferenceFunction = Callable[[PromptContext], Awaitable[str]]


class AssistantAgent:
    """
    Conversational assistant backed by a chat model.

    Defaults to Google GenAI; any LangChain BaseChatModel can be injected.
    With a retriever, knowledge-base passages for the question are added
    to the system prompt.
    """

    def __init__(
        self,
        model: BaseChatModel | None = None,
        model_id: str = "gemini-2.5-flash",
        temperature: float = 0.4,
        max_tokens: int = 2000,
        retriever: KnowledgeRetriever | None = None,
    ) -> None:
        """
        Initialize assistant agent.

        Args:
            model: Chat model to use (built from model_id when omitted)
            model_id: Google GenAI model identifier
            temperature: Sampling temperature
            max_tokens: Maximum output tokens
            retriever: Knowledge-base retriever (no context when omitted)
        """
        if model is None:
            from langchain_google_genai import ChatGoogleGenerativeAI

            # GOOGLE_API_KEY may live in .env, which settings classes do not export
            load_dotenv()
            model = ChatGoogleGenerativeAI(
                model=model_id,
                temperature=temperature,
                max_output_tokens=max_tokens,
            )
        self._model = model
        self._model_id = model_id
        self._retriever = retriever

    def build_messages(self, context: PromptContext) -> list[BaseMessage]:
        """
        Render system prompt, history and question as chat messages.

        Args:
            context: Prompt context for the turn

        Returns:
            list[BaseMessage]: Messages ready for the chat model
        """
        return ASSISTANT_PROMPT.invoke({
            "history": ConversationHistoryManager.to_messages(context.history),
            "question": context.question,
            "knowledge": render_knowledge(context.context),
        }).to_messages()

    async def ainvoke(self, context: PromptContext) -> str:
        """
        Generate an answer for the turn.

        Args:
            context: Prompt context for the turn

        Returns:
            str: Raw answer text

        Raises:
            InferenceFailureError: Model returned no text
        """
        if self._retriever is not None and not context.context:
            context = replace(context, context=await self._retrieve_context(context))

        messages = self.build_messages(context)
        logger.info(
            f"{__name__}:ainvoke - session_id={context.session_id}, "
            f"history_len={len(context.history)}, question_len={len(context.question)}, "
            f"has_context={bool(context.context)}"
        )
        result = await self._model.ainvoke(messages)

        content = result.content
        if isinstance(content, list):
            content = "".join(
                part.get("text", "") if isinstance(part, dict) else str(part)
                for part in content
            )
        if not content or not str(content).strip():
            raise InferenceFailureError(
                "Model returned an empty response",
                details={"model_id": self._model_id},
            )
        return str(content)

    async def _retrieve_context(self, context: PromptContext) -> str:
        # The question is still answered from general knowledge when the index is unreachable
        try:
            return await self._retriever.context_for(context.question)
        except Exception as e:
            log_exception_with_context(
                logger,
                "Knowledge-base retrieval failed, answering without context",
                e,
                session_id=context.session_id,
            )
            return ""

    async def __call__(self, context: PromptContext) -> str:
        return await self.ainvoke(context)
