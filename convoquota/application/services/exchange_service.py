"""
Exchange service for quota-metered conversational Q&A.

Orchestrates one request: input validation, account linking, admission
check, inference with a bounded timeout, answer classification and the
commit of quota, history and the exchange record.

State flow:
    RECEIVED -> ADMISSION_CHECKED -> INFERENCE_INVOKED -> CLASSIFIED -> COMMITTED -> RESPONDED
    ADMISSION_CHECKED -> DENIED (no inference call)
    INFERENCE_INVOKED -> RESPONDED on failure or timeout (nothing committed)

Dependencies: convoquota.core, convoquota.boundary.store
System role: Exchange orchestration layer
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum

from convoquota.boundary.store.conversation_index import ConversationIndex
from convoquota.boundary.store.session_store import MAX_SESSION_ID_LENGTH, SessionStore
from convoquota.core.agentic_system.agent.assistant_agent import InferenceFunction, PromptContext
from convoquota.core.classifier import AnswerClassifier, Verdict
from convoquota.core.exceptions import (
    ConvoQuotaException,
    InferenceFailureError,
    InferenceTimeoutError,
    QuotaExhaustedError,
    ValidationError,
)
from convoquota.core.formatting import clean_answer_text
from convoquota.core.history import ASSISTANT_ROLE, USER_ROLE
from convoquota.core.quota_enforcer import QuotaEnforcer
from convoquota.core.session.records import ExchangeRecord, HistoryEntry, SessionRecord
from convoquota.observability.log_utils import (
    log_exception_with_context,
    log_with_context,
    text_summary,
)

logger = logging.getLogger(__name__)

MAX_MESSAGE_LENGTH = 4000
FAILURE_MESSAGE = "Sorry, I encountered an error. Please try again."


class ExchangeState(str, Enum):
    """Orchestrator states for one request."""

    RECEIVED = "received"
    ADMISSION_CHECKED = "admission_checked"
    DENIED = "denied"
    INFERENCE_INVOKED = "inference_invoked"
    CLASSIFIED = "classified"
    COMMITTED = "committed"
    RESPONDED = "responded"


class ExchangeStatus(str, Enum):
    """Outcome reported to the caller."""

    ANSWERED = "answered"
    DENIED = "denied"
    FAILED = "failed"


@dataclass(frozen=True)
class ExchangeResult:
    """
    Result of one exchange.

    Attributes:
        status: answered, denied (quota) or failed (inference)
        answer_text: Answer, or the user-facing failure message
        usage_count: Usage after the exchange (pre-request value if not answered)
        remaining: Billable exchanges left, None when unmetered
        billable: Whether the exchange was charged
        exchange_id: Persisted exchange id when answered
        states: States visited, in order
    """

    status: ExchangeStatus
    answer_text: str
    usage_count: int
    remaining: int | None
    billable: bool = False
    exchange_id: str | None = None
    states: tuple[ExchangeState, ...] = ()


class ExchangeService:
    """
    Exchange orchestrator.

    Composes the session store, quota enforcer, answer classifier and the
    inference collaborator. Holds no per-session state of its own.
    """

    def __init__(
        self,
        store: SessionStore,
        enforcer: QuotaEnforcer,
        classifier: AnswerClassifier,
        inference: InferenceFunction,
        conversation_index: ConversationIndex | None = None,
        inference_timeout: float = 30.0,
    ) -> None:
        """
        Initialize exchange service.

        Args:
            store: Session store
            enforcer: Quota enforcer sharing the same store
            classifier: Billable-answer strategy
            inference: Async callable producing answer text from a PromptContext
            conversation_index: Optional per-account conversation list
            inference_timeout: Seconds before an inference call is abandoned
        """
        self.store = store
        self.enforcer = enforcer
        self.classifier = classifier
        self.inference = inference
        self.conversation_index = conversation_index
        self.inference_timeout = inference_timeout

    @staticmethod
    def validate(session_id: str, message: str) -> tuple[str, str]:
        """
        Validate and normalise request input.

        Args:
            session_id: Client-held session token
            message: User message

        Returns:
            tuple[str, str]: Stripped session id and message

        Raises:
            ValidationError: Empty or oversized input
        """
        session_id = (session_id or "").strip()
        message = (message or "").strip()
        if not session_id:
            raise ValidationError("Session ID required", field="session_id")
        if len(session_id) > MAX_SESSION_ID_LENGTH:
            raise ValidationError("Session ID too long", field="session_id")
        if not message:
            raise ValidationError("Message required", field="message")
        if len(message) > MAX_MESSAGE_LENGTH:
            raise ValidationError(
                f"Message exceeds {MAX_MESSAGE_LENGTH} characters",
                field="message",
            )
        return session_id, message

    async def process_exchange(
        self,
        session_id: str,
        message: str,
        account_id: str | None = None,
    ) -> ExchangeResult:
        """
        Process one question through the full exchange flow.

        Args:
            session_id: Client-held session token
            message: User message
            account_id: Account resolved from the bearer credential, if any

        Returns:
            ExchangeResult: Answered, denied or failed outcome

        Raises:
            ValidationError: Invalid input
            StoreUnavailableError: Store unreachable (quota untouched)
            ConcurrentUpdateConflictError: Counter CAS retry budget exhausted
        """
        states = [ExchangeState.RECEIVED]
        session_id, message = self.validate(session_id, message)

        session = await self.store.create_if_absent(session_id)
        if account_id and session.linked_account_id is None:
            session = await self.store.link_account(session_id, account_id)

        admission = self.enforcer.check_admission(session)
        states.append(ExchangeState.ADMISSION_CHECKED)
        if not admission.admitted:
            states.append(ExchangeState.DENIED)
            log_with_context(
                logger,
                logging.INFO,
                "Exchange denied: quota exhausted",
                session_id=session_id,
                usage_count=admission.usage_count,
            )
            return self._denied(admission.usage_count, states)

        states.append(ExchangeState.INFERENCE_INVOKED)
        try:
            answer = await self._invoke_inference(session, message)
        except InferenceFailureError as e:
            log_exception_with_context(
                logger,
                "Inference failed, exchange not charged",
                e,
                session_id=session_id,
            )
            states.append(ExchangeState.RESPONDED)
            return ExchangeResult(
                status=ExchangeStatus.FAILED,
                answer_text=FAILURE_MESSAGE,
                usage_count=session.usage_count,
                remaining=self.enforcer.remaining(session),
                states=tuple(states),
            )

        verdict = self.classifier.classify(answer)
        states.append(ExchangeState.CLASSIFIED)

        exchange = ExchangeRecord(
            session_id=session_id,
            account_id=session.linked_account_id,
            question_text=message,
            answer_text=answer,
            billable=verdict.is_billable,
        )
        try:
            # Shielded so a client disconnect cannot interrupt a half-written commit
            usage_count = await asyncio.shield(self._commit(session, exchange, verdict))
        except QuotaExhaustedError as e:
            states.append(ExchangeState.DENIED)
            log_with_context(
                logger,
                logging.INFO,
                "Exchange denied at commit: limit reached by a concurrent request",
                session_id=session_id,
                usage_count=e.usage_count,
            )
            return self._denied(e.usage_count, states)
        except ConvoQuotaException as e:
            e.details.setdefault("usage_count", session.usage_count)
            e.details.setdefault("remaining", self.enforcer.remaining(session))
            raise

        states.extend([ExchangeState.COMMITTED, ExchangeState.RESPONDED])
        remaining = None if self.enforcer.is_unmetered(session) else max(0, self.enforcer.limit - usage_count)
        log_with_context(
            logger,
            logging.INFO,
            "Exchange committed",
            session_id=session_id,
            question=text_summary(message),
            billable=verdict.is_billable,
            usage_count=usage_count,
        )
        return ExchangeResult(
            status=ExchangeStatus.ANSWERED,
            answer_text=answer,
            usage_count=usage_count,
            remaining=remaining,
            billable=verdict.is_billable,
            exchange_id=exchange.id,
            states=tuple(states),
        )

    async def _invoke_inference(self, session: SessionRecord, message: str) -> str:
        """
        Call the inference collaborator once, bounded by the timeout.

        Raises:
            InferenceTimeoutError: Timeout elapsed
            InferenceFailureError: Collaborator raised or returned no usable text
        """
        context = PromptContext(
            session_id=session.session_id,
            question=message,
            history=session.history,
        )
        try:
            raw = await asyncio.wait_for(self.inference(context), timeout=self.inference_timeout)
        except asyncio.TimeoutError as e:
            raise InferenceTimeoutError(self.inference_timeout) from e
        except InferenceFailureError:
            raise
        except Exception as e:
            raise InferenceFailureError(
                "Inference collaborator raised",
                details={"error_type": type(e).__name__},
            ) from e

        answer = clean_answer_text(raw if isinstance(raw, str) else None)
        if not answer:
            raise InferenceFailureError("Inference returned no usable text")
        return answer

    async def _commit(
        self,
        session: SessionRecord,
        exchange: ExchangeRecord,
        verdict: Verdict,
    ) -> int:
        """
        Charge quota, then append history, then persist records.

        Only the quota step can fail the exchange; history and record writes
        are logged and skipped on failure because the charge already stands.

        Returns:
            int: Usage count after the outcome was recorded
        """
        usage_count = await self.enforcer.record_outcome(session, verdict.is_billable)

        try:
            await self.store.append_history(
                session.session_id,
                [
                    HistoryEntry(USER_ROLE, exchange.question_text, exchange.id),
                    HistoryEntry(ASSISTANT_ROLE, exchange.answer_text, exchange.id),
                ],
            )
        except ConvoQuotaException as e:
            log_exception_with_context(
                logger,
                "History append failed after commit",
                e,
                session_id=session.session_id,
            )

        try:
            await self.store.save_exchange(exchange)
        except ConvoQuotaException as e:
            log_exception_with_context(
                logger,
                "Exchange record not persisted",
                e,
                session_id=session.session_id,
                exchange_id=exchange.id,
            )

        if self.conversation_index is not None and session.linked_account_id:
            try:
                await self.conversation_index.record_exchange(
                    session.linked_account_id,
                    session.session_id,
                    exchange.question_text,
                )
            except ConvoQuotaException as e:
                log_exception_with_context(
                    logger,
                    "Conversation index not updated",
                    e,
                    session_id=session.session_id,
                )

        return usage_count

    def _denied(self, usage_count: int, states: list[ExchangeState]) -> ExchangeResult:
        states.append(ExchangeState.RESPONDED)
        return ExchangeResult(
            status=ExchangeStatus.DENIED,
            answer_text="Question limit reached. Please sign up to continue.",
            usage_count=usage_count,
            remaining=0,
            states=tuple(states),
        )
