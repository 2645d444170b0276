"""
Quota enforcer.

Admission decisions and the race-safe usage counter increment. The counter
is only ever moved through SessionStore.compare_and_set_usage; a lost race
re-reads the authoritative session and re-runs the admission decision
against the fresh value before trying again.

Dependencies: tenacity, convoquota.boundary.store, convoquota.core.session
System role: Free-tier quota enforcement
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    RetryError,
    retry_if_exception_type,
    stop_after_attempt,
    wait_random,
)

from convoquota.boundary.store.session_store import SessionStore
from convoquota.core.exceptions import (
    ConcurrentUpdateConflictError,
    QuotaExhaustedError,
    SessionNotFoundError,
    StaleWriteError,
)
from convoquota.core.session.records import SessionRecord
from convoquota.observability.log_utils import log_with_context

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Admission:
    """
    Result of an admission check.

    Attributes:
        admitted: Whether the request may proceed
        usage_count: Usage count the decision was made on
        unmetered: True when quota checks were bypassed
    """

    admitted: bool
    usage_count: int
    unmetered: bool = False


class QuotaEnforcer:
    """Free-tier limit checks and compare-and-swap counter updates."""

    def __init__(
        self,
        store: SessionStore,
        limit: int = 10,
        retry_budget: int = 3,
        unmetered_session_ids: Iterable[str] = (),
        retry_backoff: float = 0.0,
    ) -> None:
        """
        Initialize quota enforcer.

        Args:
            store: Session store providing the CAS primitive
            limit: Billable exchanges allowed per metered session
            retry_budget: CAS attempts before giving up
            unmetered_session_ids: Allow-listed sessions that bypass quota
            retry_backoff: Upper bound in seconds of the random pause between attempts
        """
        if retry_budget < 1:
            raise ValueError(f"retry_budget must be at least 1, got {retry_budget}")
        self.store = store
        self.limit = limit
        self.retry_budget = retry_budget
        self.unmetered_session_ids = frozenset(unmetered_session_ids)
        self.retry_backoff = retry_backoff

    def is_unmetered(self, session: SessionRecord) -> bool:
        """Return True when the session is exempt from quota checks."""
        return (
            session.linked_account_id is not None
            or session.session_id in self.unmetered_session_ids
        )

    def remaining(self, session: SessionRecord) -> int | None:
        """Return remaining billable exchanges, or None for unmetered sessions."""
        if self.is_unmetered(session):
            return None
        return max(0, self.limit - session.usage_count)

    def check_admission(self, session: SessionRecord) -> Admission:
        """
        Decide whether a new request may proceed.

        Args:
            session: Latest known session snapshot

        Returns:
            Admission: admitted for unmetered sessions or usage below the limit
        """
        if self.is_unmetered(session):
            return Admission(admitted=True, usage_count=session.usage_count, unmetered=True)
        return Admission(
            admitted=session.usage_count < self.limit,
            usage_count=session.usage_count,
        )

    async def record_outcome(self, session: SessionRecord, billable: bool) -> int:
        """
        Charge a billable exchange against the session's quota.

        Non-billable outcomes and unmetered sessions leave the counter alone.
        Otherwise increments by exactly one with compare-and-swap, re-reading
        and re-checking admission after each lost race.

        Args:
            session: Session snapshot read before the exchange
            billable: Classifier verdict for the exchange

        Returns:
            int: Usage count after the outcome was recorded

        Raises:
            QuotaExhaustedError: Fresh value shows the limit was reached meanwhile
            ConcurrentUpdateConflictError: Retry budget exhausted
            SessionNotFoundError: Session vanished between reads
            StoreUnavailableError: Backing store unreachable
        """
        if not billable or self.is_unmetered(session):
            return session.usage_count

        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(self.retry_budget),
                wait=wait_random(0, self.retry_backoff),
                retry=retry_if_exception_type(StaleWriteError),
                before_sleep=self._log_lost_race,
            ):
                with attempt:
                    if attempt.retry_state.attempt_number == 1:
                        current = session
                    else:
                        current = await self._reload(session.session_id)
                    usage_count = await self._increment(current)
        except RetryError as e:
            logger.warning(
                f"{__name__}:record_outcome - retry budget exhausted session_id={session.session_id}"
            )
            raise ConcurrentUpdateConflictError(session.session_id, self.retry_budget) from e
        return usage_count

    async def _increment(self, current: SessionRecord) -> int:
        """
        One admission re-check and CAS attempt against a session snapshot.

        Raises:
            QuotaExhaustedError: Snapshot is already at the limit
            StaleWriteError: Counter moved since the snapshot was read
        """
        admission = self.check_admission(current)
        if admission.unmetered:
            return current.usage_count
        if not admission.admitted:
            raise QuotaExhaustedError(current.session_id, current.usage_count, self.limit)

        updated = await self.store.compare_and_set_usage(
            current.session_id,
            expected=current.usage_count,
            new=current.usage_count + 1,
        )
        if updated is None:
            raise StaleWriteError(current.session_id, "usage_count", current.usage_count)
        return updated.usage_count

    async def _reload(self, session_id: str) -> SessionRecord:
        fresh = await self.store.get(session_id)
        if fresh is None:
            raise SessionNotFoundError(session_id)
        return fresh

    @staticmethod
    def _log_lost_race(retry_state: RetryCallState) -> None:
        error = retry_state.outcome.exception()
        log_with_context(
            logger,
            logging.INFO,
            "Usage counter CAS lost race, re-reading session",
            session_id=error.details.get("session_id"),
            attempt=retry_state.attempt_number,
            expected=error.details.get("expected"),
            pause=retry_state.next_action.sleep if retry_state.next_action else 0.0,
        )
