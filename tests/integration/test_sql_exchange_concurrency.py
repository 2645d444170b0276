"""
Test suite for concurrent exchanges against the SQL session store.

Uses file-backed SQLite so each request runs on its own connection. The
inference stub waits on a barrier until every request has passed
admission, so all commits race on the same usage_count snapshot.

System role: Verification of quota safety under real store contention
"""

import asyncio

import pytest

from convoquota.application.services.exchange_service import ExchangeService, ExchangeStatus
from convoquota.boundary.store.sql_session_store import SqlSessionStore
from convoquota.core.classifier import HeuristicAnswerClassifier
from convoquota.core.exceptions import ConcurrentUpdateConflictError
from convoquota.core.quota_enforcer import QuotaEnforcer
from tests.conftest import BILLABLE_ANSWER

REQUESTS = 50
LIMIT = 10


@pytest.fixture
def sql_store(file_session_factory, history_manager) -> SqlSessionStore:
    return SqlSessionStore(file_session_factory, history_manager)


def _service(store: SqlSessionStore, retry_budget: int) -> ExchangeService:
    barrier = asyncio.Barrier(REQUESTS)

    async def inference(context):
        await barrier.wait()
        return BILLABLE_ANSWER

    return ExchangeService(
        store=store,
        enforcer=QuotaEnforcer(store, limit=LIMIT, retry_budget=retry_budget),
        classifier=HeuristicAnswerClassifier(),
        inference=inference,
    )


async def test_fifty_concurrent_exchanges_stop_at_limit(sql_store):
    # A request loses at most one race per successful increment, so LIMIT + 1 attempts always settle
    service = _service(sql_store, retry_budget=LIMIT + 1)

    results = await asyncio.wait_for(
        asyncio.gather(*(service.process_exchange("s-1", f"question {i}") for i in range(REQUESTS))),
        timeout=60,
    )

    answered = [result for result in results if result.status is ExchangeStatus.ANSWERED]
    denied = [result for result in results if result.status is ExchangeStatus.DENIED]
    assert (await sql_store.get("s-1")).usage_count == LIMIT
    assert len(answered) == LIMIT
    assert len(denied) == REQUESTS - LIMIT
    assert sorted(result.usage_count for result in answered) == list(range(1, LIMIT + 1))
    assert all(result.remaining == 0 for result in denied)
    assert len(await sql_store.list_exchanges("s-1")) == LIMIT


async def test_losers_surface_conflict_when_budget_runs_out(sql_store):
    service = _service(sql_store, retry_budget=1)

    results = await asyncio.wait_for(
        asyncio.gather(
            *(service.process_exchange("s-1", f"question {i}") for i in range(REQUESTS)),
            return_exceptions=True,
        ),
        timeout=60,
    )

    answered = [
        result for result in results
        if not isinstance(result, BaseException) and result.status is ExchangeStatus.ANSWERED
    ]
    conflicts = [result for result in results if isinstance(result, ConcurrentUpdateConflictError)]
    assert len(answered) == 1
    assert len(conflicts) == REQUESTS - 1
    assert all(error.details["usage_count"] == 0 for error in conflicts)
    assert all(error.details["remaining"] == LIMIT for error in conflicts)
    assert (await sql_store.get("s-1")).usage_count == 1
    assert len(await sql_store.list_exchanges("s-1")) == 1
