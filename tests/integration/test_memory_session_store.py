"""
Test suite for InMemorySessionStore.

System role: Verification of the single-process session store
"""

import asyncio

import pytest

from convoquota.core.exceptions import SessionNotFoundError
from convoquota.core.history import ASSISTANT_ROLE, USER_ROLE
from convoquota.core.session.records import ExchangeRecord, HistoryEntry


async def test_get_missing_returns_none(memory_store):
    assert await memory_store.get("missing") is None


async def test_create_if_absent_is_idempotent(memory_store):
    first = await memory_store.create_if_absent("s-1")
    await memory_store.compare_and_set_usage("s-1", expected=0, new=2)
    second = await memory_store.create_if_absent("s-1")
    assert first.usage_count == 0
    assert second.usage_count == 2


async def test_compare_and_set_usage(memory_store):
    await memory_store.create_if_absent("s-1")
    updated = await memory_store.compare_and_set_usage("s-1", expected=0, new=1)
    assert updated.usage_count == 1
    assert updated.revision == 1
    assert await memory_store.compare_and_set_usage("s-1", expected=0, new=1) is None


async def test_concurrent_cas_only_one_wins(memory_store):
    await memory_store.create_if_absent("s-1")
    results = await asyncio.gather(
        *(memory_store.compare_and_set_usage("s-1", expected=0, new=1) for _ in range(20))
    )
    assert sum(1 for result in results if result is not None) == 1
    assert (await memory_store.get("s-1")).usage_count == 1


async def test_append_history_applies_window(memory_store):
    await memory_store.create_if_absent("s-1")
    for index in range(8):
        await memory_store.append_history(
            "s-1",
            [
                HistoryEntry(USER_ROLE, f"q{index}", f"ex-{index}"),
                HistoryEntry(ASSISTANT_ROLE, f"a{index}", f"ex-{index}"),
            ],
        )
    history = (await memory_store.get("s-1")).history
    assert len(history) == 10
    assert history[0].content == "q3"


async def test_append_history_missing_session_raises(memory_store):
    with pytest.raises(SessionNotFoundError):
        await memory_store.append_history("missing", [HistoryEntry(USER_ROLE, "hi")])


async def test_link_account_first_wins(memory_store):
    await memory_store.create_if_absent("s-1")
    await memory_store.link_account("s-1", "acct-1")
    session = await memory_store.link_account("s-1", "acct-2")
    assert session.linked_account_id == "acct-1"


async def test_capture_email_replaces_previous_email(memory_store):
    await memory_store.create_if_absent("s-1")
    captured = await memory_store.capture_email("s-1", "ana@example.com")
    assert await memory_store.capture_email("s-1", "ana@example.com") is captured
    replaced = await memory_store.capture_email("s-1", "ana@work.example.com")
    assert replaced.captured_email == "ana@work.example.com"
    assert (await memory_store.get("s-1")).captured_email == "ana@work.example.com"


async def test_capture_email_missing_session_raises(memory_store):
    with pytest.raises(SessionNotFoundError):
        await memory_store.capture_email("missing", "ana@example.com")


async def test_save_exchange_is_idempotent(memory_store):
    exchange = ExchangeRecord(session_id="s-1", question_text="q", answer_text="a", billable=True)
    await memory_store.save_exchange(exchange)
    await memory_store.save_exchange(exchange)
    assert await memory_store.list_exchanges("s-1") == [exchange]
    assert await memory_store.list_exchanges("other") == []


async def test_session_locks_are_released_after_use(memory_store):
    for index in range(100):
        session_id = f"s-{index}"
        await memory_store.create_if_absent(session_id)
        await memory_store.compare_and_set_usage(session_id, expected=0, new=1)
        await memory_store.link_account(session_id, "acct-1")

    with pytest.raises(SessionNotFoundError):
        await memory_store.append_history("missing", [HistoryEntry(USER_ROLE, "hi")])

    assert memory_store._locks == {}


async def test_contended_lock_is_kept_until_last_waiter_leaves(memory_store):
    await memory_store.create_if_absent("s-1")

    async with memory_store._lock("s-1"):
        waiters = [
            asyncio.create_task(memory_store.compare_and_set_usage("s-1", expected=i, new=i + 1))
            for i in range(5)
        ]
        await asyncio.sleep(0)
        assert memory_store._locks["s-1"].users == 6

    results = await asyncio.gather(*waiters)

    assert all(result is not None for result in results)
    assert (await memory_store.get("s-1")).usage_count == 5
    assert memory_store._locks == {}
