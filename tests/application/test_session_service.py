"""
Test suite for SessionService.

System role: Verification of session lifecycle orchestration
"""

import pytest

from convoquota.application.services.session_service import SessionService
from convoquota.core.exceptions import SessionNotFoundError, ValidationError
from convoquota.core.history import ASSISTANT_ROLE, USER_ROLE
from convoquota.core.session.records import HistoryEntry


@pytest.fixture
def session_service(memory_store, enforcer) -> SessionService:
    """Provide session service over the in-memory store."""
    return SessionService(store=memory_store, enforcer=enforcer)


async def test_open_creates_new_session(session_service):
    status = await session_service.open_session("s-1")
    assert status == {
        "session_id": "s-1",
        "usage_count": 0,
        "remaining": 10,
        "limit": 10,
        "linked_account_id": None,
        "is_new": True,
    }


async def test_open_existing_session_reports_usage(session_service, memory_store):
    await memory_store.create_if_absent("s-1")
    await memory_store.compare_and_set_usage("s-1", expected=0, new=7)

    status = await session_service.open_session("s-1")

    assert status["is_new"] is False
    assert status["usage_count"] == 7
    assert status["remaining"] == 3


async def test_open_with_account_links_session(session_service):
    status = await session_service.open_session("s-1", account_id="acct-1")
    assert status["linked_account_id"] == "acct-1"
    assert status["remaining"] is None


@pytest.mark.parametrize("session_id", ["", "   ", "x" * 256])
async def test_open_rejects_invalid_id(session_service, session_id):
    with pytest.raises(ValidationError):
        await session_service.open_session(session_id)


async def test_get_history(session_service, memory_store):
    await memory_store.create_if_absent("s-1")
    await memory_store.append_history(
        "s-1",
        [HistoryEntry(USER_ROLE, "q", "ex-1"), HistoryEntry(ASSISTANT_ROLE, "a", "ex-1")],
    )
    assert await session_service.get_history("s-1") == [
        {"role": "user", "content": "q"},
        {"role": "assistant", "content": "a"},
    ]


async def test_get_history_missing_session(session_service):
    with pytest.raises(SessionNotFoundError):
        await session_service.get_history("missing")


async def test_capture_email_normalises_address(session_service, memory_store):
    await memory_store.create_if_absent("s-1")
    session = await session_service.capture_email("s-1", "  Ana@Example.com ")
    assert session.captured_email == "ana@example.com"


async def test_capture_email_requires_address(session_service, memory_store):
    await memory_store.create_if_absent("s-1")
    with pytest.raises(ValidationError):
        await session_service.capture_email("s-1", "   ")


async def test_capture_email_missing_session(session_service):
    with pytest.raises(SessionNotFoundError):
        await session_service.capture_email("missing", "ana@example.com")
