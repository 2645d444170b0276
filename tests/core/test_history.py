"""
Test suite for ConversationHistoryManager.

System role: Verification of the rolling history window
"""

import pytest
from langchain_core.messages import AIMessage, HumanMessage

from convoquota.core.history import ASSISTANT_ROLE, USER_ROLE, ConversationHistoryManager
from convoquota.core.session.records import HistoryEntry


def _exchange(index: int) -> tuple[HistoryEntry, HistoryEntry]:
    return (
        HistoryEntry(USER_ROLE, f"question {index}", f"ex-{index}"),
        HistoryEntry(ASSISTANT_ROLE, f"answer {index}", f"ex-{index}"),
    )


def test_append_adds_both_turns(history_manager):
    history = history_manager.append((), *_exchange(1))
    assert [entry.content for entry in history] == ["question 1", "answer 1"]


def test_append_never_exceeds_window(history_manager):
    history = ()
    for index in range(25):
        history = history_manager.append(history, *_exchange(index))
        assert len(history) <= history_manager.window
    assert len(history) == 10


def test_append_evicts_oldest_first(history_manager):
    history = ()
    for index in range(7):
        history = history_manager.append(history, *_exchange(index))
    assert history[0].content == "question 2"
    assert history[-1].content == "answer 6"


def test_append_returns_new_history(history_manager):
    original = history_manager.append((), *_exchange(1))
    updated = history_manager.append(original, *_exchange(2))
    assert len(original) == 2
    assert len(updated) == 4


def test_extend_skips_already_recorded_exchange(history_manager):
    history = history_manager.append((), *_exchange(1))
    again = history_manager.extend(history, _exchange(1))
    assert again == history


def test_extend_appends_entries_without_exchange_id(history_manager):
    entry = HistoryEntry(USER_ROLE, "hello")
    history = history_manager.extend((entry,), [entry])
    assert len(history) == 2


def test_window_must_be_positive():
    with pytest.raises(ValueError):
        ConversationHistoryManager(window=0)


def test_to_messages_maps_roles():
    history = (
        HistoryEntry(USER_ROLE, "hi"),
        HistoryEntry(ASSISTANT_ROLE, "hello"),
        HistoryEntry("system", "ignored"),
    )
    messages = ConversationHistoryManager.to_messages(history)
    assert len(messages) == 2
    assert isinstance(messages[0], HumanMessage)
    assert isinstance(messages[1], AIMessage)
    assert messages[1].content == "hello"


def test_history_entry_dict_conversion():
    entry = HistoryEntry(USER_ROLE, "hi", "ex-1")
    assert HistoryEntry.from_dict(entry.to_dict()) == entry
    assert "exchange_id" not in HistoryEntry(USER_ROLE, "hi").to_dict()
