"""
Test suite for answer text formatting.

System role: Verification of answer post-processing
"""

from convoquota.core.formatting import clean_answer_text


def test_none_and_empty_return_empty_string():
    assert clean_answer_text(None) == ""
    assert clean_answer_text("") == ""


def test_strips_bold_and_italics():
    assert clean_answer_text("Use **header bidding** and *test* it") == "Use header bidding and test it"


def test_converts_bullets():
    text = clean_answer_text("Options:\n- rewarded video\n* interstitials")
    assert text == "Options:\n• rewarded video\n• interstitials"


def test_removes_headings_and_quotes():
    assert clean_answer_text("## Plan\n> Raise floors") == "Plan\nRaise floors"


def test_removes_code_fences_and_inline_code():
    text = clean_answer_text("Set `floor` now.\n```json\n{\"a\": 1}\n```\nDone.")
    assert "```" not in text
    assert "floor" in text
    assert "`" not in text


def test_keeps_link_text():
    assert clean_answer_text("See [the guide](https://example.com).") == "See the guide."


def test_collapses_blank_lines():
    assert clean_answer_text("One\n\n\n\nTwo") == "One\n\nTwo"


def test_numbered_lists_survive():
    text = "1. Raise floors\n2. Add bidders"
    assert clean_answer_text(text) == text
