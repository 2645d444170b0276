"""
Answer text formatting.

Normalises model output to plain text before it is classified, stored and
returned. The assistant is instructed to avoid markdown, but models do not
always comply.

Dependencies: re
System role: Answer post-processing
"""

import re

_SUBSTITUTIONS: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r"```[\s\S]*?```"), ""),
    (re.compile(r"^\* ", re.MULTILINE), "• "),
    (re.compile(r"^- ", re.MULTILINE), "• "),
    (re.compile(r"^\*\*", re.MULTILINE), ""),
    (re.compile(r"\*\*(.*?)\*\*"), r"\1"),
    (re.compile(r"__(.*?)__"), r"\1"),
    (re.compile(r"\*([^*\n]+)\*"), r"\1"),
    (re.compile(r"(?<!\w)_([^_\n]+)_(?!\w)"), r"\1"),
    (re.compile(r"^#{1,6}\s+", re.MULTILINE), ""),
    (re.compile(r"`([^`]+)`"), r"\1"),
    (re.compile(r"\[([^\]]+)\]\([^)]+\)"), r"\1"),
    (re.compile(r"^[*_]{3,}$", re.MULTILINE), ""),
    (re.compile(r"^>\s+", re.MULTILINE), ""),
    (re.compile(r"\n{3,}"), "\n\n"),
]


def clean_answer_text(text: str | None) -> str:
    """
    Strip markdown emphasis, headings, fences, links and quotes.

    Dash and asterisk bullets become "•" so enumerated guidance survives.

    Args:
        text: Raw model output

    Returns:
        str: Plain-text answer (empty string for None)
    """
    if not text:
        return ""
    cleaned = text
    for pattern, replacement in _SUBSTITUTIONS:
        cleaned = pattern.sub(replacement, cleaned)
    return cleaned.strip()
