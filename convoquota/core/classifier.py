"""
Answer classifier.

Decides whether a generated answer counts against the free-tier quota.
The orchestrator depends only on the AnswerClassifier protocol so the rule
set can be swapped without touching the exchange flow.

Policy implemented by HeuristicAnswerClassifier, in order:
1. Non-string or blank answers are non-billable.
2. Error turns, and failure messages without substance, are non-billable.
3. Answers shorter than min_length are non-billable.
4. Mostly-interrogative answers (question ratio >= max_question_ratio) are
   non-billable unless they carry at least min_substance substance points.
5. Answers soliciting missing details are non-billable under the same
   substance override.
6. Everything else is billable.

Substance points = enumerated items + concrete figures + actionable sentences.

Dependencies: re, convoquota.configs.classifier
System role: Billable-usage policy
"""

import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from convoquota.configs.classifier import (
    DEFAULT_ACTION_VERBS,
    DEFAULT_FAILURE_MARKERS,
    DEFAULT_SOLICITATION_PHRASES,
    ClassifierSettings,
)

logger = logging.getLogger(__name__)

_SENTENCE_SPLIT = re.compile(r"(?<=[.!?])\s+")
_LIST_MARKER = re.compile(r"^\s*(?:\d{1,2}[.)]|[•\-*])\s+")
_ENUMERATED_LINE = re.compile(r"^\s*(?:\d{1,2}[.)]|[•\-*])\s+\S", re.MULTILINE)
_FIGURE = re.compile(r"[$€£]?\d+(?:[.,]\d+)?\s?%?")


class Verdict(str, Enum):
    """Classifier outcome for one exchange."""

    BILLABLE = "billable"
    NON_BILLABLE = "non_billable"

    @property
    def is_billable(self) -> bool:
        return self is Verdict.BILLABLE


@dataclass(frozen=True)
class TurnContext:
    """
    Context of the turn being classified.

    Attributes:
        is_error: True when the answer is a fallback produced after a failure;
            such turns are never billable
    """

    is_error: bool = False


@dataclass(frozen=True)
class AnswerSignals:
    """Measured features of an answer."""

    length: int
    sentences: int
    questions: int
    enumerated_items: int
    figures: int
    actions: int
    solicits_details: bool
    looks_like_failure: bool

    @property
    def question_ratio(self) -> float:
        if self.sentences == 0:
            return 0.0
        return self.questions / self.sentences

    @property
    def substance(self) -> int:
        return self.enumerated_items + self.figures + self.actions


class AnswerClassifier(Protocol):
    """Strategy interface for billable-answer policies."""

    def classify(self, answer_text: str, turn_context: TurnContext | None = None) -> Verdict:
        ...


class HeuristicAnswerClassifier:
    """Length, interrogative-ratio and substance based classifier."""

    def __init__(
        self,
        min_length: int = 60,
        max_question_ratio: float = 0.5,
        min_substance: int = 3,
        failure_markers: Sequence[str] = DEFAULT_FAILURE_MARKERS,
        solicitation_phrases: Sequence[str] = DEFAULT_SOLICITATION_PHRASES,
        action_verbs: Sequence[str] = DEFAULT_ACTION_VERBS,
    ) -> None:
        self.min_length = min_length
        self.max_question_ratio = max_question_ratio
        self.min_substance = min_substance
        self.failure_markers = tuple(marker.lower() for marker in failure_markers)
        self.solicitation_phrases = tuple(phrase.lower() for phrase in solicitation_phrases)
        self.action_verbs = tuple(verb.lower() for verb in action_verbs)

    @classmethod
    def from_settings(cls, settings: ClassifierSettings) -> "HeuristicAnswerClassifier":
        """
        Build classifier from ClassifierSettings.

        Args:
            settings: Classifier thresholds and phrase lists

        Returns:
            HeuristicAnswerClassifier: Configured classifier
        """
        return cls(
            min_length=settings.min_length,
            max_question_ratio=settings.max_question_ratio,
            min_substance=settings.min_substance,
            failure_markers=settings.failure_markers,
            solicitation_phrases=settings.solicitation_phrases,
            action_verbs=settings.action_verbs,
        )

    def analyze(self, text: str) -> AnswerSignals:
        """
        Measure the features the policy is based on.

        Args:
            text: Stripped answer text

        Returns:
            AnswerSignals: Counts and flags for the answer
        """
        lowered = text.lower()
        sentences: list[str] = []
        for line in text.splitlines():
            body = _LIST_MARKER.sub("", line).strip()
            sentences.extend(part.strip() for part in _SENTENCE_SPLIT.split(body) if part.strip())

        return AnswerSignals(
            length=len(text),
            sentences=len(sentences),
            questions=sum(1 for sentence in sentences if sentence.endswith("?")),
            enumerated_items=len(_ENUMERATED_LINE.findall(text)),
            figures=sum(len(_FIGURE.findall(sentence)) for sentence in sentences),
            actions=sum(1 for sentence in sentences if self._starts_with_action(sentence)),
            solicits_details=any(phrase in lowered for phrase in self.solicitation_phrases),
            looks_like_failure=any(marker in lowered for marker in self.failure_markers),
        )

    def classify(self, answer_text: str, turn_context: TurnContext | None = None) -> Verdict:
        """
        Classify an answer as billable or non-billable.

        Never raises; anything unexpected classifies as non-billable.

        Args:
            answer_text: Generated answer
            turn_context: Optional turn context

        Returns:
            Verdict: BILLABLE or NON_BILLABLE
        """
        try:
            return self._classify(answer_text, turn_context or TurnContext())
        except Exception:
            logger.exception("Answer classification failed, defaulting to non-billable")
            return Verdict.NON_BILLABLE

    def _classify(self, answer_text: object, turn_context: TurnContext) -> Verdict:
        if not isinstance(answer_text, str):
            return Verdict.NON_BILLABLE
        text = answer_text.strip()
        if not text or turn_context.is_error:
            return Verdict.NON_BILLABLE

        signals = self.analyze(text)
        substantive = signals.substance >= self.min_substance

        if signals.looks_like_failure and not substantive:
            return Verdict.NON_BILLABLE
        if signals.length < self.min_length:
            return Verdict.NON_BILLABLE
        if signals.question_ratio >= self.max_question_ratio and not substantive:
            return Verdict.NON_BILLABLE
        if signals.solicits_details and not substantive:
            return Verdict.NON_BILLABLE
        return Verdict.BILLABLE

    def _starts_with_action(self, sentence: str) -> bool:
        lowered = sentence.lower()
        return any(
            lowered == verb or lowered.startswith(f"{verb} ")
            for verb in self.action_verbs
        )
