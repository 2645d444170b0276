"""
Answer classifier configuration settings.

Thresholds and phrase lists for the billable-answer heuristic.

Dependencies: pydantic, pydantic_settings
System role: Classification policy tuning
"""

from pydantic import Field

from convoquota.configs.base import BaseSettings, env_config

DEFAULT_FAILURE_MARKERS = [
    "i encountered an error",
    "could not generate a response",
    "something went wrong on my end",
    "unable to process your request",
]

DEFAULT_SOLICITATION_PHRASES = [
    "could you tell me",
    "could you share",
    "could you provide",
    "can you tell me",
    "can you share",
    "can you provide",
    "please provide",
    "please share",
    "please clarify",
    "could you clarify",
    "can you clarify",
    "i need more information",
    "i need more details",
    "need a bit more context",
    "let me know more about",
    "what is your current",
    "which platform",
]

DEFAULT_ACTION_VERBS = [
    "add",
    "avoid",
    "consider",
    "configure",
    "enable",
    "disable",
    "increase",
    "reduce",
    "lower",
    "raise",
    "set",
    "start",
    "switch",
    "test",
    "try",
    "use",
    "implement",
    "monitor",
    "track",
    "review",
    "make sure",
    "ensure",
]


class ClassifierSettings(BaseSettings):
    """Thresholds for HeuristicAnswerClassifier."""

    model_config = env_config("CLASSIFIER_")

    min_length: int = Field(default=60, ge=0, description="Answers shorter than this are never billable")
    max_question_ratio: float = Field(
        default=0.5,
        ge=0.0,
        le=1.0,
        description="Share of interrogative sentences at which an answer counts as clarifying",
    )
    min_substance: int = Field(
        default=3,
        ge=0,
        description="Substance points (items, figures, actions) that override clarifying signals",
    )
    failure_markers: list[str] = Field(default_factory=lambda: list(DEFAULT_FAILURE_MARKERS))
    solicitation_phrases: list[str] = Field(default_factory=lambda: list(DEFAULT_SOLICITATION_PHRASES))
    action_verbs: list[str] = Field(default_factory=lambda: list(DEFAULT_ACTION_VERBS))
