"""
Quota configuration settings.

Free-tier limit, counter retry budget and rolling history window.

Dependencies: pydantic, pydantic_settings
System role: Quota policy configuration
"""

from pydantic import Field

from convoquota.configs.base import BaseSettings, env_config


class QuotaSettings(BaseSettings):
    """Free-tier quota configuration."""

    model_config = env_config("QUOTA_")

    limit: int = Field(default=10, ge=0, description="Billable exchanges allowed per metered session")
    retry_budget: int = Field(default=3, ge=1, description="Compare-and-swap attempts per counter increment")
    retry_backoff_seconds: float = Field(
        default=0.01,
        ge=0.0,
        description="Upper bound of the random pause between compare-and-swap attempts",
    )
    history_window: int = Field(default=10, ge=2, description="Rolling history entries kept per session")
    unmetered_session_ids: list[str] = Field(
        default_factory=list,
        description="Session ids that bypass quota checks (JSON list in env)",
    )
