"""
Unified application settings.

Aggregates all configuration modules into a single Settings class.
Provides dependency injection factory for FastAPI.

Dependencies: All config modules
System role: Central configuration aggregator for the application
"""

from functools import lru_cache

from pydantic import Field

from convoquota.configs.auth import AuthSettings
from convoquota.configs.base import BaseSettings
from convoquota.configs.classifier import ClassifierSettings
from convoquota.configs.database import DatabaseSettings
from convoquota.configs.inference import InferenceSettings
from convoquota.configs.quota import QuotaSettings
from convoquota.configs.retrieval import RetrievalSettings
from convoquota.configs.store import StoreSettings


class Settings(BaseSettings):
    """Unified application settings aggregating all config modules."""

    log_level: str = Field(default="INFO", description="Root log level (DEBUG, INFO, WARNING, ERROR)")
    cors_allow_origins: list[str] = Field(
        default_factory=lambda: ["*"],
        description="Origins allowed by CORS (JSON list in env)",
    )

    # Aggregated settings
    database: DatabaseSettings = DatabaseSettings()
    store: StoreSettings = StoreSettings()
    quota: QuotaSettings = QuotaSettings()
    classifier: ClassifierSettings = ClassifierSettings()
    inference: InferenceSettings = InferenceSettings()
    retrieval: RetrievalSettings = RetrievalSettings()
    auth: AuthSettings = AuthSettings()


@lru_cache
def get_settings() -> Settings:
    """
    Get application settings singleton.

    Returns Settings instance, cached for dependency injection.
    Environment variables loaded once at startup.

    Returns:
        Settings: Application settings instance

    Usage:
        from convoquota.configs import get_settings
        settings = get_settings()
    """
    return Settings()
