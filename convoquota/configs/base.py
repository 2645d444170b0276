"""
Base configuration settings.

Every settings class reads the same .env file; each concern scopes its
variables with its own prefix through `env_config`.

Dependencies: pydantic_settings
System role: Foundation for all configuration classes
"""

from pydantic_settings import BaseSettings as PydanticBaseSettings, SettingsConfigDict


def env_config(prefix: str = "") -> SettingsConfigDict:
    """
    Build the settings config shared by all config modules.

    Args:
        prefix: Environment variable prefix, e.g. "QUOTA_"

    Returns:
        SettingsConfigDict: Case-insensitive .env config ignoring unknown keys
    """
    return SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix=prefix,
        case_sensitive=False,
        extra="ignore",
    )


class BaseSettings(PydanticBaseSettings):
    """Base configuration class for unprefixed settings."""

    model_config = env_config()
