"""
Session store configuration settings.

Selects the backing store for sessions and exchange records.

Dependencies: pydantic, pydantic_settings
System role: Persistence backend selection
"""

from typing import Literal

from pydantic import Field

from convoquota.configs.base import BaseSettings, env_config


class StoreSettings(BaseSettings):
    """Session store backend configuration."""

    model_config = env_config("STORE_")

    backend: Literal["sql", "memory"] = Field(
        default="sql",
        description="Session store backend: 'sql' (SQLAlchemy) or 'memory' (single process)",
    )
    create_tables: bool = Field(
        default=False,
        description="Create missing tables on application startup",
    )
