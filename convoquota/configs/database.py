"""
Database configuration settings.

PostgreSQL connection parameters and pool sizing for the SQL session
store. `url_override` accepts any async SQLAlchemy URL (tests and local
runs use sqlite+aiosqlite).

Dependencies: pydantic, pydantic_settings, sqlalchemy
System role: Database connection configuration for ORM
"""

from pydantic import Field, SecretStr
from sqlalchemy.engine import URL

from convoquota.configs.base import BaseSettings, env_config


class DatabaseSettings(BaseSettings):
    """PostgreSQL database configuration."""

    model_config = env_config("POSTGRES_")

    host: str = Field(default="localhost", description="PostgreSQL host")
    port: int = Field(default=5432, description="PostgreSQL port")
    user: str = Field(default="postgres", description="PostgreSQL user")
    password: SecretStr = Field(default=SecretStr("postgres"), description="PostgreSQL password")
    db: str = Field(default="convoquota", description="PostgreSQL database name")
    require_ssl: bool = Field(default=False, description="Require TLS (managed Postgres)")

    pool_size: int = Field(default=10, ge=1, description="Connection pool size")
    max_overflow: int = Field(default=20, ge=0, description="Connections allowed beyond pool_size")
    pool_timeout: int = Field(default=30, ge=1, description="Seconds to wait for a pooled connection")
    echo_sql: bool = Field(default=False, description="Echo SQL statements to logs")

    url_override: str | None = Field(
        default=None,
        description="Full async SQLAlchemy URL, bypasses host/port/user settings",
    )

    @property
    def async_database_url(self) -> str:
        """
        Async SQLAlchemy URL for the session store.

        Credentials are escaped by SQLAlchemy's URL builder; asyncpg takes
        TLS as the `ssl` query parameter.
        """
        if self.url_override:
            return self.url_override
        url = URL.create(
            "postgresql+asyncpg",
            username=self.user,
            password=self.password.get_secret_value(),
            host=self.host,
            port=self.port,
            database=self.db,
            query={"ssl": "require"} if self.require_ssl else {},
        )
        return url.render_as_string(hide_password=False)
