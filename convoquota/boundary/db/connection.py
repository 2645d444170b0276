"""
Database connection management.

Engine and session factory for the SQL session store. Each store
operation opens its own short-lived AsyncSession from the factory.

Dependencies: sqlalchemy, convoquota.configs
System role: Database connection lifecycle management
"""

from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine

from convoquota.configs import get_settings


def get_async_engine(url: str | None = None) -> AsyncEngine:
    """
    Create the async engine from DatabaseSettings.

    PostgreSQL engines get a pre-pinged, bounded pool; SQLite URLs skip the
    pool sizing arguments, which its pool does not accept.

    Args:
        url: Explicit database URL (defaults to the configured one)

    Returns:
        AsyncEngine: Configured async SQLAlchemy engine
    """
    db_config = get_settings().database
    url = url or db_config.async_database_url

    if url.startswith("sqlite"):
        return create_async_engine(url, echo=db_config.echo_sql)

    return create_async_engine(
        url,
        echo=db_config.echo_sql,
        pool_size=db_config.pool_size,
        max_overflow=db_config.max_overflow,
        pool_timeout=db_config.pool_timeout,
        pool_pre_ping=True,
    )


def get_async_session_factory(engine: AsyncEngine | None = None) -> async_sessionmaker:
    """
    Session factory with autoflush off and no expiry on commit.

    Records are converted to immutable domain objects before the session
    closes, so expired attributes are never needed.
    """
    return async_sessionmaker(
        bind=engine or get_async_engine(),
        autoflush=False,
        expire_on_commit=False,
    )
