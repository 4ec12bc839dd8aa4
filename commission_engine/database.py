"""
Database engine and session factory.

PostgreSQL (asyncpg) in production, SQLite (aiosqlite) for local runs and
tests. SQLite connections get explicit transaction control so SAVEPOINTs
and write serialization behave like PostgreSQL.
"""

from typing import Any

from loguru import logger
from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool

from commission_engine.config.settings import settings

_engine: AsyncEngine | None = None
_session_maker: async_sessionmaker[AsyncSession] | None = None


def install_sqlite_transaction_hooks(engine: AsyncEngine) -> None:
    """
    Take over transaction handling from the sqlite3 driver.

    The driver's own BEGIN handling breaks SAVEPOINT semantics. Emitting
    BEGIN IMMEDIATE takes the write lock up front, so two runs for the same
    transaction serialize instead of failing on lock upgrade.
    """

    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection: Any, connection_record: Any) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _on_begin(conn: Any) -> None:
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def create_engine(
    database_url: str | None = None,
    echo: bool | None = None,
    null_pool: bool = False,
) -> AsyncEngine:
    """
    Create async engine for the configured database.

    Args:
        database_url: Override for settings.database_url
        echo: Override for settings.database_echo
        null_pool: Open a fresh connection per checkout (worker threads)

    Returns:
        Configured AsyncEngine
    """
    url = database_url or settings.database_url
    echo = settings.database_echo if echo is None else echo

    if url.startswith("sqlite"):
        sqlite_kwargs: dict[str, Any] = {"connect_args": {"timeout": 30}}
        if null_pool:
            sqlite_kwargs["poolclass"] = NullPool
        engine = create_async_engine(url, echo=echo, **sqlite_kwargs)
        install_sqlite_transaction_hooks(engine)
    elif null_pool:
        engine = create_async_engine(url, echo=echo, poolclass=NullPool)
    else:
        engine = create_async_engine(
            url,
            echo=echo,
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_timeout=settings.db_pool_timeout,
            pool_recycle=settings.db_pool_recycle,
            pool_pre_ping=True,
        )

    logger.debug(f"Database engine created for dialect {engine.dialect.name}")
    return engine


def create_session_maker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create session maker bound to ``engine``."""
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


def get_session_maker() -> async_sessionmaker[AsyncSession]:
    """Get the process-wide session maker, creating the engine on first use."""
    global _engine, _session_maker
    if _session_maker is None:
        _engine = create_engine()
        _session_maker = create_session_maker(_engine)
    return _session_maker


async def dispose_engine() -> None:
    """Dispose the process-wide engine, if one was created."""
    global _engine, _session_maker
    if _engine is not None:
        await _engine.dispose()
        logger.debug("Database connections cleaned up")
    _engine = None
    _session_maker = None
