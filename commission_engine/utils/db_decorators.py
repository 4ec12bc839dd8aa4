"""
Database decorators for automatic error handling and rollback.

Provides decorators to automatically handle database errors and rollbacks
in async functions that use SQLAlchemy sessions.
"""

from collections.abc import Callable
from functools import wraps
from typing import Any, TypeVar

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession


T = TypeVar("T")


def _find_session(args: tuple, kwargs: dict) -> AsyncSession | None:
    session = kwargs.get("session")
    if session is None and args and isinstance(args[0], AsyncSession):
        session = args[0]
    return session


def with_rollback_on_error(func: Callable[..., T]) -> Callable[..., T]:
    """
    Decorator that automatically rolls back the session on any exception.

    Usage:
        @with_rollback_on_error
        async def seed_tiers(session: AsyncSession, ...):
            # Your database operations
            pass

    The wrapped function must accept 'session' as a keyword argument or
    as its first positional argument. The original exception is re-raised
    after the rollback.
    """
    @wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> T:
        session = _find_session(args, kwargs)

        if session is None:
            logger.warning(
                f"Function {func.__name__} decorated with @with_rollback_on_error "
                f"but no session argument found. Rollback will not be performed."
            )
            return await func(*args, **kwargs)

        try:
            return await func(*args, **kwargs)
        except Exception as e:
            try:
                await session.rollback()
                logger.info(
                    f"Rollback performed in {func.__name__} due to error: {type(e).__name__}"
                )
            except Exception as rollback_error:
                logger.opt(exception=True).error(
                    f"Failed to rollback in {func.__name__}: {rollback_error!r}"
                )
            raise

    return wrapper


def with_auto_commit(func: Callable[..., T]) -> Callable[..., T]:
    """
    Decorator that commits the session on success and rolls back on error.

    Usage:
        @with_auto_commit
        async def create_partner(session: AsyncSession, ...):
            # No need to call session.commit() - it's automatic
            pass
    """
    @wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> T:
        session = _find_session(args, kwargs)

        if session is None:
            logger.warning(
                f"Function {func.__name__} decorated with @with_auto_commit "
                f"but no session argument found. Commit/rollback will not be performed."
            )
            return await func(*args, **kwargs)

        try:
            result = await func(*args, **kwargs)
            await session.commit()
            logger.debug(f"Auto-commit performed in {func.__name__}")
            return result
        except Exception as e:
            try:
                await session.rollback()
                logger.info(
                    f"Rollback performed in {func.__name__} due to error: {type(e).__name__}"
                )
            except Exception as rollback_error:
                logger.opt(exception=True).error(
                    f"Failed to rollback in {func.__name__}: {rollback_error!r}"
                )
            raise

    return wrapper
