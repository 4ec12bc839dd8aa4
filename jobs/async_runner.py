"""
Async runner for dramatiq tasks.

Provides a thread-safe way to run async code in dramatiq actors.
Solves the event loop issues with SQLAlchemy connections.
"""

import asyncio
import threading
from collections.abc import AsyncIterator, Coroutine
from contextlib import asynccontextmanager
from typing import Any, TypeVar

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from commission_engine.database import create_engine, create_session_maker

T = TypeVar("T")

# Thread-local storage for event loops
_thread_local = threading.local()


def get_event_loop() -> asyncio.AbstractEventLoop:
    """
    Get or create event loop for current thread.

    Creates a new event loop for each thread and reuses it.
    This prevents "Future attached to a different loop" errors.
    """
    loop = getattr(_thread_local, "loop", None)
    if loop is None or loop.is_closed():
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        _thread_local.loop = loop
        logger.debug(f"Created new event loop for thread {threading.current_thread().name}")
    return loop


def run_async(coro: Coroutine[Any, Any, T]) -> T:
    """
    Run async coroutine in the thread's event loop.

    Args:
        coro: Async coroutine to run

    Returns:
        Result of the coroutine
    """
    loop = get_event_loop()
    return loop.run_until_complete(coro)


@asynccontextmanager
async def create_local_session() -> AsyncIterator[AsyncSession]:
    """
    Create a local database session for the current event loop.

    Uses an engine without a connection pool, so nothing is shared between
    dramatiq worker threads.

    Usage:
        async with create_local_session() as session:
            await session.execute(...)
    """
    local_engine = create_engine(null_pool=True)
    local_session_maker = create_session_maker(local_engine)

    try:
        async with local_session_maker() as session:
            yield session
    finally:
        await local_engine.dispose()
