"""
Dramatiq broker configuration.

Redis-based message broker for the commission queue. The test environment
gets an in-memory StubBroker.
"""

import dramatiq
from dramatiq.brokers.redis import RedisBroker
from dramatiq.brokers.stub import StubBroker
from dramatiq.middleware import CurrentMessage, Retries, default_middleware
from loguru import logger

from commission_engine.config.settings import settings
from commission_engine.utils.exceptions import is_transient


def should_retry(retries_so_far: int, exception: BaseException) -> bool:
    """
    Retry only transient failures, up to the configured limit.

    Re-delivery is safe: the ledger ignores duplicate writes.
    """
    return retries_so_far < settings.commission_task_max_retries and is_transient(exception)


def _build_middleware() -> list:
    # Replace the stock Retries with one that knows which errors are transient
    middleware = [m() for m in default_middleware if m is not Retries]
    middleware.append(CurrentMessage())
    middleware.append(
        Retries(
            min_backoff=1000,  # 1 second
            max_backoff=60000,  # 1 minute
            retry_when=should_retry,
        )
    )
    return middleware


if settings.environment == "test":
    broker = StubBroker(middleware=_build_middleware())
    logger.debug("Dramatiq stub broker initialized for tests")
else:
    broker = RedisBroker(
        host=settings.redis_host,
        port=settings.redis_port,
        password=settings.redis_password if settings.redis_password else None,
        db=settings.redis_db,
        middleware=_build_middleware(),
    )
    logger.info(
        f"Dramatiq broker initialized: "
        f"redis://{settings.redis_host}:{settings.redis_port}/{settings.redis_db}"
    )

# Set as default broker
dramatiq.set_broker(broker)
