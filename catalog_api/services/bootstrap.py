"""Store construction and startup connectivity.

All three stores must answer a ping before the API accepts traffic. Attempts
are bounded (fixed count, fixed delay); running out of attempts raises
BootstrapError, which aborts application startup.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
import logging

from catalog_api.errors import BootstrapError
from catalog_api.settings import Settings
from catalog_api.stores.mongo import ReviewStore
from catalog_api.stores.postgres import PostgresStore
from catalog_api.stores.redis import CacheStore

logger = logging.getLogger("uvicorn.error")


@dataclass
class Stores:
    """Process-wide store handles, created once at startup."""

    postgres: PostgresStore
    reviews: ReviewStore
    cache: CacheStore

    @classmethod
    def from_settings(cls, settings: Settings) -> Stores:
        return cls(
            postgres=PostgresStore(settings.async_database_url, echo=settings.debug),
            reviews=ReviewStore.from_url(settings.mongo_uri, settings.mongo_db),
            cache=CacheStore.from_url(settings.redis_url),
        )

    async def close(self) -> None:
        await self.cache.close()
        await self.reviews.close()
        await self.postgres.close()


async def connect_with_retry(stores: Stores, *, max_retries: int = 10, retry_delay: float = 3.0) -> None:
    """Ping PostgreSQL, MongoDB and Redis until all answer.

    Args:
        stores: Store handles to check.
        max_retries: Total number of attempts.
        retry_delay: Seconds to wait between attempts.

    Raises:
        BootstrapError: If any store is still unreachable after the last attempt.
    """
    last_error: Exception | None = None

    for attempt in range(1, max_retries + 1):
        logger.info(f"Attempting to connect to databases... Attempt {attempt} of {max_retries}")
        try:
            await stores.postgres.ping()
            logger.info("PostgreSQL connected")
            await stores.reviews.ping()
            logger.info("MongoDB connected")
            await stores.cache.ping()
            logger.info("Redis connected")
        except Exception as e:
            last_error = e
            if attempt < max_retries:
                logger.warning(f"Connection attempt failed: {e}. Retrying in {retry_delay}s...")
                await asyncio.sleep(retry_delay)
            continue

        logger.info("All databases are connected")
        return

    logger.error(f"Failed to connect to databases after {max_retries} attempts")
    raise BootstrapError(
        f"Failed to connect to databases after {max_retries} attempts: {last_error}"
    ) from last_error
