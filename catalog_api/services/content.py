"""Content aggregation service.

Decides, per request, which stores to consult and how to merge them:

- Metadata: cache-aside over Redis -> PostgreSQL, refilled on miss with a
  fixed TTL. No single-flight: concurrent misses on the same id each query
  PostgreSQL and each write the cache.
- Details: PostgreSQL metadata, MongoDB reviews and the Redis view counter
  fetched concurrently; metadata decides existence.
- Views: fire-and-forget INCR; failures are logged and dropped.
- Trending: top-N of the daily sorted set.

Store handles are injected so tests can substitute in-memory fakes.
"""

import asyncio
from collections.abc import Awaitable, Callable
from functools import wraps
import logging
from typing import Any, ParamSpec, TypeVar

from catalog_api.errors import NotFoundError, StoreError, ValidationError
from catalog_api.schemas import ContentDetails, ReviewCreate, TrendingEntry
from catalog_api.stores.catalog import CatalogRepository
from catalog_api.stores.mongo import ReviewStore
from catalog_api.stores.redis import (
    KEY_TRENDING_DAILY,
    TTL_CONTENT_METADATA,
    CacheStore,
    metadata_key,
    views_key,
)

logger = logging.getLogger("uvicorn.error")

P = ParamSpec("P")
R = TypeVar("R")


def store_boundary(action: str) -> Callable[[Callable[P, Awaitable[R]]], Callable[P, Awaitable[R]]]:
    """Map unexpected failures of an operation to StoreError.

    NotFoundError and ValidationError pass through untouched; anything else
    is logged with `action` as context.
    """

    def decorator(func: Callable[P, Awaitable[R]]) -> Callable[P, Awaitable[R]]:
        @wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            try:
                return await func(*args, **kwargs)
            except (NotFoundError, ValidationError):
                raise
            except StoreError:
                logger.exception(f"Error {action}")
                raise
            except Exception as e:
                logger.exception(f"Error {action}: {e}")
                raise StoreError(str(e)) from e

        return wrapper

    return decorator


class ContentService:
    """Aggregation layer over the relational, document and cache stores."""

    def __init__(
        self,
        catalog: CatalogRepository,
        reviews: ReviewStore,
        cache: CacheStore,
        *,
        metadata_ttl: int = TTL_CONTENT_METADATA,
        trending_limit: int = 10,
        watch_history_limit: int = 10,
    ) -> None:
        self._catalog = catalog
        self._reviews = reviews
        self._cache = cache
        self._metadata_ttl = metadata_ttl
        self._trending_limit = trending_limit
        self._watch_history_limit = watch_history_limit
        # Strong references so scheduled increments are not garbage collected
        self._pending: set[asyncio.Task[int | None]] = set()

    # ============================================================
    # Listings
    # ============================================================

    @store_boundary("fetching all content IDs")
    async def list_content_ids(self) -> list[str]:
        ids = await self._catalog.list_content_ids()
        logger.debug(f"Fetched {len(ids)} content IDs")
        return ids

    @store_boundary("fetching all user IDs")
    async def list_user_ids(self) -> list[str]:
        ids = await self._catalog.list_user_ids()
        logger.debug(f"Fetched {len(ids)} user IDs")
        return ids

    # ============================================================
    # Metadata (cache-aside)
    # ============================================================

    @store_boundary("fetching content metadata")
    async def get_metadata(self, content_id: str) -> dict[str, Any]:
        """Get content metadata, serving from Redis while the entry is live.

        Raises:
            NotFoundError: If PostgreSQL has no row for the id.
        """
        key = metadata_key(content_id)

        cached = await self._cache.get_json(key)
        if cached is not None:
            logger.debug(f"Metadata cache hit for {content_id}")
            return cached

        logger.debug(f"Metadata cache miss for {content_id}, querying PostgreSQL")
        metadata = await self._catalog.get_content_metadata(content_id)
        if metadata is None:
            raise NotFoundError("Content not found", detail={"content_id": content_id})

        await self._cache.set_json(key, metadata, self._metadata_ttl)
        logger.debug(f"Metadata for {content_id} cached for {self._metadata_ttl}s")
        return metadata

    @store_boundary("fetching cast for content")
    async def get_cast(self, content_id: str) -> list[dict[str, Any]]:
        return await self._catalog.get_cast(content_id)

    # ============================================================
    # Reviews
    # ============================================================

    @store_boundary("fetching reviews for content")
    async def get_reviews(self, content_id: str) -> list[dict[str, Any]]:
        return await self._reviews.find_by_content(content_id)

    @store_boundary("adding review")
    async def add_review(self, content_id: str, body: ReviewCreate) -> str:
        """Create a review document.

        Only presence is checked here; the document schema rejects ratings
        outside 1-10, which surfaces as StoreError.

        Returns:
            The new review id.
        """
        if not body.user_id or not body.rating:
            raise ValidationError(
                "User ID and rating are required.",
                detail={"content_id": content_id},
            )

        review_id = await self._reviews.insert_review(
            {
                "content_id": content_id,
                "user_id": body.user_id,
                "rating": body.rating,
                "comment": body.comment,
            }
        )
        logger.info(f"Review {review_id} added for content {content_id}")
        return review_id

    # ============================================================
    # View counters
    # ============================================================

    async def increment_views(self, content_id: str) -> int | None:
        """Increment the real-time view counter.

        Best effort: failures are logged and None is returned.
        """
        try:
            views = await self._cache.incr(views_key(content_id))
        except Exception as e:
            logger.error(f"Error incrementing views for {content_id}: {e}")
            return None
        logger.info(f"Content {content_id} now has {views} views.")
        return views

    def schedule_view_increment(self, content_id: str) -> "asyncio.Task[int | None]":
        """Start an increment without waiting for it.

        Must be called from within the running event loop. The returned task
        resolves to the new count (or None on failure).
        """
        task = asyncio.create_task(self.increment_views(content_id))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def drain(self) -> None:
        """Wait for all scheduled increments to finish."""
        if self._pending:
            await asyncio.gather(*self._pending)

    # ============================================================
    # Trending
    # ============================================================

    @store_boundary("fetching trending data")
    async def get_trending(self) -> list[TrendingEntry]:
        """Top entries of the daily trending set, highest score first."""
        pairs = await self._cache.top_scores(KEY_TRENDING_DAILY, self._trending_limit)
        return [TrendingEntry(content_id=member, views=int(score)) for member, score in pairs]

    # ============================================================
    # Cross-store aggregation
    # ============================================================

    @store_boundary("fetching detailed content info")
    async def get_details(self, content_id: str) -> ContentDetails:
        """Merge metadata, reviews and live views for one content id.

        All three reads run concurrently; any failure aborts the whole
        request. Metadata is the existence signal, so reviews or views
        without a metadata row still yield NotFoundError.
        """
        metadata, reviews, views = await asyncio.gather(
            self._catalog.get_content_metadata(content_id),
            self._reviews.find_by_content(content_id),
            self._cache.get_int(views_key(content_id)),
        )

        if metadata is None:
            raise NotFoundError("Content not found", detail={"content_id": content_id})

        return ContentDetails(
            metadata=metadata,
            reviews=reviews,
            real_time_views=views or 0,
        )

    # ============================================================
    # Watch history
    # ============================================================

    @store_boundary("fetching user watch history")
    async def get_watch_history(self, user_id: str) -> list[dict[str, Any]]:
        return await self._catalog.get_watch_history(user_id, limit=self._watch_history_limit)
