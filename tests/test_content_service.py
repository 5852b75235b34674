"""Tests for the content aggregation service."""

import asyncio
import json

import pytest

from catalog_api.errors import NotFoundError, StoreError, ValidationError
from catalog_api.models import Review
from catalog_api.schemas import ReviewCreate
from catalog_api.services.content import ContentService
from catalog_api.stores.redis import KEY_TRENDING_DAILY, TTL_CONTENT_METADATA, metadata_key, views_key
from tests.fakes import FakeCache, FakeCatalog, FakeReviewStore


class SlowCatalog(FakeCatalog):
    """Records when the metadata read starts and ends."""

    def __init__(self, log: list[str], **kwargs) -> None:
        super().__init__(**kwargs)
        self.log = log

    async def get_content_metadata(self, content_id: str):
        self.log.append("metadata-start")
        await asyncio.sleep(0.01)
        self.log.append("metadata-end")
        return await super().get_content_metadata(content_id)


class SlowReviewStore(FakeReviewStore):
    def __init__(self, log: list[str]) -> None:
        super().__init__()
        self.log = log

    async def find_by_content(self, content_id: str):
        self.log.append("reviews-start")
        await asyncio.sleep(0.01)
        self.log.append("reviews-end")
        return await super().find_by_content(content_id)


# ============================================================
# Cache-aside metadata
# ============================================================


@pytest.mark.asyncio
async def test_metadata_miss_fills_cache_then_hit_skips_postgres(
    service: ContentService, catalog: FakeCatalog, cache: FakeCache, sample_metadata: dict
):
    first = await service.get_metadata("c1")
    assert first == sample_metadata
    assert catalog.calls["get_content_metadata"] == 1
    assert json.loads(cache.values[metadata_key("c1")]) == sample_metadata
    assert cache.ttls[metadata_key("c1")] == TTL_CONTENT_METADATA

    second = await service.get_metadata("c1")
    assert json.dumps(second) == json.dumps(first)
    assert catalog.calls["get_content_metadata"] == 1


@pytest.mark.asyncio
async def test_metadata_cache_hit_is_not_revalidated(service: ContentService, catalog: FakeCatalog, cache: FakeCache):
    stale = {"content_id": "c1", "title": "Old Title"}
    cache.values[metadata_key("c1")] = json.dumps(stale)

    assert await service.get_metadata("c1") == stale
    assert catalog.calls["get_content_metadata"] == 0


@pytest.mark.asyncio
async def test_metadata_not_found_before_and_after_fill_attempt(
    service: ContentService, catalog: FakeCatalog, cache: FakeCache
):
    with pytest.raises(NotFoundError):
        await service.get_metadata("missing")
    assert metadata_key("missing") not in cache.values

    with pytest.raises(NotFoundError):
        await service.get_metadata("missing")
    assert catalog.calls["get_content_metadata"] == 2


@pytest.mark.asyncio
async def test_metadata_uses_configured_ttl(catalog: FakeCatalog, reviews: FakeReviewStore, cache: FakeCache):
    service = ContentService(catalog, reviews, cache, metadata_ttl=120)
    await service.get_metadata("c1")
    assert cache.ttls[metadata_key("c1")] == 120


@pytest.mark.asyncio
async def test_concurrent_misses_each_fill_the_cache(service: ContentService, catalog: FakeCatalog, cache: FakeCache):
    results = await asyncio.gather(*(service.get_metadata("c1") for _ in range(3)))
    assert all(r == results[0] for r in results)
    # No single-flight: every concurrent miss reaches PostgreSQL and writes the cache
    assert catalog.calls["get_content_metadata"] == 3
    assert cache.calls["set"] == 3


@pytest.mark.asyncio
async def test_store_failure_is_mapped_to_store_error(service: ContentService, catalog: FakeCatalog):
    catalog.fail_with = ConnectionError("connection refused")
    with pytest.raises(StoreError) as exc_info:
        await service.get_metadata("c1")
    assert exc_info.value.message == "connection refused"
    assert isinstance(exc_info.value.__cause__, ConnectionError)


# ============================================================
# View counters
# ============================================================


@pytest.mark.asyncio
async def test_sequential_increments(service: ContentService, cache: FakeCache):
    assert await service.increment_views("abc") == 1
    assert await service.increment_views("abc") == 2
    assert await service.increment_views("abc") == 3
    assert cache.values[views_key("abc")] == "3"


@pytest.mark.asyncio
async def test_concurrent_increments_sum(service: ContentService, cache: FakeCache):
    results = await asyncio.gather(*(service.increment_views("abc") for _ in range(25)))
    assert sorted(results) == list(range(1, 26))
    assert cache.values[views_key("abc")] == "25"


@pytest.mark.asyncio
async def test_increment_failure_is_swallowed(service: ContentService, cache: FakeCache):
    cache.fail_incr = True
    assert await service.increment_views("abc") is None


@pytest.mark.asyncio
async def test_scheduled_increment_exposes_result(service: ContentService, cache: FakeCache):
    task = service.schedule_view_increment("abc")
    assert await task == 1

    tasks = [service.schedule_view_increment("abc") for _ in range(4)]
    await service.drain()
    assert all(t.done() for t in tasks)
    assert cache.values[views_key("abc")] == "5"


@pytest.mark.asyncio
async def test_scheduled_increment_failure_resolves_to_none(service: ContentService, cache: FakeCache):
    cache.fail_incr = True
    task = service.schedule_view_increment("abc")
    await service.drain()
    assert task.result() is None


# ============================================================
# Trending
# ============================================================


@pytest.mark.asyncio
async def test_trending_orders_by_descending_score(service: ContentService, cache: FakeCache):
    cache.sorted_sets[KEY_TRENDING_DAILY] = {"a": 5, "b": 9, "c": 1}
    trending = await service.get_trending()
    assert [t.content_id for t in trending] == ["b", "a", "c"]
    assert [t.views for t in trending] == [9, 5, 1]


@pytest.mark.asyncio
async def test_trending_returns_at_most_ten(service: ContentService, cache: FakeCache):
    cache.sorted_sets[KEY_TRENDING_DAILY] = {f"c{i}": float(i) for i in range(15)}
    trending = await service.get_trending()
    assert len(trending) == 10
    assert trending[0].content_id == "c14"


@pytest.mark.asyncio
async def test_trending_empty(service: ContentService):
    assert await service.get_trending() == []


# ============================================================
# Reviews
# ============================================================


@pytest.mark.asyncio
async def test_add_review_then_read_back(service: ContentService, reviews: FakeReviewStore):
    review_id = await service.add_review("c1", ReviewCreate(user_id="u1", rating=7))
    stored = await service.get_reviews("c1")
    assert len(stored) == 1
    assert stored[0]["_id"] == review_id
    assert stored[0]["user_id"] == "u1"
    assert stored[0]["rating"] == 7
    assert stored[0]["is_spoiler"] is False
    assert stored[0]["likes_count"] == 0
    assert stored[0]["replies"] == []


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "body",
    [
        ReviewCreate(user_id="u1"),
        ReviewCreate(rating=7),
        ReviewCreate(user_id="", rating=7),
    ],
)
async def test_add_review_requires_user_and_rating(
    service: ContentService, reviews: FakeReviewStore, body: ReviewCreate
):
    with pytest.raises(ValidationError):
        await service.add_review("c1", body)
    assert reviews.calls["insert_review"] == 0


@pytest.mark.asyncio
async def test_out_of_range_rating_rejected_by_document_schema(service: ContentService, reviews: FakeReviewStore):
    with pytest.raises(StoreError):
        await service.add_review("c1", ReviewCreate(user_id="u1", rating=11))
    assert reviews.calls["insert_review"] == 1
    assert reviews.documents == []


@pytest.mark.asyncio
async def test_stored_review_without_rating_is_readable(service: ContentService, reviews: FakeReviewStore):
    reviews.documents.append(Review(id="r1", content_id="c1", user_id="u1", comment="No score"))

    stored = await service.get_reviews("c1")
    assert stored[0]["rating"] is None

    details = await service.get_details("c1")
    assert details.reviews[0].rating is None


@pytest.mark.asyncio
async def test_add_review_does_not_touch_cache(service: ContentService, cache: FakeCache):
    await service.add_review("c1", ReviewCreate(user_id="u1", rating=7, comment="Great"))
    assert cache.calls["set"] == 0
    assert cache.calls["incr"] == 0


# ============================================================
# Detail aggregation
# ============================================================


@pytest.mark.asyncio
async def test_details_merges_all_three_stores(
    service: ContentService, cache: FakeCache, sample_metadata: dict
):
    await service.add_review("c1", ReviewCreate(user_id="u1", rating=9))
    cache.values[views_key("c1")] = "42"

    details = await service.get_details("c1")
    assert details.metadata == sample_metadata
    assert len(details.reviews) == 1
    assert details.real_time_views == 42


@pytest.mark.asyncio
async def test_details_missing_views_default_to_zero(service: ContentService):
    details = await service.get_details("c1")
    assert details.real_time_views == 0
    assert details.reviews == []


@pytest.mark.asyncio
async def test_details_not_found_even_with_reviews(service: ContentService, cache: FakeCache):
    await service.add_review("orphan", ReviewCreate(user_id="u1", rating=5))
    cache.values[views_key("orphan")] = "3"
    with pytest.raises(NotFoundError):
        await service.get_details("orphan")


@pytest.mark.asyncio
async def test_details_bypasses_metadata_cache(service: ContentService, catalog: FakeCatalog, cache: FakeCache):
    await service.get_details("c1")
    await service.get_details("c1")
    assert catalog.calls["get_content_metadata"] == 2
    assert metadata_key("c1") not in cache.values


@pytest.mark.asyncio
async def test_details_reads_overlap(cache: FakeCache, sample_metadata: dict):
    log: list[str] = []
    service = ContentService(SlowCatalog(log, metadata={"c1": sample_metadata}), SlowReviewStore(log), cache)

    details = await service.get_details("c1")

    assert details.metadata == sample_metadata
    # Both reads are in flight before either finishes
    assert log.index("reviews-start") < log.index("metadata-end")
    assert log.index("metadata-start") < log.index("reviews-end")


@pytest.mark.asyncio
async def test_details_any_store_failure_aborts(service: ContentService, catalog: FakeCatalog):
    catalog.fail_with = TimeoutError("statement timeout")
    with pytest.raises(StoreError):
        await service.get_details("c1")


# ============================================================
# Listings and history
# ============================================================


@pytest.mark.asyncio
async def test_listings(service: ContentService):
    assert await service.list_content_ids() == ["c1"]
    assert await service.list_user_ids() == ["u1", "u2"]


@pytest.mark.asyncio
async def test_watch_history_uses_limit(reviews: FakeReviewStore, cache: FakeCache):
    rows = [{"username": "ayu", "title": f"T{i}", "watched_at": None, "duration_watched_seconds": i} for i in range(12)]
    catalog = FakeCatalog(history={"u1": rows})
    service = ContentService(catalog, reviews, cache)

    history = await service.get_watch_history("u1")
    assert len(history) == 10
    assert catalog.last_history_limit == 10
