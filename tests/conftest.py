"""Shared test fixtures."""

import pytest
from httpx import ASGITransport, AsyncClient

from catalog_api.main import app
from catalog_api.routes.content import get_content_service
from catalog_api.services.content import ContentService
from tests.fakes import FakeCache, FakeCatalog, FakeReviewStore

API = "/api/v1/content"


@pytest.fixture
def sample_metadata() -> dict:
    return {
        "content_id": "c1",
        "title": "The Silent Harbor",
        "original_title": "Pelabuhan Sunyi",
        "release_date": "2019-04-12",
        "content_type": "movie",
        "summary": "A reluctant hero is pulled back into a world they swore to leave behind.",
        "rating": 8.0,
    }


@pytest.fixture
def catalog(sample_metadata: dict) -> FakeCatalog:
    return FakeCatalog(metadata={"c1": sample_metadata}, users=["u1", "u2"])


@pytest.fixture
def reviews() -> FakeReviewStore:
    return FakeReviewStore()


@pytest.fixture
def cache() -> FakeCache:
    return FakeCache()


@pytest.fixture
def service(catalog: FakeCatalog, reviews: FakeReviewStore, cache: FakeCache) -> ContentService:
    return ContentService(catalog, reviews, cache)


@pytest.fixture
async def client(service: ContentService):
    """Test client with the content service replaced by one built on fakes."""
    app.dependency_overrides[get_content_service] = lambda: service
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
    app.dependency_overrides.clear()
