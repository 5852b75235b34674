"""MongoDB store for review documents.

Every document is validated against the Review schema before insert, so
schema violations (e.g. a rating outside 1-10) are rejected here and never
reach the collection.
"""

from typing import Any

import pydantic
from pymongo import ASCENDING, AsyncMongoClient

from catalog_api.errors import StoreError
from catalog_api.models import Review

REVIEWS_COLLECTION = "reviews"


class ReviewStore:
    """Shared MongoDB client wrapper scoped to the reviews collection."""

    def __init__(self, client: AsyncMongoClient, database: str) -> None:
        self._client = client
        self._collection = client[database][REVIEWS_COLLECTION]

    @classmethod
    def from_url(cls, url: str, database: str) -> "ReviewStore":
        return cls(AsyncMongoClient(url, serverSelectionTimeoutMS=5000, tz_aware=True), database)

    async def ping(self) -> None:
        await self._client.admin.command("ping")

    async def ensure_indexes(self) -> None:
        await self._collection.create_index([("content_id", ASCENDING)])

    async def close(self) -> None:
        await self._client.close()

    async def clear(self) -> None:
        """Delete every review (seeding only)."""
        await self._collection.delete_many({})

    async def insert_review(self, data: dict[str, Any]) -> str:
        """Validate and insert a review document.

        Args:
            data: Review fields (content_id, user_id, rating, comment, ...).

        Returns:
            The new document id.

        Raises:
            StoreError: If the document violates the review schema.
        """
        try:
            review = Review.model_validate(data)
        except pydantic.ValidationError as e:
            raise StoreError(f"Review validation failed: {e}") from e

        result = await self._collection.insert_one(review.to_document())
        return str(result.inserted_id)

    async def insert_many(self, documents: list[dict[str, Any]]) -> int:
        reviews = [Review.model_validate(doc).to_document() for doc in documents]
        if not reviews:
            return 0
        result = await self._collection.insert_many(reviews)
        return len(result.inserted_ids)

    async def find_by_content(self, content_id: str) -> list[dict[str, Any]]:
        """All reviews for a content id, in insertion order."""
        cursor = self._collection.find({"content_id": content_id})
        return [Review.model_validate(doc).to_response() async for doc in cursor]
