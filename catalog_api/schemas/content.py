"""Schemas for the content endpoints (/api/v1/content)."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from catalog_api.models import Review


class ContentMetadataOut(BaseModel):
    """Content metadata as served (and cached)."""

    content_id: str
    title: str
    original_title: str | None = None
    release_date: str | None = None
    content_type: str | None = None
    summary: str | None = None
    rating: float | None = None


class CastMember(BaseModel):
    character_name: str | None = None
    person_id: str
    person_name: str
    role: str | None = None


class WatchHistoryEntry(BaseModel):
    username: str
    title: str
    watched_at: str | None = None
    duration_watched_seconds: int | None = None


class TrendingEntry(BaseModel):
    """One entry of the daily trending leaderboard."""

    content_id: str
    views: int


class ContentDetails(BaseModel):
    """Composite of relational metadata, reviews and the live view counter."""

    metadata: dict[str, Any]
    reviews: list[Review] = Field(default_factory=list)
    real_time_views: int = 0


class ReviewCreate(BaseModel):
    """Request body for POST /{id}/reviews.

    Presence of user_id and rating is checked by the service; the rating
    range is enforced by the document schema. Numeric user ids are accepted
    and stored as strings.
    """

    model_config = ConfigDict(coerce_numbers_to_str=True)

    user_id: str | None = None
    rating: float | None = None
    comment: str | None = None


class ReviewCreated(BaseModel):
    message: str
    review_id: str
