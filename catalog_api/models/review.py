"""Review document schema (MongoDB `reviews` collection).

This is the storage-side schema: the document store validates every
document against it before insert, so bounds such as the 1-10 rating are
enforced here rather than in the aggregation layer.
"""

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Reply(BaseModel):
    """A reply in a review thread."""

    user_id: str = Field(min_length=1)
    comment: str = Field(min_length=1)
    created_at: datetime = Field(default_factory=_utcnow)


class Review(BaseModel):
    """A user review of a piece of content."""

    model_config = ConfigDict(populate_by_name=True)

    id: str | None = Field(default=None, alias="_id")
    content_id: str = Field(min_length=1)
    user_id: str = Field(min_length=1)
    rating: float | None = Field(default=None, ge=1, le=10)
    comment: str | None = None
    created_at: datetime = Field(default_factory=_utcnow)
    is_spoiler: bool = False
    likes_count: int = Field(default=0, ge=0)
    replies: list[Reply] = Field(default_factory=list)

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_object_id(cls, v: Any) -> str | None:
        return None if v is None else str(v)

    def to_document(self) -> dict[str, Any]:
        """Dump for insertion (Mongo assigns `_id`)."""
        return self.model_dump(exclude={"id"})

    def to_response(self) -> dict[str, Any]:
        """Dump in JSON mode with `_id` exposed as a string."""
        return self.model_dump(mode="json", by_alias=True)
