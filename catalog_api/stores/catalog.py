"""Catalog repository: parameterized queries against the relational store.

Rows are returned as JSON-safe dicts so callers can cache or respond with
them directly. Statement builders are module-level so their SQL can be
inspected without a live database.
"""

from typing import Any

from sqlalchemy import Select, select

from catalog_api.models import CastCrew, ContentCastCrew, ContentMetadata, User, UserWatchHistory
from catalog_api.stores.postgres import PostgresStore


def content_metadata_query(content_id: str) -> Select:
    return select(ContentMetadata).where(ContentMetadata.content_id == content_id)


def cast_query(content_id: str) -> Select:
    return (
        select(
            ContentCastCrew.character_name,
            ContentCastCrew.person_id,
            CastCrew.name.label("person_name"),
            CastCrew.role,
        )
        .join(CastCrew, ContentCastCrew.person_id == CastCrew.person_id)
        .where(ContentCastCrew.content_id == content_id)
    )


def watch_history_query(user_id: str, limit: int = 10) -> Select:
    """Most recent watch sessions of a user, joined with username and title."""
    return (
        select(
            User.username,
            ContentMetadata.title,
            UserWatchHistory.watched_at,
            UserWatchHistory.duration_watched_seconds,
        )
        .select_from(UserWatchHistory)
        .join(User, UserWatchHistory.user_id == User.user_id)
        .join(ContentMetadata, UserWatchHistory.content_id == ContentMetadata.content_id)
        .where(User.user_id == user_id)
        .order_by(UserWatchHistory.watched_at.desc())
        .limit(limit)
    )


def serialize_metadata(row: ContentMetadata) -> dict[str, Any]:
    """Convert a metadata row to a JSON-safe dict."""
    return {
        "content_id": row.content_id,
        "title": row.title,
        "original_title": row.original_title,
        "release_date": row.release_date.isoformat() if row.release_date else None,
        "content_type": row.content_type.value if row.content_type else None,
        "summary": row.summary,
        "rating": float(row.rating) if row.rating is not None else None,
    }


class CatalogRepository:
    """Read access to content metadata, cast, users and watch history."""

    def __init__(self, store: PostgresStore) -> None:
        self._store = store

    async def get_content_metadata(self, content_id: str) -> dict[str, Any] | None:
        async with self._store.session() as session:
            result = await session.execute(content_metadata_query(content_id))
            row = result.scalar_one_or_none()
            return serialize_metadata(row) if row else None

    async def list_content_ids(self) -> list[str]:
        async with self._store.session() as session:
            result = await session.execute(select(ContentMetadata.content_id))
            return list(result.scalars().all())

    async def list_user_ids(self) -> list[str]:
        async with self._store.session() as session:
            result = await session.execute(select(User.user_id))
            return list(result.scalars().all())

    async def get_cast(self, content_id: str) -> list[dict[str, Any]]:
        async with self._store.session() as session:
            result = await session.execute(cast_query(content_id))
            return [dict(row) for row in result.mappings().all()]

    async def get_watch_history(self, user_id: str, limit: int = 10) -> list[dict[str, Any]]:
        async with self._store.session() as session:
            result = await session.execute(watch_history_query(user_id, limit))
            rows = []
            for row in result.mappings().all():
                entry = dict(row)
                if entry["watched_at"] is not None:
                    entry["watched_at"] = entry["watched_at"].isoformat()
                rows.append(entry)
            return rows
