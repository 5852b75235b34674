"""Data models.

SQLAlchemy ORM models (relational store):
- content_metadata: Titles with type, release date, summary, rating
- cast_crew / content_cast_crew: People and their roles on content
- users / user_watch_history: Analytics tables (foreign tables on the main DB)

Pydantic document models (document store):
- Review / Reply: `reviews` collection schema
"""

from catalog_api.models.content import CastCrew, ContentCastCrew, ContentMetadata, ContentType
from catalog_api.models.review import Reply, Review
from catalog_api.models.user import User, UserWatchHistory

__all__ = [
    "CastCrew",
    "ContentCastCrew",
    "ContentMetadata",
    "ContentType",
    "Reply",
    "Review",
    "User",
    "UserWatchHistory",
]
