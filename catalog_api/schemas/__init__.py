"""Pydantic schemas for API request/response validation."""

from catalog_api.schemas.common import ErrorDetail, ErrorResponse
from catalog_api.schemas.content import (
    CastMember,
    ContentDetails,
    ContentMetadataOut,
    ReviewCreate,
    ReviewCreated,
    TrendingEntry,
    WatchHistoryEntry,
)

__all__ = [
    "ErrorDetail",
    "ErrorResponse",
    "CastMember",
    "ContentDetails",
    "ContentMetadataOut",
    "ReviewCreate",
    "ReviewCreated",
    "TrendingEntry",
    "WatchHistoryEntry",
]
