"""Content endpoints.

GET  /ids                            - All content IDs
GET  /users/ids                      - All user IDs
GET  /trending/daily                 - Top-10 trending content
GET  /{id}                           - Metadata (Redis cache-aside)
GET  /{id}/reviews                   - Reviews from MongoDB
GET  /{id}/details                   - Metadata + reviews + live views
GET  /{id}/cast                      - Cast and crew
POST /{id}/views/increment           - Fire-and-forget view count
POST /{id}/reviews                   - Create review
GET  /users/{user_id}/watch-history  - Latest watch history

Routers are thin: call services for business logic. Static paths are
declared before the `/{id}` patterns so they are matched first.
"""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, Path, Request
from fastapi.responses import PlainTextResponse

from catalog_api.models import Review
from catalog_api.schemas import (
    CastMember,
    ContentDetails,
    ContentMetadataOut,
    ErrorResponse,
    ReviewCreate,
    ReviewCreated,
    TrendingEntry,
    WatchHistoryEntry,
)
from catalog_api.services.content import ContentService

router = APIRouter()

NOT_FOUND = {404: {"model": ErrorResponse, "description": "Content not found"}}
SERVER_ERROR = {500: {"model": ErrorResponse, "description": "Store failure"}}

ContentId = Annotated[str, Path(description="Content ID", min_length=1)]


def get_content_service(request: Request) -> ContentService:
    """Return the service built at startup."""
    return request.app.state.content_service


Service = Annotated[ContentService, Depends(get_content_service)]


@router.get("/ids", response_model=list[str], responses=SERVER_ERROR)
async def get_all_content_ids(service: Service) -> list[str]:
    """Get every content ID in the catalog."""
    return await service.list_content_ids()


@router.get("/users/ids", response_model=list[str], responses=SERVER_ERROR)
async def get_all_user_ids(service: Service) -> list[str]:
    """Get every user ID."""
    return await service.list_user_ids()


@router.get("/trending/daily", response_model=list[TrendingEntry], responses=SERVER_ERROR)
async def get_trending_content(service: Service) -> list[TrendingEntry]:
    """Get the daily trending leaderboard (highest views first, max 10)."""
    return await service.get_trending()


@router.get(
    "/users/{user_id}/watch-history",
    response_model=list[WatchHistoryEntry],
    responses=SERVER_ERROR,
)
async def get_user_watch_history(
    service: Service,
    user_id: str = Path(description="User ID", min_length=1),
) -> list[dict[str, Any]]:
    """Get the user's 10 most recent watch sessions with content titles."""
    return await service.get_watch_history(user_id)


@router.get(
    "/{content_id}",
    response_model=ContentMetadataOut,
    responses={**NOT_FOUND, **SERVER_ERROR},
)
async def get_content_metadata(content_id: ContentId, service: Service) -> dict[str, Any]:
    """Get content metadata.

    Served from Redis when cached (1 hour TTL), otherwise from PostgreSQL.
    """
    return await service.get_metadata(content_id)


@router.get("/{content_id}/reviews", response_model=list[Review], responses=SERVER_ERROR)
async def get_reviews_for_content(content_id: ContentId, service: Service) -> list[dict[str, Any]]:
    """Get all reviews for the content."""
    return await service.get_reviews(content_id)


@router.get(
    "/{content_id}/details",
    response_model=ContentDetails,
    responses={**NOT_FOUND, **SERVER_ERROR},
)
async def get_content_details(content_id: ContentId, service: Service) -> ContentDetails:
    """Get metadata, reviews and real-time views in one response."""
    return await service.get_details(content_id)


@router.get("/{content_id}/cast", response_model=list[CastMember], responses=SERVER_ERROR)
async def get_cast_for_content(content_id: ContentId, service: Service) -> list[dict[str, Any]]:
    """Get the cast and crew of the content."""
    return await service.get_cast(content_id)


@router.post("/{content_id}/views/increment", response_class=PlainTextResponse)
async def increment_content_views(content_id: ContentId, service: Service) -> PlainTextResponse:
    """Count a view.

    Responds immediately; the counter is updated in the background and its
    outcome is not reported.
    """
    service.schedule_view_increment(content_id)
    return PlainTextResponse("View count incremented", status_code=200)


@router.post(
    "/{content_id}/reviews",
    status_code=201,
    response_model=ReviewCreated,
    responses={400: {"model": ErrorResponse, "description": "Missing user_id or rating"}, **SERVER_ERROR},
)
async def add_review(content_id: ContentId, service: Service, body: ReviewCreate | None = None) -> ReviewCreated:
    """Add a review for the content.

    A missing or null body is treated as empty and rejected with 400.
    """
    review_id = await service.add_review(content_id, body or ReviewCreate())
    return ReviewCreated(message="Review added successfully", review_id=review_id)
