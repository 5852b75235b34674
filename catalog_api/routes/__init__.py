"""API routes.

Mounted by the app factory under the configured API prefix
(default /api/v1/content).
"""

from fastapi import APIRouter

from catalog_api.routes import content

api_router = APIRouter()

# Content catalog endpoints (metadata, reviews, views, trending, history)
api_router.include_router(content.router, tags=["content"])
