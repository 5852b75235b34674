"""FastAPI application entry point.

Streaming Catalog API - content metadata, reviews, watch history and
real-time view counters over PostgreSQL, MongoDB and Redis.
"""

from contextlib import asynccontextmanager
from collections.abc import AsyncGenerator, Awaitable, Callable
import logging
import time

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from catalog_api.errors import CatalogError
from catalog_api.routes import api_router
from catalog_api.schemas import ErrorResponse
from catalog_api.services.bootstrap import Stores, connect_with_retry
from catalog_api.services.content import ContentService
from catalog_api.settings import Settings, get_settings
from catalog_api.stores.catalog import CatalogRepository

logger = logging.getLogger("uvicorn.error")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Connects all stores (bounded retries) before serving. A BootstrapError
    propagates out of startup and stops the process.
    """
    # Startup
    settings: Settings = app.state.settings
    stores = Stores.from_settings(settings)

    try:
        await connect_with_retry(
            stores,
            max_retries=settings.bootstrap_max_retries,
            retry_delay=settings.bootstrap_retry_delay,
        )
        await stores.reviews.ensure_indexes()
    except Exception:
        await stores.close()
        raise

    service = ContentService(
        CatalogRepository(stores.postgres),
        stores.reviews,
        stores.cache,
        metadata_ttl=settings.metadata_cache_ttl,
        trending_limit=settings.trending_limit,
        watch_history_limit=settings.watch_history_limit,
    )
    app.state.stores = stores
    app.state.content_service = service

    yield

    # Shutdown
    await service.drain()
    await stores.close()


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure FastAPI application."""
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Streaming content metadata, reviews and real-time views API",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )
    app.state.settings = settings

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials="*" not in settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
        """Log method, path, status and latency for every request."""
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(f"{request.method} {request.url.path} -> {response.status_code} ({elapsed_ms:.1f}ms)")
        return response

    @app.exception_handler(CatalogError)
    async def catalog_exception_handler(request: Request, exc: CatalogError) -> JSONResponse:
        """Map the error taxonomy onto 4xx/5xx with the structured error format."""
        body = ErrorResponse.from_error(exc, expose_details=settings.expose_error_details)
        return JSONResponse(status_code=exc.status_code, content=body.model_dump())

    # Exception handler for structured error format
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Global exception handler returning structured error format."""
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(
            status_code=500,
            content={
                "error": {
                    "code": "INTERNAL_ERROR",
                    "message": "Internal Server Error",
                    "detail": {"reason": str(exc)} if settings.expose_error_details else None,
                }
            },
        )

    @app.get("/", response_class=PlainTextResponse, tags=["health"])
    async def root() -> str:
        """Service banner."""
        return "Streaming Metadata Service API is running! Go to /docs for documentation."

    # Health check endpoint
    @app.get("/health", tags=["health"])
    async def health_check() -> dict[str, bool]:
        """Health check endpoint."""
        return {"ok": True}

    # Include API routes
    app.include_router(api_router, prefix=settings.api_prefix)

    return app


# Application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "catalog_api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
