"""FastAPI application entry point.

Snackify API - rate snacks from around the world.
"""

from contextlib import asynccontextmanager
from collections.abc import AsyncGenerator
import logging

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from snackify.dependencies import close_stores, init_stores
from snackify.routes import api_router
from snackify.schemas import ErrorDetail, ErrorResponse
from snackify.services.rating import InvalidRatingError
from snackify.settings import get_settings
from snackify.stores.comments import InvalidCommentError
from snackify.stores.kv import StoreUnavailableError

logger = logging.getLogger("uvicorn.error")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Handles startup and shutdown events.
    """
    # Startup; a failing medium is retried lazily on first request
    try:
        init_stores()
    except StoreUnavailableError:
        logger.exception("Storage init failed")

    yield

    # Shutdown
    close_stores()


def _error(status_code: int, code: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=ErrorDetail(code=code, message=message)).model_dump(),
    )


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Snack ratings, comments and leaderboard API",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Routes raise HTTPException(detail={"error": ...}); send that body as is
    @app.exception_handler(StarletteHTTPException)
    async def structured_http_exception_handler(request: Request, exc: StarletteHTTPException) -> Response:
        if isinstance(exc.detail, dict) and "error" in exc.detail:
            return JSONResponse(status_code=exc.status_code, content=exc.detail, headers=exc.headers)
        return await http_exception_handler(request, exc)

    @app.exception_handler(StoreUnavailableError)
    async def store_unavailable_handler(request: Request, exc: StoreUnavailableError) -> JSONResponse:
        logger.error(f"Storage unavailable on {request.url.path}: {exc}")
        return _error(503, "STORE_UNAVAILABLE", "Rating storage is unavailable, try again later")

    @app.exception_handler(InvalidRatingError)
    async def invalid_rating_handler(request: Request, exc: InvalidRatingError) -> JSONResponse:
        return _error(422, "INVALID_RATING", str(exc))

    @app.exception_handler(InvalidCommentError)
    async def invalid_comment_handler(request: Request, exc: InvalidCommentError) -> JSONResponse:
        return _error(422, "INVALID_COMMENT", str(exc))

    # Exception handler for structured error format
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Global exception handler returning structured error format."""
        logger.exception(f"Unhandled error on {request.url.path}")
        return _error(500, "INTERNAL_ERROR", str(exc) if settings.debug else "Internal server error")

    # Health check endpoint
    @app.get("/health", tags=["health"])
    async def health_check() -> dict[str, bool]:
        """Health check endpoint."""
        return {"ok": True}

    # Include API routes
    app.include_router(api_router)

    return app


# Application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "snackify.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
