"""FastAPI application factory.

Usage:
    # Development
    uv run fastapi dev src/recordboard/api/app.py

    # Production
    uv run fastapi run src/recordboard/api/app.py
"""

from contextlib import asynccontextmanager
from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from recordboard import __version__, bind_context, clear_context, configure_logging, get_logger
from recordboard.api.routes import (
    clubs_router,
    health_router,
    public_router,
    record_lists_router,
    records_router,
)
from recordboard.config import get_settings
from recordboard.errors import RecordBoardError

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - startup and shutdown."""
    settings = get_settings()
    configure_logging()
    logger.info(
        "app_starting",
        environment=settings.environment.value,
        supabase_url=settings.supabase_url,
    )
    yield
    logger.info("app_shutdown")


async def record_board_error_handler(request: Request, exc: RecordBoardError) -> JSONResponse:
    """Render domain errors as `{"detail": ...}` with their status code."""
    log = logger.error if exc.status_code >= 500 else logger.info
    log(
        "request_failed",
        path=request.url.path,
        status_code=exc.status_code,
        error=exc.detail,
        error_type=type(exc).__name__,
    )
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="Record Board API",
        description="Swim club record boards with history and CSV import",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs" if not settings.is_production else None,
        redoc_url="/redoc" if not settings.is_production else None,
    )

    # Boards are embedded on club websites; auth is bearer-only, no cookies
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(RecordBoardError, record_board_error_handler)

    @app.middleware("http")
    async def bind_request_context(request: Request, call_next):
        clear_context()
        bind_context(request_id=uuid4().hex[:8], method=request.method, path=request.url.path)
        return await call_next(request)

    # Register routes
    app.include_router(health_router)
    app.include_router(public_router, prefix="/api/v1")
    app.include_router(clubs_router, prefix="/api/v1")
    app.include_router(record_lists_router, prefix="/api/v1")
    app.include_router(records_router, prefix="/api/v1")

    return app


# Application instance for uvicorn
app = create_app()
