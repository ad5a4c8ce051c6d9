"""
FastAPI application for Task Tracker.

Run:
    python -m task_tracker
    # or
    uvicorn task_tracker.main:app --reload --port 3010

API documentation:
    http://127.0.0.1:3010/docs       - Swagger UI
    http://127.0.0.1:3010/redoc      - ReDoc

Versioning:
    The API lives under /api/v1/...
    /tasks and /tags are also served at the root for the browser client.
"""

import time
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import UTC, datetime

import uvicorn
from fastapi import APIRouter, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from sqlalchemy import text

from .api import tags_router, tasks_router
from .api.errors import error_response, register_error_handlers
from .api.middleware import RequestLoggingMiddleware
from .api.schemas import ErrorDetail
from .core.config import settings
from .core.database import AsyncSessionLocal, init_db
from .core.logging import get_logger, setup_logging
from .services import seed_demo_data

setup_logging(
    log_level=settings.LOG_LEVEL,
    log_format=settings.LOG_FORMAT,
    sql_echo=settings.DATABASE_ECHO,
)

logger = get_logger(__name__)

# ============================================================================
# APPLICATION METADATA
# ============================================================================

APP_VERSION = "1.0.0"
APP_START_TIME: float = 0.0  # Will be set on startup

# ============================================================================
# RATE LIMITER SETUP
# ============================================================================

# Requests are grouped by client IP
limiter = Limiter(key_func=get_remote_address)


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Rate limit errors in the common ErrorResponse format."""
    return error_response(
        429,
        "RATE_LIMIT_EXCEEDED",
        f"Too many requests. Limit: {exc.detail}",
        [ErrorDetail(field="rate_limit", message=str(exc.detail))],
    )


# ============================================================================
# LIFESPAN EVENT HANDLER
# ============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup: create tables, optionally seed demo data.
    Shutdown: log uptime.
    """
    global APP_START_TIME

    APP_START_TIME = time.time()

    await init_db()

    if settings.SEED_DEMO_DATA:
        async with AsyncSessionLocal() as session:
            await seed_demo_data(session)
            await session.commit()

    logger.info(
        "Application started",
        extra={
            "app_name": settings.APP_NAME,
            "version": APP_VERSION,
            "debug": settings.DEBUG,
            "log_level": settings.LOG_LEVEL,
            "address": f"http://{settings.HOST}:{settings.PORT}",
        },
    )

    yield  # Application runs here

    uptime = int(time.time() - APP_START_TIME)
    logger.info("Application stopped", extra={"uptime_seconds": uptime})


# ============================================================================
# CREATE APPLICATION
# ============================================================================

app = FastAPI(
    lifespan=lifespan,
    title=settings.APP_NAME,
    description="""
    Personal task tracker.

    ## Features

    * **Search** - free text over title, description and location, plus an exact tag filter
    * **Tasks** - create, replace, toggle pending/completed, delete
    * **Tags** - created on demand by name, shared between tasks

    ## Layers

    ```
    API Layer (FastAPI) → Service Layer (Business Logic) → Repository Layer (Database)
    ```

    ## Data model

    ```
    Tasks ⟷ Tags (M:M through task_tags)
    ```
    """,
    version=APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)

app.state.limiter = limiter
# slowapi handler has a narrower signature than Starlette expects
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)  # type: ignore[arg-type]


# ============================================================================
# MIDDLEWARE
# ============================================================================

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Request logging observer at the HTTP boundary
if settings.REQUEST_LOGGING:
    app.add_middleware(RequestLoggingMiddleware)


# ============================================================================
# ROUTERS
# ============================================================================

api_v1_router = APIRouter(prefix="/api/v1")
api_v1_router.include_router(tasks_router)
api_v1_router.include_router(tags_router)

app.include_router(api_v1_router)

# Unversioned paths used by the browser client
app.include_router(tasks_router)
app.include_router(tags_router)

register_error_handlers(app)


# ============================================================================
# ROOT ENDPOINT
# ============================================================================


@app.get("/", tags=["root"], summary="Root endpoint", description="API information")
@limiter.limit("100/minute")
async def root(request: Request):
    return {
        "name": settings.APP_NAME,
        "version": APP_VERSION,
        "api_version": "v1",
        "docs": "/docs",
        "endpoints": {
            "tasks": "/api/v1/tasks",
            "tags": "/api/v1/tags",
        },
    }


# ============================================================================
# HEALTH CHECK
# ============================================================================


@app.get("/health", tags=["health"], summary="Health check", description="Database connectivity")
@limiter.limit("100/minute")
async def health_check(request: Request):
    """
    200 with status "ok" when the database answers, 503 with "error" otherwise.

    ```json
    {
        "status": "ok",
        "checks": {"database": "connected", "version": "1.0.0", "uptime_seconds": 3600},
        "timestamp": "2026-01-22T12:00:00Z"
    }
    ```
    """
    uptime_seconds = int(time.time() - APP_START_TIME) if APP_START_TIME > 0 else 0

    db_status = "disconnected"
    try:
        async with AsyncSessionLocal() as session:
            await session.execute(text("SELECT 1"))
            db_status = "connected"
    except Exception:
        logger.warning("Health check: database unreachable", exc_info=True)

    overall_status = "ok" if db_status == "connected" else "error"

    return JSONResponse(
        status_code=200 if overall_status == "ok" else 503,
        content={
            "status": overall_status,
            "checks": {
                "database": db_status,
                "version": APP_VERSION,
                "uptime_seconds": uptime_seconds,
            },
            "timestamp": datetime.now(UTC).isoformat(),
        },
    )


def run() -> None:
    """Serve the app on the configured address (HOST:PORT)."""
    uvicorn.run(
        "task_tracker.main:app",
        host=settings.HOST,
        port=settings.PORT,
        log_config=None,  # keep our logging setup
    )
