"""FastAPI application entry point for FeedRank."""

import asyncio
import uvicorn
from contextlib import asynccontextmanager

from fastapi import FastAPI, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from feedrank.config import get_settings
from feedrank.dependencies import get_engine, get_scheduler
from feedrank.middleware.error_handler import ErrorHandlerMiddleware
from feedrank.utils.exceptions import CalculationFailedError
from feedrank.utils.logger import configure_logging, get_logger

logger = get_logger(__name__)

# Get settings
settings = get_settings()

# Configure logging
configure_logging(debug=settings.debug)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application startup and shutdown events."""
    logger.info(f"Starting {settings.app_name} API {settings.api_version}")

    engine = get_engine(settings)
    scheduler = get_scheduler(engine, settings)

    # Initial corpus load and recompute
    try:
        await engine.run_full_cycle()
    except CalculationFailedError as e:
        logger.warning(f"Initial recompute failed, will retry on next tick: {e.message}")

    background_tasks = [
        asyncio.create_task(scheduler.run_periodic(settings.recompute_interval_seconds)),
        asyncio.create_task(scheduler.poll_corpus(settings.content_poll_seconds)),
    ]
    logger.info(f"Running in {settings.environment} mode")

    yield

    # Shutdown event
    for task in background_tasks:
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
    await scheduler.shutdown()
    logger.info(f"Shutting down {settings.app_name} API")


# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    description="Content recommendation and trending engine for the community feed",
    version=settings.api_version,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

# ── Middleware (order matters: last-added = outermost = first to run) ──

# 1. Error handler added first → innermost layer
app.add_middleware(ErrorHandlerMiddleware)

# 2. CORS added last → outermost layer (processes OPTIONS preflight first)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routers
from feedrank.api.v1 import router as v1_router  # noqa: E402

app.include_router(v1_router)


@app.get(
    "/health",
    status_code=status.HTTP_200_OK,
    tags=["Health"],
    summary="Health check endpoint",
)
async def health_check() -> JSONResponse:
    """Health check endpoint for monitoring."""
    engine = get_engine(settings)
    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content={
            "success": True,
            "status": "healthy",
            "service": settings.app_name,
            "version": settings.api_version,
            "content_items": len(engine.snapshot),
            "snapshot_version": engine.snapshot.version,
            "interactions": len(engine.interaction_log),
        },
    )


if __name__ == "__main__":
    uvicorn.run(
        "feedrank.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
        log_level="debug" if settings.debug else "info",
    )
