"""
Shared application dependencies.
Builds the engine and scheduler once per process and hands them to routes.
"""

from typing import Optional

from fastapi import Depends, Header, HTTPException, status

from feedrank.config import Settings, get_settings
from feedrank.services.content_store import JsonContentProvider
from feedrank.services.recommendations.engine import ContentRecommendationEngine
from feedrank.services.scheduler import RecomputeScheduler
from feedrank.utils.logger import get_logger

logger = get_logger(__name__)

# Global Instances
_engine: Optional[ContentRecommendationEngine] = None
_scheduler: Optional[RecomputeScheduler] = None


def get_engine(settings: Settings = Depends(get_settings)) -> ContentRecommendationEngine:
    """Get the recommendation engine, backed by the JSON content seed."""
    global _engine
    if _engine is not None:
        return _engine

    provider = JsonContentProvider(settings.content_seed_path)
    _engine = ContentRecommendationEngine(content_provider=provider, settings=settings)
    logger.info(f"Recommendation engine initialized (seed: {settings.content_seed_path})")
    return _engine


def get_scheduler(
    engine: ContentRecommendationEngine = Depends(get_engine),
    settings: Settings = Depends(get_settings),
) -> RecomputeScheduler:
    """Get the recompute scheduler bound to the engine."""
    global _scheduler
    if _scheduler is None:
        _scheduler = RecomputeScheduler(engine, debounce_seconds=settings.recompute_debounce_seconds)
    return _scheduler


def set_engine(engine: Optional[ContentRecommendationEngine]) -> None:
    """Install a pre-built engine (or clear it). Resets the scheduler."""
    global _engine, _scheduler
    _engine = engine
    _scheduler = None


def require_admin_key(
    x_admin_key: str = Header(..., alias="X-Admin-Key"),
    settings: Settings = Depends(get_settings),
) -> None:
    """Check the admin key header against ADMIN_API_KEY."""
    if not settings.admin_api_key:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Admin API key not configured",
        )

    if x_admin_key != settings.admin_api_key:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid admin key",
        )
