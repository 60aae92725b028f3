"""Main v1 API router that aggregates all sub-routers."""

from fastapi import APIRouter

from .interactions import router as interactions_router
from .recommendations import router as recommendations_router
from .trending import router as trending_router
from .content import router as content_router
from .categories import router as categories_router
from .admin import router as admin_router

# Main v1 router
router = APIRouter(prefix="/api/v1")

# Include all sub-routers with appropriate prefixes
router.include_router(interactions_router, prefix="/interactions", tags=["Interactions"])
router.include_router(recommendations_router, prefix="/recommendations", tags=["Recommendations"])
router.include_router(trending_router, prefix="/trending", tags=["Trending"])
router.include_router(content_router, prefix="/content", tags=["Content"])
router.include_router(categories_router, prefix="/categories", tags=["Categories"])
router.include_router(admin_router, prefix="/admin", tags=["Admin"])

__all__ = ["router"]
