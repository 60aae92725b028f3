from feedrank.services.recommendations.generator import GenerationContext, RecommendationGenerator
from feedrank.services.recommendations.store import RecommendationStore
from feedrank.services.recommendations.engine import (
    ContentRecommendationEngine,
    CycleReport,
    SharedRankings,
)

__all__ = [
    "GenerationContext",
    "RecommendationGenerator",
    "RecommendationStore",
    "ContentRecommendationEngine",
    "CycleReport",
    "SharedRankings",
]
