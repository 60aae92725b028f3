from feedrank.services.trending.trending_algorithm import TrendingCalculator
from feedrank.services.trending.category_stats import CategoryStatsCalculator

__all__ = ["TrendingCalculator", "CategoryStatsCalculator"]
