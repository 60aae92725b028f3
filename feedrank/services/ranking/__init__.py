from feedrank.services.ranking.popularity import PopularityRanker

__all__ = ["PopularityRanker"]
