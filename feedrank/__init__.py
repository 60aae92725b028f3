"""FeedRank: content recommendation and trending engine."""

__version__ = "0.1.0"
