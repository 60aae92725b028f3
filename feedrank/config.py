"""
Configuration module for the FeedRank engine.
Loads settings from .env file and environment variables.
"""

import os
from pathlib import Path
from typing import List

# Try to load .env file
_env_path = Path(__file__).parent.parent / ".env"
if _env_path.exists():
    with open(_env_path) as f:
        for line in f:
            line = line.strip()
            if line and not line.startswith("#") and "=" in line:
                key, _, value = line.partition("=")
                key = key.strip()
                value = value.strip().strip('"').strip("'")
                if key and key not in os.environ:
                    os.environ[key] = value


class Settings:
    """Application configuration loaded from environment variables."""

    def __init__(self):
        self.app_name: str = os.getenv("APP_NAME", "FeedRank")
        self.api_version: str = os.getenv("API_VERSION", "v1")
        self.debug: bool = os.getenv("DEBUG", "false").lower() in ("true", "1", "yes")
        self.environment: str = os.getenv("ENVIRONMENT", "development")

        # CORS
        cors_raw = os.getenv("CORS_ORIGINS", "*")
        self.cors_origins: List[str] = [s.strip() for s in cors_raw.split(",")]

        # Content corpus
        self.content_seed_path: str = os.getenv("CONTENT_SEED_PATH", "./seed_output/content.json")

        # Recommendation engine
        self.max_recommendations: int = int(os.getenv("MAX_RECOMMENDATIONS", "50"))
        self.trending_window_hours: float = float(os.getenv("TRENDING_WINDOW_HOURS", "24"))
        self.popular_content_threshold: float = float(os.getenv("POPULAR_CONTENT_THRESHOLD", "10"))
        self.trending_min_tag_count: int = int(os.getenv("TRENDING_MIN_TAG_COUNT", "3"))
        self.similarity_threshold: float = float(os.getenv("SIMILARITY_THRESHOLD", "0.1"))

        # Batch recompute
        self.recompute_debounce_seconds: float = float(os.getenv("RECOMPUTE_DEBOUNCE_SECONDS", "1.0"))
        self.recompute_interval_seconds: float = float(os.getenv("RECOMPUTE_INTERVAL_SECONDS", "300"))
        self.content_poll_seconds: float = float(os.getenv("CONTENT_POLL_SECONDS", "60"))

        # Cache
        self.trending_cache_ttl: int = int(os.getenv("TRENDING_CACHE_TTL", "900"))

        # Security
        self.admin_api_key: str = os.getenv("ADMIN_API_KEY", "")


_settings = None


def get_settings() -> Settings:
    """Get application settings singleton."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
