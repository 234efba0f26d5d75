"""Application configuration."""

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings

from category_sieve.constants import DEFAULT_KEYWORD_MAPPINGS_PATH


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Keyword hierarchy
    keyword_mappings_path: Path = DEFAULT_KEYWORD_MAPPINGS_PATH

    # Ranking
    default_top_n: int = 30
    max_results: int = 200

    # App Settings
    debug: bool = False
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        frozen = True


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
