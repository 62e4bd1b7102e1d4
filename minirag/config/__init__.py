"""Configuration module: exports Settings and a cached accessor."""

from functools import lru_cache

from minirag.config.settings import DEFAULT_CONFIG_PATH, Settings


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the process-wide Settings instance, built on first call."""
    return Settings()


__all__ = ["DEFAULT_CONFIG_PATH", "Settings", "get_settings"]
