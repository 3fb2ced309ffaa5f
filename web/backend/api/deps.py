"""Shared request dependencies"""

from functools import lru_cache

from bindery.config.settings import Settings


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_env()
