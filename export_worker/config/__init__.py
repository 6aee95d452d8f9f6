"""Configuration for the export worker.

Usage:
    from export_worker.config import get_settings

    settings = get_settings()
    workflow = settings.jobs.batch_export.workflow_name
"""

from functools import lru_cache

from export_worker.config.loader import load_config
from export_worker.config.settings import Settings


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Settings from the TOML layers and environment, cached for the process."""
    return Settings.from_toml(load_config())


def reload_settings() -> Settings:
    """Clear the settings cache and reload configuration."""
    get_settings.cache_clear()
    return get_settings()


__all__ = ["get_settings", "reload_settings", "Settings"]
