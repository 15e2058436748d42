"""Configuration package for the coaching dashboard."""

from coaching.config.app_config import (
    AppConfig,
    DashboardConfig,
    StorageConfig,
    clear_config_cache,
    load_app_config,
)

__all__ = [
    "AppConfig",
    "DashboardConfig",
    "StorageConfig",
    "clear_config_cache",
    "load_app_config",
]
