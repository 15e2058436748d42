"""Application configuration loader.

Loads configuration from data/config/app_config_v1.yaml, falling back to
built-in defaults when the file is missing or unreadable.

Usage:
    from coaching.config.app_config import load_app_config

    config = load_app_config()
    store = config.storage.open_store()
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import structlog
import yaml

from coaching.core.storage import STORAGE_KEY, JsonFileStore

logger = structlog.get_logger(__name__)

# Config file path (relative to project root)
CONFIG_FILE = Path("data/config/app_config_v1.yaml")


@dataclass
class StorageConfig:
    """Where the roster blob lives."""

    state_dir: str = "data/state"
    storage_key: str = STORAGE_KEY

    def open_store(self) -> JsonFileStore:
        """Key-value store for the configured state directory."""
        return JsonFileStore(Path(self.state_dir))


@dataclass
class DashboardConfig:
    """Display defaults for the statistics."""

    min_chart_points: int = 2
    not_applicable: str = "N/A"


@dataclass
class AppConfig:
    """Application-wide configuration."""

    storage: StorageConfig = field(default_factory=StorageConfig)
    dashboard: DashboardConfig = field(default_factory=DashboardConfig)


# Module-level cache
_cached_config: AppConfig | None = None


def _get_defaults() -> dict[str, Any]:
    """Get default configuration values."""
    return {
        "storage": {
            "state_dir": "data/state",
            "storage_key": STORAGE_KEY,
        },
        "dashboard": {
            "min_chart_points": 2,
            "not_applicable": "N/A",
        },
    }


def _parse_config(data: dict[str, Any]) -> AppConfig:
    """Parse configuration dictionary into AppConfig object."""
    defaults = _get_defaults()

    storage_data = data.get("storage") or {}
    storage = StorageConfig(
        state_dir=str(storage_data.get("state_dir", defaults["storage"]["state_dir"])),
        storage_key=str(storage_data.get("storage_key", defaults["storage"]["storage_key"])),
    )

    dashboard_data = data.get("dashboard") or {}
    dashboard = DashboardConfig(
        min_chart_points=int(
            dashboard_data.get("min_chart_points", defaults["dashboard"]["min_chart_points"])
        ),
        not_applicable=str(
            dashboard_data.get("not_applicable", defaults["dashboard"]["not_applicable"])
        ),
    )

    return AppConfig(storage=storage, dashboard=dashboard)


def load_app_config(force_reload: bool = False) -> AppConfig:
    """Load application config, or defaults if there is no usable file.

    Args:
        force_reload: If True, ignore cached config and reload from file.

    Returns:
        AppConfig object with all settings.
    """
    global _cached_config

    if _cached_config is not None and not force_reload:
        return _cached_config

    data: dict[str, Any] = _get_defaults()

    if CONFIG_FILE.exists():
        logger.debug("loading_app_config", source=str(CONFIG_FILE))
        try:
            loaded = yaml.safe_load(CONFIG_FILE.read_text(encoding="utf-8"))
        except (yaml.YAMLError, OSError) as e:
            logger.warning("app_config_unreadable", source=str(CONFIG_FILE), error=str(e))
            loaded = None
        if isinstance(loaded, dict):
            data = loaded
    else:
        logger.info("using_default_config")

    _cached_config = _parse_config(data)
    return _cached_config


def clear_config_cache() -> None:
    """Clear the configuration cache.

    Useful for testing or when config is modified at runtime.
    """
    global _cached_config
    _cached_config = None
