"""Tests for application config loading (F6)."""

import pytest

from coaching.config.app_config import (
    AppConfig,
    StorageConfig,
    clear_config_cache,
    load_app_config,
)
from coaching.core.storage import STORAGE_KEY, JsonFileStore


@pytest.fixture
def config_dir(tmp_path, monkeypatch):
    """Empty project dir with a data/config folder."""
    monkeypatch.chdir(tmp_path)
    path = tmp_path / "data" / "config"
    path.mkdir(parents=True)
    return path


def _write_config(config_dir, text):
    (config_dir / "app_config_v1.yaml").write_text(text, encoding="utf-8")


class TestDefaults:
    """No config file means built-in defaults."""

    def test_defaults_without_file(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        config = load_app_config()

        assert isinstance(config, AppConfig)
        assert config.storage.state_dir == "data/state"
        assert config.storage.storage_key == STORAGE_KEY
        assert config.dashboard.min_chart_points == 2
        assert config.dashboard.not_applicable == "N/A"

    def test_malformed_yaml_falls_back(self, config_dir):
        _write_config(config_dir, "storage: [unclosed\n")
        config = load_app_config()
        assert config.storage.state_dir == "data/state"

    def test_non_mapping_falls_back(self, config_dir):
        _write_config(config_dir, "- just\n- a list\n")
        assert load_app_config().dashboard.min_chart_points == 2


class TestOverrides:
    """Values from the YAML file win over defaults."""

    def test_partial_override(self, config_dir):
        _write_config(
            config_dir,
            "storage:\n  state_dir: custom/state\ndashboard:\n  min_chart_points: 3\n",
        )
        config = load_app_config()

        assert config.storage.state_dir == "custom/state"
        assert config.storage.storage_key == STORAGE_KEY
        assert config.dashboard.min_chart_points == 3
        assert config.dashboard.not_applicable == "N/A"

    def test_cached_until_reload(self, config_dir):
        _write_config(config_dir, "dashboard:\n  not_applicable: '-'\n")
        assert load_app_config().dashboard.not_applicable == "-"

        _write_config(config_dir, "dashboard:\n  not_applicable: yok\n")
        assert load_app_config().dashboard.not_applicable == "-"
        assert load_app_config(force_reload=True).dashboard.not_applicable == "yok"

    def test_clear_cache(self, config_dir):
        _write_config(config_dir, "dashboard:\n  min_chart_points: 4\n")
        first = load_app_config()

        clear_config_cache()
        _write_config(config_dir, "dashboard:\n  min_chart_points: 5\n")
        assert load_app_config() is not first
        assert load_app_config().dashboard.min_chart_points == 5


class TestStorageConfig:
    """Tests for StorageConfig.open_store."""

    def test_open_store_uses_state_dir(self, tmp_path):
        store = StorageConfig(state_dir=str(tmp_path / "state")).open_store()

        assert isinstance(store, JsonFileStore)
        store.set_item("yks-students", "[]")
        assert (tmp_path / "state" / "yks-students.json").read_text(encoding="utf-8") == "[]"
