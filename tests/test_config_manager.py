"""
Test cases for the configuration management system.
Tests config loading, environment overrides, and access functionality.
"""

import os
import json
from unittest.mock import patch
import pytest

from config_manager import (
    ConfigManager,
    AppConfig,
    VisitorLogConfig,
    StorageConfig,
    GeoConfig,
)


@pytest.fixture
def config_file(tmp_path):
    return tmp_path / "visitor_log_config.json"


class TestConfigManager:
    """Test the ConfigManager class functionality."""

    def test_defaults_without_file(self, config_file):
        """Missing config file falls back to built-in defaults."""
        with patch.dict(os.environ, {}, clear=True):
            manager = ConfigManager(str(config_file))

        app_config = manager.get_app_config()
        assert isinstance(app_config, AppConfig)
        assert app_config.host == "0.0.0.0"
        assert app_config.port == 3000
        assert app_config.debug is False
        assert app_config.cors_origins == ["*"]

        log_config = manager.get_visitor_log_config()
        assert isinstance(log_config, VisitorLogConfig)
        assert log_config.max_logs == 1000
        assert log_config.search_window == 20
        assert log_config.logs_key == "visitor_logs"

        storage_config = manager.get_storage_config()
        assert isinstance(storage_config, StorageConfig)
        assert storage_config.backend == "file"
        assert storage_config.file_path == "data/visitor_logs.json"
        assert storage_config.timeout_seconds == 5.0

        geo_config = manager.get_geo_config()
        assert isinstance(geo_config, GeoConfig)
        assert geo_config.enabled is True
        assert geo_config.timeout_seconds == 3.0

    def test_load_config_from_file(self, config_file):
        """Values in the file override defaults section by section."""
        config_file.write_text(json.dumps({
            "app": {"port": 8080},
            "visitor_log": {"max_logs": 50},
            "storage": {"backend": "redis", "redis_url": "redis://cache:6379/1"},
        }), encoding="utf-8")

        with patch.dict(os.environ, {}, clear=True):
            manager = ConfigManager(str(config_file))

        assert manager.get_app_config().port == 8080
        assert manager.get_app_config().host == "0.0.0.0"
        assert manager.get_visitor_log_config().max_logs == 50
        assert manager.get_visitor_log_config().search_window == 20
        assert manager.get_storage_config().backend == "redis"
        assert manager.get_storage_config().redis_url == "redis://cache:6379/1"

    def test_invalid_json_keeps_defaults(self, config_file):
        config_file.write_text("{ not json", encoding="utf-8")

        with patch.dict(os.environ, {}, clear=True):
            manager = ConfigManager(str(config_file))

        assert manager.get_app_config().port == 3000

    def test_environment_overrides(self, config_file):
        """Environment variables win over file and defaults."""
        config_file.write_text(json.dumps({"app": {"port": 8080}}), encoding="utf-8")
        env = {
            "APP_HOST": "127.0.0.1",
            "APP_PORT": "9000",
            "APP_DEBUG": "true",
            "CORS_ORIGINS": "https://a.example, https://b.example",
            "MAX_LOGS": "250",
            "UNLOAD_SEARCH_WINDOW": "5",
            "LOGS_KEY": "site_logs",
            "STORAGE_BACKEND": "REDIS",
            "LOGS_FILE": "/var/lib/visits.json",
            "REDIS_URL": "redis://other:6379/0",
            "STORAGE_TIMEOUT": "1.5",
            "GEO_ENABLED": "no",
            "GEO_TIMEOUT": "0.5",
        }

        with patch.dict(os.environ, env, clear=True):
            manager = ConfigManager(str(config_file))

        app_config = manager.get_app_config()
        assert app_config.host == "127.0.0.1"
        assert app_config.port == 9000
        assert app_config.debug is True
        assert app_config.cors_origins == ["https://a.example", "https://b.example"]

        log_config = manager.get_visitor_log_config()
        assert log_config.max_logs == 250
        assert log_config.search_window == 5
        assert log_config.logs_key == "site_logs"

        storage_config = manager.get_storage_config()
        assert storage_config.backend == "redis"
        assert storage_config.file_path == "/var/lib/visits.json"
        assert storage_config.redis_url == "redis://other:6379/0"
        assert storage_config.timeout_seconds == 1.5

        geo_config = manager.get_geo_config()
        assert geo_config.enabled is False
        assert geo_config.timeout_seconds == 0.5

    def test_sizes_clamped_to_one(self, config_file):
        config_file.write_text(json.dumps({
            "visitor_log": {"max_logs": 0, "search_window": -3},
        }), encoding="utf-8")

        with patch.dict(os.environ, {}, clear=True):
            log_config = ConfigManager(str(config_file)).get_visitor_log_config()

        assert log_config.max_logs == 1
        assert log_config.search_window == 1

    def test_save_and_reload(self, config_file):
        with patch.dict(os.environ, {}, clear=True):
            manager = ConfigManager(str(config_file))
            manager._config["visitor_log"]["max_logs"] = 42
            manager.save_config()

            saved = json.loads(config_file.read_text(encoding="utf-8"))
            assert saved["visitor_log"]["max_logs"] == 42

            manager._config["visitor_log"]["max_logs"] = 7
            manager.reload()

        assert manager.get_visitor_log_config().max_logs == 42

    def test_get_config_returns_copy(self, config_file):
        with patch.dict(os.environ, {}, clear=True):
            manager = ConfigManager(str(config_file))

        raw = manager.get_config()
        raw["extra"] = {}

        assert "extra" not in manager.get_config()
