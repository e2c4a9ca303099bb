"""
Configuration management for the visitor log service.
Handles loading, validating, and providing access to application settings.
"""

import os
import json
from pathlib import Path
from typing import Dict, Any, Optional
from dataclasses import dataclass


@dataclass
class AppConfig:
    """Application configuration settings."""
    host: str
    port: int
    debug: bool
    cors_origins: list[str]


@dataclass
class VisitorLogConfig:
    """Event log tunables."""
    max_logs: int
    search_window: int
    logs_key: str


@dataclass
class StorageConfig:
    """Storage backend configuration settings."""
    backend: str
    file_path: str
    redis_url: str
    timeout_seconds: float


@dataclass
class GeoConfig:
    """IP geolocation configuration settings."""
    enabled: bool
    timeout_seconds: float


def _env_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


class ConfigManager:
    """Manages application configuration loading and access."""

    def __init__(self, config_file: str = "visitor_log_config.json"):
        self.config_file = Path(config_file)
        self._config: Optional[Dict[str, Any]] = None
        self._load_config()

    def _load_config(self) -> None:
        """Load configuration from file and environment variables."""
        # Start with default config
        self._config = self._get_default_config()

        # Load base config from file
        if self.config_file.exists():
            try:
                with open(self.config_file, 'r', encoding='utf-8') as f:
                    file_config = json.load(f)
                    self._merge_config(file_config)
            except (json.JSONDecodeError, FileNotFoundError):
                # Keep default config if file is invalid or not found
                pass

        # Override with environment variables
        self._override_with_env()

    def _get_default_config(self) -> Dict[str, Any]:
        """Get default configuration."""
        return {
            "app": {
                "host": "0.0.0.0",
                "port": 3000,
                "debug": False,
                "cors_origins": ["*"]
            },
            "visitor_log": {
                "max_logs": 1000,
                "search_window": 20,
                "logs_key": "visitor_logs"
            },
            "storage": {
                "backend": "file",
                "file_path": "data/visitor_logs.json",
                "redis_url": "redis://localhost:6379/0",
                "timeout_seconds": 5.0
            },
            "geo": {
                "enabled": True,
                "timeout_seconds": 3.0
            }
        }

    def _merge_config(self, file_config: Dict[str, Any]) -> None:
        """Merge file configuration with current config."""
        for section, values in file_config.items():
            if section in self._config and isinstance(values, dict):
                self._config[section].update(values)
            else:
                self._config[section] = values

    def _override_with_env(self) -> None:
        """Override configuration with environment variables."""
        # App settings
        if os.getenv("APP_HOST"):
            self._config["app"]["host"] = os.getenv("APP_HOST")

        if os.getenv("APP_PORT"):
            self._config["app"]["port"] = int(os.getenv("APP_PORT"))

        if os.getenv("APP_DEBUG"):
            self._config["app"]["debug"] = _env_bool(os.getenv("APP_DEBUG"))

        if os.getenv("CORS_ORIGINS"):
            self._config["app"]["cors_origins"] = [
                origin.strip() for origin in os.getenv("CORS_ORIGINS").split(",") if origin.strip()
            ]

        # Event log settings
        if os.getenv("MAX_LOGS"):
            self._config["visitor_log"]["max_logs"] = int(os.getenv("MAX_LOGS"))

        if os.getenv("UNLOAD_SEARCH_WINDOW"):
            self._config["visitor_log"]["search_window"] = int(os.getenv("UNLOAD_SEARCH_WINDOW"))

        if os.getenv("LOGS_KEY"):
            self._config["visitor_log"]["logs_key"] = os.getenv("LOGS_KEY")

        # Storage settings
        if os.getenv("STORAGE_BACKEND"):
            self._config["storage"]["backend"] = os.getenv("STORAGE_BACKEND").lower()

        if os.getenv("LOGS_FILE"):
            self._config["storage"]["file_path"] = os.getenv("LOGS_FILE")

        if os.getenv("REDIS_URL"):
            self._config["storage"]["redis_url"] = os.getenv("REDIS_URL")

        if os.getenv("STORAGE_TIMEOUT"):
            self._config["storage"]["timeout_seconds"] = float(os.getenv("STORAGE_TIMEOUT"))

        # Geolocation settings
        if os.getenv("GEO_ENABLED"):
            self._config["geo"]["enabled"] = _env_bool(os.getenv("GEO_ENABLED"))

        if os.getenv("GEO_TIMEOUT"):
            self._config["geo"]["timeout_seconds"] = float(os.getenv("GEO_TIMEOUT"))

    def get_app_config(self) -> AppConfig:
        """Get application configuration."""
        app_config = self._config["app"]
        return AppConfig(
            host=app_config["host"],
            port=app_config["port"],
            debug=app_config["debug"],
            cors_origins=list(app_config["cors_origins"])
        )

    def get_visitor_log_config(self) -> VisitorLogConfig:
        """Get event log configuration, clamping sizes to at least 1."""
        log_config = self._config["visitor_log"]
        return VisitorLogConfig(
            max_logs=max(1, int(log_config["max_logs"])),
            search_window=max(1, int(log_config["search_window"])),
            logs_key=log_config["logs_key"]
        )

    def get_storage_config(self) -> StorageConfig:
        """Get storage configuration."""
        storage_config = self._config["storage"]
        return StorageConfig(
            backend=storage_config["backend"],
            file_path=storage_config["file_path"],
            redis_url=storage_config["redis_url"],
            timeout_seconds=float(storage_config["timeout_seconds"])
        )

    def get_geo_config(self) -> GeoConfig:
        """Get geolocation configuration."""
        geo_config = self._config["geo"]
        return GeoConfig(
            enabled=bool(geo_config["enabled"]),
            timeout_seconds=float(geo_config["timeout_seconds"])
        )

    def get_config(self) -> Dict[str, Any]:
        """Get raw configuration dictionary."""
        return self._config.copy()

    def reload(self) -> None:
        """Reload configuration from file."""
        self._load_config()

    def save_config(self) -> None:
        """Save current configuration to file."""
        with open(self.config_file, 'w', encoding='utf-8') as f:
            json.dump(self._config, f, indent=2, ensure_ascii=False)


# Global configuration instance
config_manager = ConfigManager()


def get_app_config() -> AppConfig:
    """Get application configuration."""
    return config_manager.get_app_config()


def get_visitor_log_config() -> VisitorLogConfig:
    """Get event log configuration."""
    return config_manager.get_visitor_log_config()


def get_storage_config() -> StorageConfig:
    """Get storage configuration."""
    return config_manager.get_storage_config()


def get_geo_config() -> GeoConfig:
    """Get geolocation configuration."""
    return config_manager.get_geo_config()


def reload_config() -> None:
    """Reload configuration."""
    config_manager.reload()


def save_config() -> None:
    """Save configuration to file."""
    config_manager.save_config()
