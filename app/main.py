import logging
from pathlib import Path
from typing import Optional

# Import configuration management
import sys
sys.path.append(str(Path(__file__).parent.parent))
from config_manager import ConfigManager

from flask import Flask, jsonify
from flask_cors import CORS
from werkzeug.middleware.proxy_fix import ProxyFix

from visitor_log.event_log_store import EventLogStore
from visitor_log.geo_locator import GeoLocator
from visitor_log.logging_config import setup_logging
from visitor_log.storage import ListStorage, create_storage

from app.collector.factory import create_collector_module
from app.visitor_logs.factory import create_visitor_logs_module
from app.visitor_stats.factory import create_visitor_stats_module

logger = logging.getLogger(__name__)

BASE_DIR = Path(__file__).parent.parent


def create_app(
    config_manager: Optional[ConfigManager] = None,
    storage: Optional[ListStorage] = None,
    geo_locator: Optional[GeoLocator] = None,
    configure_logging: bool = False,
) -> Flask:
    """Build the Flask application.

    Args:
        config_manager: Configuration source (loads the default file when omitted)
        storage: Storage backend; built from the storage config when omitted
        geo_locator: IP geolocator; built from the geo config when omitted
        configure_logging: Whether to install the queue-based logging setup

    Returns:
        Configured Flask application
    """
    # -------------------------------------------------------------------------
    # Configuration
    # -------------------------------------------------------------------------
    config_manager = config_manager or ConfigManager()
    app_config = config_manager.get_app_config()
    log_config = config_manager.get_visitor_log_config()
    storage_config = config_manager.get_storage_config()
    geo_config = config_manager.get_geo_config()

    if configure_logging:
        setup_logging(app_config.debug)

    app = Flask(__name__)
    app.wsgi_app = ProxyFix(
        app.wsgi_app,
        x_proto=1,
        x_host=1,
        x_prefix=1)

    CORS(
        app,
        resources={r"/api/*": {"origins": app_config.cors_origins}},
        supports_credentials=True,
        methods=["GET", "POST", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type"],
    )

    # -------------------------------------------------------------------------
    # Shared services
    # -------------------------------------------------------------------------
    backend_name = "custom" if storage is not None else storage_config.backend
    if storage is None:
        file_path = Path(storage_config.file_path)
        if not file_path.is_absolute():
            file_path = BASE_DIR / file_path
        storage = create_storage(
            storage_config.backend,
            file_path=file_path,
            redis_url=storage_config.redis_url,
            timeout_seconds=storage_config.timeout_seconds,
        )

    event_log_store = EventLogStore(
        storage,
        max_logs=log_config.max_logs,
        search_window=log_config.search_window,
        logs_key=log_config.logs_key,
    )

    if geo_locator is None:
        geo_locator = GeoLocator(
            timeout_seconds=geo_config.timeout_seconds,
            enabled=geo_config.enabled,
        )

    # -------------------------------------------------------------------------
    # Subsystems
    # -------------------------------------------------------------------------
    collector_module = create_collector_module(event_log_store, geo_locator)
    visitor_logs_module = create_visitor_logs_module(event_log_store)
    visitor_stats_module = create_visitor_stats_module(event_log_store)

    app.register_blueprint(collector_module["blueprint"])
    app.register_blueprint(visitor_logs_module["blueprint"])
    app.register_blueprint(visitor_stats_module["blueprint"])

    app.extensions["event_log_store"] = event_log_store

    @app.errorhandler(405)
    def method_not_allowed(_error):
        return jsonify({"error": "Method not allowed"}), 405

    logger.info(
        "Visitor log ready: backend=%s max_logs=%d search_window=%d",
        backend_name,
        log_config.max_logs,
        log_config.search_window,
    )
    return app


app = create_app(configure_logging=True)
