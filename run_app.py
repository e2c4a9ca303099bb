#!/usr/bin/env python3
"""
Simple runner script for the visitor log Flask application.
This script ensures the correct Python path is set and runs the app.
"""

import logging
import sys
from pathlib import Path

# Add the current directory to Python path
current_dir = Path(__file__).parent
sys.path.insert(0, str(current_dir))

from app.main import app
from config_manager import get_app_config

logger = logging.getLogger(__name__)


if __name__ == "__main__":
    app_config = get_app_config()
    logger.info("Starting visitor log service on %s:%d from %s",
                app_config.host, app_config.port, current_dir)

    app.run(
        host=app_config.host,
        port=app_config.port,
        debug=app_config.debug
    )
