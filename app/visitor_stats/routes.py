"""
Visitor Stats Routes

Flask route for the visitor stats subsystem.
"""

import logging

from flask import Blueprint, jsonify

from .services import VisitorStatsService

logger = logging.getLogger(__name__)


def create_visitor_stats_blueprint(visitor_stats_service: VisitorStatsService) -> Blueprint:
    """Create visitor stats blueprint with routes.

    Args:
        visitor_stats_service: The visitor stats service instance

    Returns:
        Flask blueprint with visitor stats routes
    """
    blueprint = Blueprint('visitor_stats', __name__, url_prefix='/api')

    @blueprint.route('/stats', methods=['GET'])
    def api_stats():
        """API endpoint for visitor statistics."""
        try:
            stats = visitor_stats_service.get_visitor_stats()
        except Exception:
            logger.error("Failed to get stats", exc_info=True)
            return jsonify({"error": "Failed to get stats"}), 500
        return jsonify(stats.to_dict())

    return blueprint
