"""
Visitor Logs Routes

Flask routes for reading and clearing the visitor log.
"""

import logging

from flask import Blueprint, jsonify

from visitor_log.event_log_store import EventLogStore

logger = logging.getLogger(__name__)


def create_visitor_logs_blueprint(event_log_store: EventLogStore) -> Blueprint:
    """Create visitor logs blueprint.

    Args:
        event_log_store: Store that owns the visitor log

    Returns:
        Flask blueprint with the log routes
    """
    bp = Blueprint('visitor_logs', __name__, url_prefix='/api')

    @bp.route('/logs', methods=['GET'])
    def list_logs():
        """Return every logged visit, most recent first."""
        try:
            events = event_log_store.read_all()
        except Exception:
            logger.error("Failed to read logs", exc_info=True)
            return jsonify({"error": "Failed to process request"}), 500
        return jsonify([event.to_dict() for event in events])

    @bp.route('/logs', methods=['DELETE'])
    def clear_logs():
        """Delete every logged visit."""
        try:
            event_log_store.clear()
        except Exception:
            logger.error("Failed to clear logs", exc_info=True)
            return jsonify({"success": False, "error": "Failed to process request"}), 500
        return jsonify({"success": True, "message": "Logs cleared"})

    return bp
