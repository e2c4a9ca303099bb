"""
Collector Routes

Flask route receiving browser collector submissions.
"""

import json
import logging

from flask import Blueprint, request, jsonify

from .services import CollectorService

logger = logging.getLogger(__name__)


def get_client_ip() -> str:
    """Get client IP address, handling proxy headers."""
    forwarded_for = request.headers.get('X-Forwarded-For')
    if forwarded_for and forwarded_for.split(',')[0].strip():
        return forwarded_for.split(',')[0].strip()
    if request.headers.get('X-Real-IP'):
        return request.headers.get('X-Real-IP')
    return request.remote_addr or "Unknown"


def _read_payload() -> dict:
    """Decode the submission body.

    sendBeacon posts may arrive without a JSON content type, so the raw
    body is tried as well; anything undecodable becomes an empty payload.
    """
    payload = request.get_json(silent=True)
    if payload is None:
        raw = request.get_data(as_text=True) or "{}"
        try:
            payload = json.loads(raw)
        except ValueError:
            payload = {}
    return payload if isinstance(payload, dict) else {}


def create_collector_blueprint(collector_service: CollectorService) -> Blueprint:
    """Create collector blueprint.

    Args:
        collector_service: The collector service instance

    Returns:
        Flask blueprint with the collector route
    """
    bp = Blueprint('collector', __name__, url_prefix='/api')

    @bp.route('/v', methods=['POST'])
    def collect_visit():
        """Log a visit, or update it when this is the unload submission."""
        payload = _read_payload()
        try:
            updated = collector_service.collect(
                payload,
                client_ip=get_client_ip(),
                user_agent=request.headers.get('User-Agent'),
            )
        except Exception:
            logger.error("Failed to log visit", exc_info=True)
            return jsonify({"success": False, "error": "Failed to log visit"}), 500

        message = "Visit updated" if updated else "Visit logged"
        return jsonify({"success": True, "message": message})

    return bp
