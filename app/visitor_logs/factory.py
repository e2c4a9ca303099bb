"""
Factory for creating the visitor logs module.
"""
from visitor_log.event_log_store import EventLogStore
from .routes import create_visitor_logs_blueprint


def create_visitor_logs_module(event_log_store: EventLogStore) -> dict:
    """Create visitor logs module with service and routes.

    Args:
        event_log_store: Store that owns the visitor log

    Returns:
        Dictionary containing the service and blueprint
    """
    return {
        "service": event_log_store,
        "blueprint": create_visitor_logs_blueprint(event_log_store)
    }
