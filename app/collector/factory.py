"""
Factory for creating the collector module.
"""
from visitor_log.event_log_store import EventLogStore
from visitor_log.geo_locator import GeoLocator
from .services import CollectorService
from .routes import create_collector_blueprint


def create_collector_module(event_log_store: EventLogStore, geo_locator: GeoLocator) -> dict:
    """Create collector module with service and routes.

    Args:
        event_log_store: Store that owns the visitor log
        geo_locator: Resolves client IPs to locations

    Returns:
        Dictionary containing the service and blueprint
    """
    collector_service = CollectorService(event_log_store, geo_locator)
    blueprint = create_collector_blueprint(collector_service)

    return {
        "service": collector_service,
        "blueprint": blueprint
    }
