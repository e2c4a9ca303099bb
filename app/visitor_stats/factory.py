"""
Factory for creating visitor stats module.
"""
from visitor_log.event_log_store import EventLogStore
from visitor_log.stats_aggregator import StatsAggregator
from .services import VisitorStatsService
from .routes import create_visitor_stats_blueprint


def create_visitor_stats_module(
    event_log_store: EventLogStore,
    aggregator: StatsAggregator = None
) -> dict:
    """Create visitor stats module with service and routes.

    Args:
        event_log_store: Store that owns the visitor log
        aggregator: Optional aggregator with custom top-N limits

    Returns:
        Dictionary containing the service and blueprint
    """
    visitor_stats_service = VisitorStatsService(event_log_store, aggregator)
    blueprint = create_visitor_stats_blueprint(visitor_stats_service)

    return {
        "service": visitor_stats_service,
        "blueprint": blueprint
    }
