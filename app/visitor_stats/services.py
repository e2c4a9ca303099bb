"""
Visitor Stats Service

Summarizes the current contents of the visitor log.
"""

from visitor_log.event_log_store import EventLogStore
from visitor_log.models import Stats
from visitor_log.stats_aggregator import StatsAggregator


class VisitorStatsService:
    """Service for visitor summary statistics."""

    def __init__(self, event_log_store: EventLogStore, aggregator: StatsAggregator = None):
        """Initialize the visitor stats service.

        Args:
            event_log_store: Store that owns the visitor log
            aggregator: Aggregator to use (default limits when omitted)
        """
        self.event_log_store = event_log_store
        self.aggregator = aggregator or StatsAggregator()

    def get_visitor_stats(self) -> Stats:
        """Get summary statistics for the whole log.

        Raises:
            StorageUnavailable: If the log could not be read
        """
        return self.aggregator.summarize(self.event_log_store.read_all())
