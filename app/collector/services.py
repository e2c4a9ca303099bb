"""
Collector Service

Enriches a raw submission and hands the resulting VisitorEvent to the store.
"""

import logging
from typing import Any, Dict, Optional

from visitor_log.event_builder import build_visitor_event
from visitor_log.event_log_store import EventLogStore
from visitor_log.geo_locator import GeoLocator
from visitor_log.user_agent import classify_user_agent

logger = logging.getLogger(__name__)


class CollectorService:
    """Turns collector submissions into visitor log writes."""

    def __init__(self, event_log_store: EventLogStore, geo_locator: GeoLocator):
        """Initialize the collector service.

        Args:
            event_log_store: Store that owns the visitor log
            geo_locator: Resolves client IPs to locations
        """
        self.event_log_store = event_log_store
        self.geo_locator = geo_locator

    def collect(self, body: Dict[str, Any], client_ip: Optional[str],
                user_agent: Optional[str] = None) -> bool:
        """Record one submission.

        Args:
            body: Decoded collector payload
            client_ip: Client address
            user_agent: Fallback user agent when the payload carries none

        Returns:
            True if an existing visit was updated, False if a new one was logged

        Raises:
            StorageUnavailable: If the log could not be written
        """
        submitted_ua = body.get("userAgent")
        if not isinstance(submitted_ua, str) or not submitted_ua:
            submitted_ua = user_agent
        ua_info = classify_user_agent(submitted_ua)
        location = self.geo_locator.locate(client_ip)
        event = build_visitor_event(body, client_ip, ua_info, location)
        return self.event_log_store.insert_or_update(event)
