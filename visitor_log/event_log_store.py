"""
Event Log Store

Owns the bounded, head-first visitor log and is its only mutation point.
"""

import logging
from typing import List, Optional, Tuple

from .errors import MalformedRecord
from .models import VisitorEvent
from .storage import ListStorage

logger = logging.getLogger(__name__)

DEFAULT_LOGS_KEY = "visitor_logs"
DEFAULT_MAX_LOGS = 1000
DEFAULT_SEARCH_WINDOW = 20
UPDATE_ATTEMPTS = 3


class EventLogStore:
    """Bounded visitor event log.

    The most recently inserted event is at index 0. At most ``max_logs``
    events are retained; older ones are evicted from the tail.
    """

    def __init__(
        self,
        storage: ListStorage,
        max_logs: int = DEFAULT_MAX_LOGS,
        search_window: int = DEFAULT_SEARCH_WINDOW,
        logs_key: str = DEFAULT_LOGS_KEY,
    ):
        """Initialize the store.

        Args:
            storage: Backend holding the serialized log
            max_logs: Capacity of the log
            search_window: How many head entries the unload update scans
            logs_key: Name of the list inside the backend
        """
        if max_logs < 1:
            raise ValueError("max_logs must be at least 1")
        if search_window < 1:
            raise ValueError("search_window must be at least 1")
        self.storage = storage
        self.max_logs = max_logs
        self.search_window = search_window
        self.logs_key = logs_key

    def insert(self, event: VisitorEvent) -> None:
        """Prepend an event and evict anything past capacity."""
        self.storage.push_head_bounded(self.logs_key, event.to_json(), self.max_logs)
        logger.info("Logged visit %s from %s (%s)", event.id, event.ip, event.page)

    def try_update_unload(
        self,
        visitor_id: str,
        scroll_depth: str,
        time_on_page: str,
        search_window: Optional[int] = None,
    ) -> bool:
        """Apply final engagement metrics to the visitor's open entry.

        Scans the newest ``search_window`` entries for the first one with a
        matching visitor id that has not yet received its unload update, and
        rewrites it in place. The write only lands if the entry is still
        exactly what was scanned; if a concurrent writer shifted or changed
        the list, the scan is repeated up to ``UPDATE_ATTEMPTS`` times.

        Returns:
            True if an entry was updated, False if none matched in the window
        """
        if not visitor_id:
            return False
        window = self.search_window if search_window is None else search_window
        if window < 1:
            return False

        for _ in range(UPDATE_ATTEMPTS):
            match = self._find_open_entry(visitor_id, window)
            if match is None:
                return False
            index, raw, event = match

            event.scroll_depth = scroll_depth
            event.time_on_page = time_on_page
            event.is_unload_event = True
            if self.storage.replace_at(self.logs_key, index, raw, event.to_json()):
                logger.info("Updated visit %s for visitor %s with unload metrics", event.id, visitor_id)
                return True
            logger.info("Entry %d for visitor %s changed before update, rescanning", index, visitor_id)
        return False

    def _find_open_entry(self, visitor_id: str, window: int) -> Optional[Tuple[int, str, VisitorEvent]]:
        """Return (index, raw, event) of the first open entry for ``visitor_id``."""
        for index, raw in enumerate(self.storage.read(self.logs_key, window)):
            try:
                event = VisitorEvent.from_json(raw)
            except MalformedRecord as exc:
                logger.warning("Skipping malformed log entry at %d: %s", index, exc)
                continue
            if event.visitor_id == visitor_id and not event.is_unload_event:
                return index, raw, event
        return None

    def insert_or_update(self, event: VisitorEvent) -> bool:
        """Store a collector submission.

        Unload submissions carrying a visitor id first try the in-place
        update; everything else, and any unload that finds no open entry,
        is inserted.

        Returns:
            True if an existing entry was updated, False if the event was inserted
        """
        if event.is_unload_event and event.visitor_id:
            if self.try_update_unload(event.visitor_id, event.scroll_depth, event.time_on_page):
                return True
        self.insert(event)
        return False

    def read_all(self) -> List[VisitorEvent]:
        """Return a snapshot of the whole log, most recent first."""
        events = []
        for raw in self.storage.read(self.logs_key):
            try:
                events.append(VisitorEvent.from_json(raw))
            except MalformedRecord as exc:
                logger.warning("Skipping malformed log entry: %s", exc)
        return events

    def clear(self) -> None:
        """Remove every entry from the log."""
        self.storage.delete(self.logs_key)
        logger.info("Visitor log cleared")
