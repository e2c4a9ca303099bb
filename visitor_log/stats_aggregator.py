"""
Stats Aggregator

Summary statistics over a head-first sequence of visitor events.
"""

import json
from typing import Any, Dict, Hashable, List, Sequence

from .models import RankedItem, Stats, VisitorEvent


def _group_key(value: Any) -> Hashable:
    """Stored records may carry lists or objects; group those by their JSON text."""
    if isinstance(value, (dict, list)):
        return json.dumps(value, sort_keys=True, default=str)
    return value


def top_items(events: Sequence[VisitorEvent], field: str, limit: int) -> List[RankedItem]:
    """Rank the values of ``field`` by how often they occur.

    Missing or empty values count as "Unknown". Ties keep the order in
    which values were first seen.

    Args:
        events: Events to group
        field: Serialized field name, e.g. ``country`` or ``deviceType``
        limit: Maximum number of rows to return

    Returns:
        Ranked items, highest count first
    """
    counts: Dict[Hashable, int] = {}
    for event in events:
        value = _group_key(event.get(field) or "Unknown")
        counts[value] = counts.get(value, 0) + 1

    # sorted() is stable and dicts keep insertion order
    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    return [RankedItem(name=str(name), count=count) for name, count in ranked[:limit]]


class StatsAggregator:
    """Computes the summary view without touching the log."""

    def __init__(self, country_limit: int = 5, browser_limit: int = 5,
                 device_limit: int = 3, recent_limit: int = 10):
        self.country_limit = country_limit
        self.browser_limit = browser_limit
        self.device_limit = device_limit
        self.recent_limit = recent_limit

    def summarize(self, events: Sequence[VisitorEvent]) -> Stats:
        """Build Stats for ``events``, which must be most-recent first."""
        return Stats(
            total_visits=len(events),
            unique_ips=len({_group_key(event.ip) for event in events}),
            top_countries=top_items(events, "country", self.country_limit),
            top_browsers=top_items(events, "browser", self.browser_limit),
            top_devices=top_items(events, "deviceType", self.device_limit),
            recent_visits=list(events[:self.recent_limit]),
        )
