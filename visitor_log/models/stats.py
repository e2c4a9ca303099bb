"""
Data models for summary statistics.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List

from .visitor_event import VisitorEvent


@dataclass
class RankedItem:
    """One row of a top-N breakdown."""

    name: str
    count: int

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "count": self.count}


@dataclass
class Stats:
    """Summary view over the current visitor log."""

    total_visits: int = 0
    unique_ips: int = 0
    top_countries: List[RankedItem] = field(default_factory=list)
    top_browsers: List[RankedItem] = field(default_factory=list)
    top_devices: List[RankedItem] = field(default_factory=list)
    recent_visits: List[VisitorEvent] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "totalVisits": self.total_visits,
            "uniqueIPs": self.unique_ips,
            "topCountries": [item.to_dict() for item in self.top_countries],
            "topBrowsers": [item.to_dict() for item in self.top_browsers],
            "topDevices": [item.to_dict() for item in self.top_devices],
            "recentVisits": [event.to_dict() for event in self.recent_visits],
        }
