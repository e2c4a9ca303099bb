"""
Data models for the visitor log.
"""

from .visitor_event import VisitorEvent
from .stats import RankedItem, Stats

__all__ = ["VisitorEvent", "RankedItem", "Stats"]
