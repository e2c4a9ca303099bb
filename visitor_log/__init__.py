# Visitor log package: bounded event log, aggregation and enrichment

from .errors import VisitorLogError, StorageUnavailable, MalformedRecord
from .models import VisitorEvent, RankedItem, Stats
from .storage import (
    ListStorage,
    InMemoryListStorage,
    JsonFileListStorage,
    RedisListStorage,
    create_storage,
)
from .event_log_store import EventLogStore
from .stats_aggregator import StatsAggregator, top_items
from .user_agent import UserAgentInfo, classify_user_agent
from .geo_locator import GeoLocation, GeoLocator, ProviderResult, is_local_ip
from .event_builder import build_visitor_event

__all__ = [
    "VisitorLogError",
    "StorageUnavailable",
    "MalformedRecord",
    "VisitorEvent",
    "RankedItem",
    "Stats",
    "ListStorage",
    "InMemoryListStorage",
    "JsonFileListStorage",
    "RedisListStorage",
    "create_storage",
    "EventLogStore",
    "StatsAggregator",
    "top_items",
    "UserAgentInfo",
    "classify_user_agent",
    "GeoLocation",
    "GeoLocator",
    "ProviderResult",
    "is_local_ip",
    "build_visitor_event",
]
