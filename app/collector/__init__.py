"""
Collector Module

Receives telemetry from the browser collector script and records it in the
visitor log.
"""

from .factory import create_collector_module
from .services import CollectorService

__all__ = ["create_collector_module", "CollectorService"]
