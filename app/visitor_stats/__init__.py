"""
Visitor Stats Module

Summary statistics over the visitor log.
"""

from .factory import create_visitor_stats_module
from .services import VisitorStatsService

__all__ = ["create_visitor_stats_module", "VisitorStatsService"]
