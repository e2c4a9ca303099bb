"""
Visitor Logs Module

Raw log listing and clearing.
"""

from .factory import create_visitor_logs_module

__all__ = ["create_visitor_logs_module"]
