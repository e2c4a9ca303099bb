"""
Error types raised by the visitor log package.
"""


class VisitorLogError(Exception):
    """Base class for visitor log errors."""


class StorageUnavailable(VisitorLogError):
    """The backing store could not be reached or failed mid-operation."""


class MalformedRecord(VisitorLogError):
    """A stored entry could not be parsed into a VisitorEvent."""

    def __init__(self, raw, reason: str = "unparseable entry"):
        self.raw = raw
        self.reason = reason
        super().__init__(f"{reason}: {str(raw)[:80]!r}")
