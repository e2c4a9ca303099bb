"""
Visitor Event Model

One stored record of a page visit, optionally updated once by the
matching unload submission.
"""

import json
from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Optional, Union

from ..errors import MalformedRecord


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


@dataclass
class VisitorEvent:
    """A single visitor log entry.

    Attribute names are snake_case; the serialized form uses the camelCase
    names the collector script and dashboards expect.
    """

    id: int
    timestamp: str

    # IP & location
    ip: Optional[str] = None
    city: str = "Unknown"
    region: str = "Unknown"
    country: str = "Unknown"
    isp: str = "Unknown"
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    # Browser, OS & device
    browser: str = "Unknown"
    os: str = "Unknown"
    device_type: str = "Unknown"
    device_name: str = "Unknown"
    platform: str = "Unknown"

    # Screen & viewport
    screen_resolution: str = "0x0"
    viewport_size: str = "0x0"
    color_depth: Optional[int] = None
    pixel_ratio: float = 1

    # Language & timezone
    language: str = "Unknown"
    languages: Optional[List[str]] = None
    timezone: str = "Unknown"
    timezone_offset: Optional[int] = None

    # Hardware
    cpu_cores: Optional[int] = None
    device_memory: Optional[str] = None
    touch_support: bool = False
    max_touch_points: int = 0

    # Connection
    connection_type: str = "Unknown"
    connection_speed: Optional[str] = None
    connection_latency: Optional[str] = None
    save_data: bool = False
    online: bool = True

    # Battery
    battery_level: Optional[str] = None
    battery_charging: Optional[bool] = None

    # Visitor tracking
    visitor_id: Optional[str] = None
    is_returning: bool = False
    visit_count: int = 1

    # Page & campaign
    page: str = "Unknown"
    page_title: str = "Unknown"
    referrer: str = "Direct"
    utm_source: Optional[str] = None
    utm_medium: Optional[str] = None
    utm_campaign: Optional[str] = None

    # Engagement, rewritten by the unload update
    scroll_depth: str = "0%"
    time_on_page: str = "0s"

    # Performance
    page_load_time: Optional[str] = None
    dom_content_loaded: Optional[str] = None

    is_unload_event: bool = False

    # Keys present in a stored record that this model does not know about
    extra: Dict[str, Any] = field(default_factory=dict)

    def get(self, key: str, default: Any = None) -> Any:
        """Look up a field by its serialized (camelCase) or attribute name."""
        attr = _WIRE_TO_ATTR.get(key, key)
        if attr in _ATTR_TO_WIRE:
            return getattr(self, attr)
        return self.extra.get(key, default)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        data = dict(self.extra)
        for attr, wire in _ATTR_TO_WIRE.items():
            data[wire] = getattr(self, attr)
        return data

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "VisitorEvent":
        """Create a VisitorEvent from its serialized form.

        Missing keys take the model defaults; unknown keys are kept in
        ``extra`` so they survive a rewrite of the record.
        """
        kwargs: Dict[str, Any] = {}
        extra: Dict[str, Any] = {}
        for key, value in data.items():
            attr = _WIRE_TO_ATTR.get(key)
            if attr is None:
                extra[key] = value
            else:
                kwargs[attr] = value
        kwargs.setdefault("id", 0)
        kwargs.setdefault("timestamp", "")
        return cls(extra=extra, **kwargs)

    @classmethod
    def from_json(cls, raw: Union[str, bytes, Dict[str, Any]]) -> "VisitorEvent":
        """Parse one stored entry.

        Raises:
            MalformedRecord: If the entry is not a JSON object.
        """
        if isinstance(raw, dict):
            return cls.from_dict(raw)
        try:
            data = json.loads(raw)
        except (TypeError, ValueError) as exc:
            raise MalformedRecord(raw, f"invalid JSON ({exc})") from exc
        if not isinstance(data, dict):
            raise MalformedRecord(raw, "entry is not an object")
        return cls.from_dict(data)


_ATTR_TO_WIRE = {f.name: _camel(f.name) for f in fields(VisitorEvent) if f.name != "extra"}
_WIRE_TO_ATTR = {wire: attr for attr, wire in _ATTR_TO_WIRE.items()}
