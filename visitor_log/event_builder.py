"""
Builds VisitorEvent records from raw collector submissions.

This is the single validation point for incoming telemetry: every absent
field is defaulted here, nothing is rejected, and nothing downstream
re-validates.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from .geo_locator import GeoLocation
from .models import VisitorEvent
from .user_agent import UserAgentInfo


def _fmt_number(value: Any) -> Any:
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def _with_unit(value: Any, unit: str, default: Optional[str] = None) -> Optional[str]:
    """Render a truthy numeric value with its unit, e.g. ``12`` -> ``"12s"``."""
    if not value:
        return default
    return f"{_fmt_number(value)}{unit}"


def _text(value: Any) -> Optional[str]:
    """Identifiers must be non-empty strings; anything else counts as absent."""
    return value if isinstance(value, str) and value else None


def _utc_timestamp(now: datetime) -> str:
    return now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def build_visitor_event(
    body: Dict[str, Any],
    client_ip: Optional[str],
    ua_info: UserAgentInfo,
    location: GeoLocation,
    now: Optional[datetime] = None,
) -> VisitorEvent:
    """Create a VisitorEvent from a collector payload.

    Args:
        body: Decoded JSON body sent by the browser collector
        client_ip: Client address as seen by the server
        ua_info: Classification of the submitted user agent
        location: Geolocation of ``client_ip``
        now: Creation time (defaults to the current time)

    Returns:
        A fully defaulted VisitorEvent
    """
    if not isinstance(body, dict):
        body = {}
    if now is None:
        now = datetime.now(timezone.utc)
    performance = body.get("performance")
    if not isinstance(performance, dict):
        performance = {}
    battery_level = body.get("batteryLevel")

    return VisitorEvent(
        id=int(now.timestamp() * 1000),
        timestamp=_utc_timestamp(now),

        ip=client_ip,
        city=location.city or "Unknown",
        region=location.region or "Unknown",
        country=location.country or "Unknown",
        isp=location.isp or "Unknown",
        latitude=location.latitude or None,
        longitude=location.longitude or None,

        browser=ua_info.browser,
        os=ua_info.os,
        device_type=ua_info.device_type,
        device_name=body.get("deviceName") or "Unknown",
        platform=body.get("platform") or "Unknown",

        screen_resolution=f"{_fmt_number(body.get('screenWidth') or 0)}x{_fmt_number(body.get('screenHeight') or 0)}",
        viewport_size=f"{_fmt_number(body.get('viewportWidth') or 0)}x{_fmt_number(body.get('viewportHeight') or 0)}",
        color_depth=body.get("colorDepth") or None,
        pixel_ratio=body.get("pixelRatio") or 1,

        language=body.get("language") or "Unknown",
        languages=body.get("languages") or None,
        timezone=body.get("timezone") or location.timezone or "Unknown",
        timezone_offset=body.get("timezoneOffset") or None,

        cpu_cores=body.get("cpuCores") or None,
        device_memory=_with_unit(body.get("deviceMemory"), " GB"),
        touch_support=bool(body.get("touchSupport")),
        max_touch_points=body.get("maxTouchPoints") or 0,

        connection_type=body.get("connectionType") or "Unknown",
        connection_speed=_with_unit(body.get("connectionDownlink"), " Mbps"),
        connection_latency=_with_unit(body.get("connectionRtt"), " ms"),
        save_data=bool(body.get("saveData")),
        online=body.get("onLine") is not False,

        battery_level=None if battery_level is None else f"{_fmt_number(battery_level)}%",
        battery_charging=body.get("batteryCharging"),

        visitor_id=_text(body.get("visitorId")),
        is_returning=bool(body.get("isReturning")),
        visit_count=body.get("visitCount") or 1,

        page=body.get("page") or "Unknown",
        page_title=body.get("pageTitle") or "Unknown",
        referrer=body.get("referrer") or "Direct",
        utm_source=body.get("utm_source") or None,
        utm_medium=body.get("utm_medium") or None,
        utm_campaign=body.get("utm_campaign") or None,

        scroll_depth=_with_unit(body.get("scrollDepth"), "%", "0%"),
        time_on_page=_with_unit(body.get("timeOnPage"), "s", "0s"),

        page_load_time=_with_unit(performance.get("pageLoadTime"), "ms"),
        dom_content_loaded=_with_unit(performance.get("domContentLoaded"), "ms"),

        is_unload_event=bool(body.get("isUnloadEvent")),
    )
