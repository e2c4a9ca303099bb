"""
IP Geolocation

Resolves an IP address to a coarse location through an ordered chain of
public providers. Failures never escape: every provider attempt yields a
ProviderResult, and an exhausted chain yields the all-"Unknown" default.
"""

import ipaddress
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple

import requests

logger = logging.getLogger(__name__)

USER_AGENT = "visitor-tracker/1.0"
IPAPI_URL = "https://ipapi.co/{ip}/json/"
IP_API_URL = "http://ip-api.com/json/{ip}"
IP_API_FIELDS = "status,city,regionName,country,timezone,isp,lat,lon"


@dataclass
class GeoLocation:
    """Location fields attached to a visitor event."""

    ip: Optional[str]
    city: str = "Unknown"
    region: str = "Unknown"
    country: str = "Unknown"
    timezone: str = "Unknown"
    isp: str = "Unknown"
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    @classmethod
    def unknown(cls, ip: Optional[str]) -> "GeoLocation":
        return cls(ip=ip)

    @classmethod
    def local(cls, ip: Optional[str]) -> "GeoLocation":
        return cls(ip=ip, city="Local", region="Local", country="Local",
                   timezone="Local", isp="Local")


@dataclass
class ProviderResult:
    """Outcome of one provider attempt: a location, or the reason there is none."""

    provider: str
    location: Optional[GeoLocation] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.location is not None


def is_local_ip(ip: Optional[str]) -> bool:
    """True for missing, loopback, private and link-local addresses."""
    if not ip:
        return True
    try:
        addr = ipaddress.ip_address(ip)
    except ValueError:
        return False
    return addr.is_private or addr.is_loopback or addr.is_link_local


def _is_valid_ip(ip: str) -> bool:
    try:
        ipaddress.ip_address(ip)
    except ValueError:
        return False
    return True


class GeoLocator:
    """Geolocates client IPs with a two-provider fallback chain."""

    def __init__(self, session: Optional[requests.Session] = None,
                 timeout_seconds: float = 3.0, enabled: bool = True):
        self.session = session or requests.Session()
        self.session.headers.setdefault("User-Agent", USER_AGENT)
        self.timeout_seconds = timeout_seconds
        self.enabled = enabled
        self.providers: List[Tuple[str, Callable[[str], ProviderResult]]] = [
            ("ipapi.co", self._query_ipapi),
            ("ip-api.com", self._query_ip_api),
        ]

    def _get_json(self, url: str, params: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
        resp = self.session.get(url, params=params, timeout=self.timeout_seconds)
        resp.raise_for_status()
        data = resp.json()
        if not isinstance(data, dict):
            raise ValueError("provider returned a non-object payload")
        return data

    def _query_ipapi(self, ip: str) -> ProviderResult:
        provider = "ipapi.co"
        try:
            data = self._get_json(IPAPI_URL.format(ip=ip))
        except (requests.RequestException, ValueError) as exc:
            return ProviderResult(provider, error=str(exc))
        if data.get("error") or not data.get("city"):
            return ProviderResult(provider, error=data.get("reason") or "no city in response")
        return ProviderResult(provider, GeoLocation(
            ip=ip,
            city=data.get("city") or "Unknown",
            region=data.get("region") or "Unknown",
            country=data.get("country_name") or data.get("country") or "Unknown",
            timezone=data.get("timezone") or "Unknown",
            isp=data.get("org") or "Unknown",
            latitude=data.get("latitude"),
            longitude=data.get("longitude"),
        ))

    def _query_ip_api(self, ip: str) -> ProviderResult:
        provider = "ip-api.com"
        try:
            data = self._get_json(IP_API_URL.format(ip=ip), params={"fields": IP_API_FIELDS})
        except (requests.RequestException, ValueError) as exc:
            return ProviderResult(provider, error=str(exc))
        if data.get("status") != "success":
            return ProviderResult(provider, error=data.get("message") or "status not success")
        return ProviderResult(provider, GeoLocation(
            ip=ip,
            city=data.get("city") or "Unknown",
            region=data.get("regionName") or "Unknown",
            country=data.get("country") or "Unknown",
            timezone=data.get("timezone") or "Unknown",
            isp=data.get("isp") or "Unknown",
            latitude=data.get("lat"),
            longitude=data.get("lon"),
        ))

    def locate(self, ip: Optional[str]) -> GeoLocation:
        """Resolve ``ip`` to a location; never raises."""
        if is_local_ip(ip):
            return GeoLocation.local(ip)
        if not self.enabled or not _is_valid_ip(ip):
            return GeoLocation.unknown(ip)

        for name, query in self.providers:
            result = query(ip)
            if result.ok:
                logger.debug("Resolved %s via %s -> %s, %s",
                             ip, name, result.location.city, result.location.country)
                return result.location
            logger.warning("Geolocation provider %s unavailable for %s: %s", name, ip, result.error)
        return GeoLocation.unknown(ip)
