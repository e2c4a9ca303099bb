"""
Tests for user-agent classification and IP geolocation.
"""

from unittest.mock import MagicMock

import pytest
import requests

from visitor_log.geo_locator import GeoLocation, GeoLocator, ProviderResult, is_local_ip
from visitor_log.user_agent import classify_user_agent

CHROME_WINDOWS = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
EDGE_WINDOWS = CHROME_WINDOWS + " Edg/120.0.0.0"
OPERA_MAC = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36 OPR/106.0.0.0"
)
SAFARI_IPHONE = (
    "Mozilla/5.0 (iPhone; CPU iPhone OS 17_0 like Mac OS X) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/17.0 Mobile/15E148 Safari/604.1"
)
CHROME_ANDROID = (
    "Mozilla/5.0 (Linux; Android 14; Pixel 8) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Mobile Safari/537.36"
)
SAFARI_IPAD = (
    "Mozilla/5.0 (iPad; CPU OS 17_0 like Mac OS X) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/17.0 Mobile/15E148 Safari/604.1"
)
FIREFOX_LINUX = "Mozilla/5.0 (X11; Linux x86_64; rv:120.0) Gecko/20100101 Firefox/120.0"


class TestUserAgentClassifier:
    """Test user-agent classification."""

    @pytest.mark.parametrize("ua, browser, os_name, device", [
        (CHROME_WINDOWS, "Chrome", "Windows 10/11", "Desktop"),
        (EDGE_WINDOWS, "Edge", "Windows 10/11", "Desktop"),
        (OPERA_MAC, "Opera", "macOS", "Desktop"),
        (SAFARI_IPHONE, "Safari", "iOS", "Mobile"),
        (CHROME_ANDROID, "Chrome", "Android", "Mobile"),
        (FIREFOX_LINUX, "Firefox", "Linux", "Desktop"),
        ("Mozilla/5.0 (Windows NT 6.1) Gecko Firefox/50.0", "Firefox", "Windows", "Desktop"),
        (SAFARI_IPAD, "Safari", "iOS", "Tablet"),
    ])
    def test_classification(self, ua, browser, os_name, device):
        info = classify_user_agent(ua)
        assert (info.browser, info.os, info.device_type) == (browser, os_name, device)

    def test_missing_user_agent(self):
        info = classify_user_agent(None)
        assert info.browser == "Unknown"
        assert info.os == "Unknown"
        assert info.device_type == "Desktop"

    @pytest.mark.parametrize("ua", [123, ["Chrome"], {"ua": "x"}, ""])
    def test_non_string_user_agent(self, ua):
        info = classify_user_agent(ua)
        assert (info.browser, info.os, info.device_type) == ("Unknown", "Unknown", "Desktop")


def make_response(payload):
    resp = MagicMock()
    resp.json.return_value = payload
    return resp


class TestGeoLocator:
    """Test the provider fallback chain."""

    @pytest.fixture
    def session(self):
        session = MagicMock()
        session.headers = {}
        return session

    @pytest.mark.parametrize("ip, expected", [
        (None, True),
        ("", True),
        ("127.0.0.1", True),
        ("::1", True),
        ("10.1.2.3", True),
        ("172.16.0.5", True),
        ("192.168.1.10", True),
        ("fe80::1", True),
        ("8.8.8.8", False),
        ("Unknown", False),
    ])
    def test_is_local_ip(self, ip, expected):
        assert is_local_ip(ip) is expected

    def test_local_ip_short_circuits(self, session):
        locator = GeoLocator(session=session)

        location = locator.locate("192.168.1.10")

        assert location == GeoLocation.local("192.168.1.10")
        session.get.assert_not_called()

    def test_primary_provider(self, session):
        session.get.return_value = make_response({
            "city": "Mountain View", "region": "California", "country_name": "United States",
            "timezone": "America/Los_Angeles", "org": "Google LLC",
            "latitude": 37.4, "longitude": -122.1,
        })
        locator = GeoLocator(session=session)

        location = locator.locate("8.8.8.8")

        assert location.city == "Mountain View"
        assert location.country == "United States"
        assert location.isp == "Google LLC"
        assert location.latitude == 37.4
        assert session.get.call_count == 1
        assert session.headers["User-Agent"] == "visitor-tracker/1.0"

    def test_falls_back_to_second_provider(self, session):
        session.get.side_effect = [
            make_response({"error": True, "reason": "RateLimited"}),
            make_response({
                "status": "success", "city": "Sydney", "regionName": "NSW",
                "country": "Australia", "timezone": "Australia/Sydney",
                "isp": "Cloudflare", "lat": -33.8, "lon": 151.2,
            }),
        ]
        locator = GeoLocator(session=session)

        location = locator.locate("1.1.1.1")

        assert location.city == "Sydney"
        assert location.region == "NSW"
        assert location.isp == "Cloudflare"
        assert location.longitude == 151.2
        assert session.get.call_count == 2

    def test_all_providers_fail(self, session):
        session.get.side_effect = requests.ConnectionError("offline")
        locator = GeoLocator(session=session)

        location = locator.locate("8.8.8.8")

        assert location == GeoLocation.unknown("8.8.8.8")

    def test_bad_json_is_unavailable(self, session):
        resp = MagicMock()
        resp.json.side_effect = ValueError("not json")
        session.get.return_value = resp
        locator = GeoLocator(session=session)

        result = locator._query_ipapi("8.8.8.8")

        assert isinstance(result, ProviderResult)
        assert result.ok is False
        assert result.provider == "ipapi.co"

    def test_ip_api_failure_status(self, session):
        session.get.return_value = make_response({"status": "fail", "message": "reserved range"})
        locator = GeoLocator(session=session)

        result = locator._query_ip_api("8.8.8.8")

        assert result.ok is False
        assert result.error == "reserved range"

    def test_disabled_locator(self, session):
        locator = GeoLocator(session=session, enabled=False)

        assert locator.locate("8.8.8.8") == GeoLocation.unknown("8.8.8.8")
        session.get.assert_not_called()

    def test_unparseable_ip_skips_providers(self, session):
        locator = GeoLocator(session=session)

        assert locator.locate("Unknown").city == "Unknown"
        session.get.assert_not_called()
