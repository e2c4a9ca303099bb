"""
User-agent classification on top of the ``user_agents`` parser.

The parser reports detailed families ("Chrome Mobile", "Mobile Safari",
"Edge Mobile", ...); they are folded into the short labels the stats views
group by.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from user_agents import parse

# Checked in order against the parser's browser family
BROWSER_LABELS: Tuple[Tuple[str, str], ...] = (
    ("Edge", "Edge"),
    ("Opera", "Opera"),
    ("Firefox", "Firefox"),
    ("Chrome", "Chrome"),
    ("Safari", "Safari"),
)

OS_LABELS = {
    "Mac OS X": "macOS",
    "iOS": "iOS",
    "Android": "Android",
    "Linux": "Linux",
}


@dataclass(frozen=True)
class UserAgentInfo:
    browser: str = "Unknown"
    os: str = "Unknown"
    device_type: str = "Desktop"


def _browser_label(family: str) -> str:
    for marker, label in BROWSER_LABELS:
        if marker in family:
            return label
    return "Unknown" if family in ("", "Other") else family


def _os_label(family: str, version: tuple) -> str:
    if family.startswith("Windows"):
        if family in ("Windows 10", "Windows 11") or (version and version[0] in (10, 11)):
            return "Windows 10/11"
        return "Windows"
    if family in ("", "Other"):
        return "Unknown"
    return OS_LABELS.get(family, family)


def classify_user_agent(user_agent: Optional[str]) -> UserAgentInfo:
    """Map a raw user-agent string to browser, OS and device type.

    Anything that is not a string classifies like a missing user agent.
    """
    ua = parse(user_agent if isinstance(user_agent, str) else "")
    if ua.is_tablet:
        device_type = "Tablet"
    elif ua.is_mobile:
        device_type = "Mobile"
    else:
        device_type = "Desktop"
    return UserAgentInfo(
        browser=_browser_label(ua.browser.family or ""),
        os=_os_label(ua.os.family or "", tuple(ua.os.version or ())),
        device_type=device_type,
    )
