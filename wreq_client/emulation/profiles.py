"""Browser emulation profiles for TLS/HTTP2 fingerprint impersonation."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Union

from ..exceptions import UnknownProfile


@dataclass(frozen=True)
class EmulationProfile:
    """Browser fingerprint profile for curl_cffi impersonation.

    Attributes:
        name: Profile identifier (e.g., "chrome_143").
        impersonate: curl_cffi impersonate target. Selects the TLS handshake
            shape, cipher ordering and HTTP/2 settings sent on the wire.
        user_agent: User-Agent header value.
        header_order: Header transmission order.
        accept: Accept header value.
        accept_language: Accept-Language header value.
        accept_encoding: Accept-Encoding header value.
        sec_ch_ua: Sec-CH-UA header value (Chromium only).
        sec_ch_ua_mobile: Sec-CH-UA-Mobile header value.
        sec_ch_ua_platform: Sec-CH-UA-Platform header value.
    """

    name: str
    impersonate: str
    user_agent: str
    header_order: tuple[str, ...]
    accept: str = "text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,image/webp,image/apng,*/*;q=0.8"
    accept_language: str = "en-US,en;q=0.9"
    accept_encoding: str = "gzip, deflate, br, zstd"
    sec_ch_ua: str = ""
    sec_ch_ua_mobile: str = "?0"
    sec_ch_ua_platform: str = ""

    def get_default_headers(self) -> list[tuple[str, str]]:
        """Get default headers for this profile, in insertion order."""
        headers = [
            ("User-Agent", self.user_agent),
            ("Accept", self.accept),
            ("Accept-Language", self.accept_language),
            ("Accept-Encoding", self.accept_encoding),
        ]

        if self.sec_ch_ua:
            headers.append(("sec-ch-ua", self.sec_ch_ua))
            headers.append(("sec-ch-ua-mobile", self.sec_ch_ua_mobile))
            headers.append(("sec-ch-ua-platform", self.sec_ch_ua_platform))

        return headers


CHROMIUM_HEADER_ORDER = (
    "Host",
    "Connection",
    "Content-Length",
    "sec-ch-ua",
    "sec-ch-ua-mobile",
    "sec-ch-ua-platform",
    "Upgrade-Insecure-Requests",
    "User-Agent",
    "Content-Type",
    "Accept",
    "Origin",
    "Sec-Fetch-Site",
    "Sec-Fetch-Mode",
    "Sec-Fetch-User",
    "Sec-Fetch-Dest",
    "Referer",
    "Accept-Encoding",
    "Accept-Language",
    "Authorization",
    "Cookie",
)

FIREFOX_HEADER_ORDER = (
    "Host",
    "User-Agent",
    "Accept",
    "Accept-Language",
    "Accept-Encoding",
    "Content-Type",
    "Content-Length",
    "Origin",
    "Authorization",
    "Connection",
    "Referer",
    "Cookie",
    "Upgrade-Insecure-Requests",
    "Sec-Fetch-Dest",
    "Sec-Fetch-Mode",
    "Sec-Fetch-Site",
    "Sec-Fetch-User",
    "Priority",
    "TE",
)

SAFARI_HEADER_ORDER = (
    "Host",
    "Content-Type",
    "Accept",
    "Sec-Fetch-Site",
    "Authorization",
    "Cookie",
    "Origin",
    "Content-Length",
    "Sec-Fetch-Dest",
    "Accept-Language",
    "Sec-Fetch-Mode",
    "User-Agent",
    "Referer",
    "Accept-Encoding",
    "Connection",
)

_WINDOWS_CHROME_UA = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/{version}.0.0.0 Safari/537.36"
)
_FIREFOX_UA = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:{version}.0) "
    "Gecko/20100101 Firefox/{version}.0"
)
_SAFARI_UA = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/{version} Safari/605.1.15"
)
_FIREFOX_ACCEPT = "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"
_SAFARI_ACCEPT = "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"


def _chrome(version: int, impersonate: str, sec_ch_ua: str) -> EmulationProfile:
    return EmulationProfile(
        name=f"chrome_{version}",
        impersonate=impersonate,
        user_agent=_WINDOWS_CHROME_UA.format(version=version),
        header_order=CHROMIUM_HEADER_ORDER,
        sec_ch_ua=sec_ch_ua,
        sec_ch_ua_platform='"Windows"',
    )


def _firefox(version: int, impersonate: str) -> EmulationProfile:
    return EmulationProfile(
        name=f"firefox_{version}",
        impersonate=impersonate,
        user_agent=_FIREFOX_UA.format(version=version),
        header_order=FIREFOX_HEADER_ORDER,
        accept=_FIREFOX_ACCEPT,
        accept_language="en-US,en;q=0.5",
    )


def _safari(version: str, impersonate: str) -> EmulationProfile:
    return EmulationProfile(
        name=f"safari_{version.replace('.', '_')}",
        impersonate=impersonate,
        user_agent=_SAFARI_UA.format(version=version),
        header_order=SAFARI_HEADER_ORDER,
        accept=_SAFARI_ACCEPT,
        accept_encoding="gzip, deflate, br",
    )


# Chrome profiles
CHROME_124 = _chrome(
    124, "chrome124", '"Chromium";v="124", "Google Chrome";v="124", "Not-A.Brand";v="99"'
)
CHROME_131 = _chrome(
    131, "chrome131", '"Google Chrome";v="131", "Chromium";v="131", "Not_A Brand";v="24"'
)
CHROME_133 = _chrome(
    133, "chrome133a", '"Not(A:Brand";v="99", "Google Chrome";v="133", "Chromium";v="133"'
)
CHROME_136 = _chrome(
    136, "chrome136", '"Chromium";v="136", "Google Chrome";v="136", "Not.A/Brand";v="99"'
)
CHROME_143 = _chrome(
    143, "chrome", '"Google Chrome";v="143", "Chromium";v="143", "Not A(Brand";v="24"'
)

# Edge profiles
EDGE_101 = EmulationProfile(
    name="edge_101",
    impersonate="edge101",
    user_agent=(
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/101.0.4951.64 Safari/537.36 Edg/101.0.1210.47"
    ),
    header_order=CHROMIUM_HEADER_ORDER,
    accept_encoding="gzip, deflate, br",
    sec_ch_ua='" Not A;Brand";v="99", "Chromium";v="101", "Microsoft Edge";v="101"',
    sec_ch_ua_platform='"Windows"',
)

# Firefox profiles
FIREFOX_133 = _firefox(133, "firefox133")
FIREFOX_135 = _firefox(135, "firefox135")
FIREFOX_146 = _firefox(146, "firefox")

# Safari profiles
SAFARI_17_0 = _safari("17.0", "safari17_0")
SAFARI_18_0 = _safari("18.0", "safari18_0")
SAFARI_18_4 = _safari("18.4", "safari18_4")
SAFARI_18_5 = _safari("18.5", "safari")


PROFILES: dict[str, EmulationProfile] = {
    p.name: p
    for p in (
        CHROME_124,
        CHROME_131,
        CHROME_133,
        CHROME_136,
        CHROME_143,
        EDGE_101,
        FIREFOX_133,
        FIREFOX_135,
        FIREFOX_146,
        SAFARI_17_0,
        SAFARI_18_0,
        SAFARI_18_4,
        SAFARI_18_5,
    )
}

DEFAULT_PROFILE = "chrome_143"

EmulationSelector = Union[str, bool, EmulationProfile, None]

_SEPARATORS = re.compile(r"[^a-z0-9]+")


def normalize_profile_name(name: str) -> str:
    """Normalize a profile name for lookup.

    Lower-cases the name and collapses separators, so "Safari-18.5",
    "safari_18.5" and "safari_18_5" all select the same profile.
    """
    return _SEPARATORS.sub("_", name.strip().lower()).strip("_")


def get_profile(name: str | None = None) -> EmulationProfile:
    """Get emulation profile by name.

    Args:
        name: Profile name. If None, returns the default profile.

    Returns:
        EmulationProfile instance.

    Raises:
        UnknownProfile: If profile name is not found.
    """
    if name is None:
        return PROFILES[DEFAULT_PROFILE]

    profile = PROFILES.get(normalize_profile_name(name))
    if profile is None:
        raise UnknownProfile(name, list_profiles())
    return profile


def resolve_emulation(selector: EmulationSelector) -> EmulationProfile | None:
    """Resolve an emulation selector to a profile.

    Args:
        selector: None or True for the default profile, False to disable
            emulation, a profile name, or an EmulationProfile instance.

    Returns:
        The selected profile, or None when emulation is disabled.

    Raises:
        UnknownProfile: If the selector names no known profile.
    """
    if selector is None or selector is True:
        return PROFILES[DEFAULT_PROFILE]
    if selector is False:
        return None
    if isinstance(selector, EmulationProfile):
        return selector
    if isinstance(selector, str):
        return get_profile(selector)
    raise UnknownProfile(selector, list_profiles())


def list_profiles() -> list[str]:
    """List available profile names."""
    return list(PROFILES.keys())
