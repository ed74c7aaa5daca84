"""Browser emulation profiles and header shaping."""

from .headers import apply_profile_headers, order_headers
from .profiles import (
    DEFAULT_PROFILE,
    PROFILES,
    EmulationProfile,
    EmulationSelector,
    get_profile,
    list_profiles,
    normalize_profile_name,
    resolve_emulation,
)

__all__ = [
    "DEFAULT_PROFILE",
    "PROFILES",
    "EmulationProfile",
    "EmulationSelector",
    "apply_profile_headers",
    "get_profile",
    "list_profiles",
    "normalize_profile_name",
    "order_headers",
    "resolve_emulation",
]
