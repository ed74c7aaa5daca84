"""Header defaults and ordering for browser emulation."""

from __future__ import annotations

from typing import Iterable, Sequence

from .profiles import EmulationProfile

HeaderPairs = list[tuple[str, str]]


def apply_profile_headers(
    headers: Iterable[tuple[str, str]],
    profile: EmulationProfile,
) -> HeaderPairs:
    """Fill in the profile's default header set.

    Caller headers always win: a profile default is only added when no
    header of the same name (case-insensitive) is already present.
    """
    result = list(headers)
    present = {name.lower() for name, _ in result}
    for name, value in profile.get_default_headers():
        if name.lower() not in present:
            result.append((name, value))
    return result


def order_headers(
    headers: Iterable[tuple[str, str]],
    header_order: Sequence[str],
) -> HeaderPairs:
    """Order headers to match a browser's transmission order.

    Headers named in ``header_order`` come first, in that order. Everything
    else follows in its original order. Repeated names keep their relative
    order.
    """
    rank = {name.lower(): i for i, name in enumerate(header_order)}
    unranked = len(rank)
    indexed = list(enumerate(headers))
    indexed.sort(key=lambda item: (rank.get(item[1][0].lower(), unranked), item[0]))
    return [pair for _, pair in indexed]
