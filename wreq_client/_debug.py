"""Helpers for debug log records."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import TransportRequest, TransportResponse


def mask_proxy_password(proxy_url: str) -> str:
    """Mask password in proxy URL for display.

    Args:
        proxy_url: Proxy URL that may contain credentials.

    Returns:
        URL with password masked.
    """
    if "@" not in proxy_url:
        return proxy_url

    if "://" in proxy_url:
        protocol, rest = proxy_url.split("://", 1)
    else:
        protocol, rest = "", proxy_url

    if "@" in rest:
        creds, host = rest.rsplit("@", 1)
        if ":" in creds:
            user, _ = creds.split(":", 1)
            creds = f"{user}:****"
        rest = f"{creds}@{host}"

    if protocol:
        return f"{protocol}://{rest}"
    return rest


def describe_request(request: TransportRequest) -> str:
    """One-line summary of an outgoing request."""
    parts = [request.method, request.url]
    if request.impersonate:
        parts.append(f"emulation={request.emulation.name}")
    if request.protocol != "any":
        parts.append(f"protocol={request.protocol}")
    if request.proxy is not None:
        parts.append(f"proxy={mask_proxy_password(request.proxy.url)}")
    if request.body is not None:
        parts.append(f"body={len(request.body)}B")
    return " ".join(parts)


def describe_response(request: TransportRequest, response: TransportResponse) -> str:
    """One-line summary of a completed exchange."""
    summary = (
        f"{request.method} {request.url} -> {response.status} {response.version} "
        f"{len(response.body)}B [{response.elapsed:.3f}s]"
    )
    if response.url != request.url:
        summary += f" final={response.url}"
    return summary
