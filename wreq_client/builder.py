"""Turn an effective request into a transport request."""

from __future__ import annotations

import json as json_module
from urllib.parse import urlencode

import httpx

from .emulation import apply_profile_headers, order_headers
from .exceptions import ConfigurationError, InvalidURL
from .models import Body, EffectiveRequest, TransportRequest

METHODS = frozenset({"GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"})

JSON_CONTENT_TYPE = "application/json"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


def parse_url(url: str, https_only: bool = False) -> httpx.URL:
    """Parse and validate an absolute http(s) URL.

    Raises:
        InvalidURL: If the URL is malformed, relative, or not http(s).
    """
    try:
        parsed = httpx.URL(url)
    except (httpx.InvalidURL, TypeError) as e:
        raise InvalidURL(str(url)) from e

    if parsed.scheme not in ("http", "https") or not parsed.host:
        raise InvalidURL(url, "URL must be absolute http or https")
    if https_only and parsed.scheme != "https":
        raise InvalidURL(url, "https_only forbids plain http")
    return parsed


def append_query(url: httpx.URL, query: tuple[tuple[str, str], ...]) -> str:
    """Append encoded query pairs to any query the URL already has."""
    if not query:
        return str(url)
    encoded = urlencode(query)
    existing = url.query.decode("ascii")
    combined = f"{existing}&{encoded}" if existing else encoded
    return str(url.copy_with(query=combined.encode("ascii")))


def _has_header(headers: list[tuple[str, str]], name: str) -> bool:
    return any(key.lower() == name for key, _ in headers)


def encode_body(body: Body | None) -> tuple[bytes | None, str | None]:
    """Serialize a body and return it with its implied content type."""
    if body is None:
        return None, None
    if body.kind == "json":
        payload = json_module.dumps(body.value, separators=(",", ":"), ensure_ascii=False)
        return payload.encode("utf-8"), JSON_CONTENT_TYPE
    if body.kind == "form":
        return urlencode(body.value).encode("ascii"), FORM_CONTENT_TYPE
    if isinstance(body.value, str):
        return body.value.encode("utf-8"), None
    return bytes(body.value), None


def build(effective: EffectiveRequest, method: str, url: str) -> TransportRequest:
    """Build the wire-ready request.

    Args:
        effective: Merged request settings.
        method: HTTP method (case-insensitive).
        url: Absolute http(s) URL.

    Returns:
        TransportRequest ready for the transport.

    Raises:
        ConfigurationError: If the method is not supported.
        InvalidURL: If the URL cannot be used.
    """
    method = method.upper()
    if method not in METHODS:
        raise ConfigurationError(f"unsupported HTTP method: {method}")

    parsed = parse_url(url, effective.https_only)
    full_url = append_query(parsed, effective.query)

    headers = list(effective.headers)
    payload, content_type = encode_body(effective.body)
    if content_type and not _has_header(headers, "content-type"):
        headers.append(("Content-Type", content_type))
    if effective.accept_encoding and not _has_header(headers, "accept-encoding"):
        headers.append(("Accept-Encoding", effective.accept_encoding))

    profile = effective.emulation
    if profile is not None:
        headers = apply_profile_headers(headers, profile)
        headers = order_headers(headers, profile.header_order)

    return TransportRequest(
        method=method,
        url=full_url,
        headers=tuple(headers),
        body=payload,
        timeout=effective.timeout,
        redirect_limit=effective.redirect_limit,
        proxy=effective.proxy,
        emulation=profile,
        protocol=effective.protocol,
        accept_encoding=effective.accept_encoding,
        verify_cert=effective.verify_cert,
    )
