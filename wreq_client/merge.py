"""Reconcile client configuration with per-call options."""

from __future__ import annotations

import base64
from typing import Any, Iterable, Mapping

from .config import ClientConfig, ProxyConfig, Timeout, normalize_headers
from .emulation import resolve_emulation
from .exceptions import ConfigurationError, ConflictingAuth, ConflictingBody
from .models import Body, EffectiveRequest, Pairs, RequestOptions


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def normalize_pairs(values: Pairs | None) -> tuple[tuple[str, str], ...]:
    """Normalize query or form input to ordered string pairs."""
    if values is None:
        return ()
    items: Iterable[Any] = values.items() if isinstance(values, Mapping) else values
    result = []
    for item in items:
        try:
            name, value = item
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"invalid parameter entry: {item!r}") from e
        result.append((str(name), _stringify(value)))
    return tuple(result)


def merge_headers(
    base: Iterable[tuple[str, str]],
    override: Iterable[tuple[str, str]],
) -> list[tuple[str, str]]:
    """Merge header pairs. Names in ``override`` replace all base entries."""
    override = list(override)
    replaced = {name.lower() for name, _ in override}
    merged = [(name, value) for name, value in base if name.lower() not in replaced]
    merged.extend(override)
    return merged


def _find_header(headers: Iterable[tuple[str, str]], name: str) -> str | None:
    lname = name.lower()
    for key, value in headers:
        if key.lower() == lname:
            return value
    return None


def _authorization(options: RequestOptions) -> str | None:
    given = [
        name
        for name in ("auth", "bearer", "basic")
        if getattr(options, name) is not None
    ]
    if len(given) > 1:
        raise ConflictingAuth(given)

    if options.auth is not None:
        return options.auth
    if options.bearer is not None:
        return f"Bearer {options.bearer}"
    if options.basic is not None:
        if isinstance(options.basic, (str, bytes)) or len(options.basic) != 2:
            raise ConfigurationError("basic must be a (username, password) pair")
        user, password = options.basic
        token = base64.b64encode(f"{user}:{password}".encode("utf-8")).decode("ascii")
        return f"Basic {token}"
    return None


def _body(options: RequestOptions) -> Body | None:
    given = [
        name
        for name in ("body", "json", "form")
        if getattr(options, name) is not None
    ]
    if len(given) > 1:
        raise ConflictingBody(given)

    if options.body is not None:
        return Body("raw", options.body)
    if options.json is not None:
        return Body("json", options.json)
    if options.form is not None:
        return Body("form", normalize_pairs(options.form))
    return None


def merge(config: ClientConfig, options: RequestOptions | None = None) -> EffectiveRequest:
    """Combine client configuration and call options into one request.

    Per-call values win over client values. User-Agent precedence is:
    per-call header, client ``user_agent``, client default header, then the
    emulation profile's. Emulation keeps shaping TLS and HTTP/2 even when
    the User-Agent comes from elsewhere.

    Args:
        config: Client configuration.
        options: Per-call options.

    Returns:
        EffectiveRequest with headers, body, auth and transport flags resolved.

    Raises:
        ConflictingBody: If more than one body representation was given.
        ConflictingAuth: If more than one auth option was given.
        ConfigurationError: On other invalid option values.
    """
    options = options or RequestOptions()

    if options.timeout is not None and options.timeout <= 0:
        raise ConfigurationError("timeout must be > 0")

    body = _body(options)
    authorization = _authorization(options)

    request_headers = normalize_headers(options.headers)
    headers = merge_headers(config.headers, request_headers)

    # User-Agent is resolved separately and re-added below.
    explicit_ua = _find_header(request_headers, "user-agent")
    if explicit_ua is None:
        explicit_ua = config.user_agent
    if explicit_ua is None:
        explicit_ua = _find_header(config.headers, "user-agent")
    headers = [(name, value) for name, value in headers if name.lower() != "user-agent"]

    if authorization is not None:
        headers = merge_headers(headers, [("Authorization", authorization)])

    emulation = resolve_emulation(
        options.emulation if options.emulation is not None else config.emulation
    )

    user_agent = explicit_ua
    if user_agent is None and emulation is not None:
        user_agent = emulation.user_agent
    if user_agent is not None:
        headers.append(("User-Agent", user_agent))

    timeout = config.timeouts
    if options.timeout is not None:
        timeout = Timeout(total=options.timeout, connect=timeout.connect, read=timeout.read)

    proxy = config.proxy_config
    if options.proxy is not None:
        proxy = ProxyConfig(options.proxy)

    return EffectiveRequest(
        headers=tuple(headers),
        user_agent=user_agent,
        timeout=timeout,
        proxy=proxy,
        emulation=emulation,
        body=body,
        query=normalize_pairs(options.query),
        redirect_limit=config.redirect_limit,
        https_only=config.https_only,
        verify_cert=config.verify_cert,
        protocol=config.protocol,
        accept_encoding=config.accept_encoding,
    )
