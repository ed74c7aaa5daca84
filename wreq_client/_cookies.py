"""Per-client cookie jar shared with the engine session."""

from __future__ import annotations

import threading
from http.cookiejar import Cookie, CookieJar

import httpx


def make_cookie(
    name: str,
    value: str,
    domain: str,
    path: str = "/",
    secure: bool = False,
    expires: int | None = None,
) -> Cookie:
    """Build a cookiejar Cookie. A leading dot on domain also matches subdomains."""
    return Cookie(
        version=0,
        name=name,
        value=value,
        port=None,
        port_specified=False,
        domain=domain,
        domain_specified=domain.startswith("."),
        domain_initial_dot=domain.startswith("."),
        path=path,
        path_specified=True,
        secure=secure,
        expires=expires,
        discard=expires is None,
        comment=None,
        comment_url=None,
        rest={},
    )


def _domain_key(domain: str) -> str:
    return domain.lower().lstrip(".")


def _matches_domain(cookie: Cookie, host: str) -> bool:
    domain = cookie.domain.lower()
    if domain.startswith("."):
        return host == domain[1:] or host.endswith(domain)
    return host == domain


def _matches_path(cookie: Cookie, path: str) -> bool:
    if cookie.path in ("", "/"):
        return True
    return path == cookie.path or path.startswith(cookie.path.rstrip("/") + "/")


class CookieStore:
    """Cookie storage shared by every request of one client.

    Wraps the ``http.cookiejar.CookieJar`` that the curl session reads and
    updates, so cookies set on redirect hops, Domain/Path scoping and
    expiry-based deletion follow the engine's cookie rules. Access through
    this class is guarded by a threading.Lock.
    """

    def __init__(self, jar: CookieJar | None = None):
        self._jar = jar if jar is not None else CookieJar()
        self._lock = threading.Lock()

    @property
    def jar(self) -> CookieJar:
        """The underlying cookie jar."""
        return self._jar

    def bind(self, jar: CookieJar) -> None:
        """Adopt ``jar`` as the backing jar, carrying over stored cookies."""
        with self._lock:
            if jar is self._jar:
                return
            for cookie in list(self._jar):
                jar.set_cookie(cookie)
            self._jar = jar

    def _live(self) -> list[Cookie]:
        return [cookie for cookie in list(self._jar) if not cookie.is_expired()]

    def set(
        self,
        name: str,
        value: str,
        domain: str,
        path: str = "/",
        secure: bool = False,
    ) -> None:
        """Set a cookie.

        Args:
            name: Cookie name.
            value: Cookie value.
            domain: Cookie domain. ".example.com" also matches subdomains.
            path: Cookie path.
            secure: HTTPS-only flag.
        """
        cookie = make_cookie(name, value, domain, path=path, secure=secure)
        with self._lock:
            self._jar.set_cookie(cookie)

    def get_for_url(self, url: str) -> dict[str, str]:
        """Get cookies a request to ``url`` would carry.

        Args:
            url: The request URL.

        Returns:
            Dict of cookie name to value.
        """
        parsed = httpx.URL(url)
        host = parsed.host.lower()
        path = parsed.path or "/"
        is_secure = parsed.scheme == "https"

        result: dict[str, str] = {}
        with self._lock:
            for cookie in self._live():
                if not _matches_domain(cookie, host):
                    continue
                if not _matches_path(cookie, path):
                    continue
                if cookie.secure and not is_secure:
                    continue
                result[cookie.name] = cookie.value or ""
        return result

    def clear_expired(self) -> None:
        """Drop cookies whose expiry has passed (Max-Age=0 deletions included)."""
        with self._lock:
            self._jar.clear_expired_cookies()

    def delete(self, name: str, domain: str) -> bool:
        """Delete a specific cookie.

        Returns:
            True if cookie was deleted, False if not found.
        """
        key = _domain_key(domain)
        with self._lock:
            matches = [
                c for c in list(self._jar) if c.name == name and _domain_key(c.domain) == key
            ]
            for cookie in matches:
                self._jar.clear(cookie.domain, cookie.path, cookie.name)
            return bool(matches)

    def clear_domain(self, domain: str) -> None:
        """Clear all cookies for a domain."""
        key = _domain_key(domain)
        with self._lock:
            domains = {c.domain for c in list(self._jar) if _domain_key(c.domain) == key}
            for cookie_domain in domains:
                self._jar.clear(cookie_domain)

    def clear_all(self) -> None:
        """Clear all cookies."""
        with self._lock:
            self._jar.clear()

    def get_all(self) -> dict[str, dict[str, str]]:
        """Get all live cookies organized by domain."""
        result: dict[str, dict[str, str]] = {}
        with self._lock:
            for cookie in self._live():
                result.setdefault(_domain_key(cookie.domain), {})[cookie.name] = cookie.value or ""
        return result

    def __len__(self) -> int:
        """Return total number of live cookies."""
        with self._lock:
            return len(self._live())
