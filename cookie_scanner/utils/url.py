"""
URL utilities: target validation and hostname extraction.
"""

from __future__ import annotations

import re
from urllib import parse

from cookie_scanner.utils import errors

_ALLOWED_SCHEMES = frozenset(["http", "https"])

# Characters a browser refuses in a host name.
_FORBIDDEN_HOST_CHARS = re.compile(r"[\s#%/:<>?@\[\\\]^|]")


def extract_hostname(url: str) -> str:
    """Extract the lower-cased hostname from a URL string, or ``""``."""
    try:
        return parse.urlparse(url).hostname or ""
    except ValueError:
        return ""


def validate_scan_url(url: str) -> str:
    """Check that *url* is a well-formed http(s) address.

    Args:
        url: The raw URL supplied by the caller.

    Returns:
        The normalized URL: surrounding whitespace stripped, a ``/``
        path added when the URL has none, and an international host
        converted to its punycode form as browsers store it.

    Raises:
        errors.InvalidUrl: If the URL cannot be parsed, has no host,
            has a host a browser would refuse, or uses a scheme other
            than ``http``/``https``.
    """
    candidate = url.strip() if isinstance(url, str) else ""
    if not candidate:
        raise errors.InvalidUrl(str(url), "empty")
    try:
        parsed = parse.urlsplit(candidate)
        hostname = parsed.hostname
        # Accessing .port validates the port range.
        _ = parsed.port
    except ValueError as exc:
        raise errors.InvalidUrl(candidate, str(exc)) from exc

    if parsed.scheme.lower() not in _ALLOWED_SCHEMES:
        raise errors.InvalidUrl(candidate, f"unsupported scheme {parsed.scheme or '(none)'!r}")
    if not hostname:
        raise errors.InvalidUrl(candidate, "missing host")

    netloc = parsed.netloc
    if "[" not in netloc:
        if _FORBIDDEN_HOST_CHARS.search(hostname):
            raise errors.InvalidUrl(candidate, f"forbidden character in host {hostname!r}")
        if not hostname.isascii():
            netloc = _punycode_netloc(netloc, hostname, candidate)

    path = parsed.path or "/"
    return parse.urlunsplit((parsed.scheme.lower(), netloc, path, parsed.query, parsed.fragment))


def _punycode_netloc(netloc: str, hostname: str, candidate: str) -> str:
    """Rebuild *netloc* with an IDNA-encoded host, keeping userinfo and port."""
    try:
        ascii_host = hostname.encode("idna").decode("ascii")
    except UnicodeError as exc:
        raise errors.InvalidUrl(candidate, f"invalid international host {hostname!r}") from exc

    userinfo, at, hostport = netloc.rpartition("@")
    _, colon, port = hostport.partition(":")
    return f"{userinfo}{at}{ascii_host}{colon}{port}"
