"""
Cookie snapshots: read the browser's cookie jar and normalize it.

A snapshot covers every cookie visible to the browsing context, not
just those scoped to the scanned origin, so third-party cookies set by
embedded tags show up alongside first-party ones.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

from cookie_scanner.browser import protocol
from cookie_scanner.models import cookies
from cookie_scanner.utils import logger
from cookie_scanner.utils import url as url_mod

log = logger.create_logger("Snapshot")


def normalize_domain(domain: str | None) -> str:
    """Strip a single leading dot and lower-case *domain*."""
    if not domain:
        return ""
    return domain.removeprefix(".").lower()


def is_first_party(domain: str | None, host: str) -> bool:
    """Return ``True`` if a cookie on *domain* belongs to *host*.

    A cookie is first-party when it has no domain attribute, when its
    domain is the host itself, or when it is an ancestor domain of the
    host (``.example.com`` for ``www.example.com``).
    """
    normalized = normalize_domain(domain)
    if not normalized:
        return True
    host = host.lower()
    return host == normalized or host.endswith(f".{normalized}")


def to_iso(expires: Any) -> str:
    """Convert an epoch-seconds expiry to an ISO-8601 UTC string.

    Session cookies (``-1``), missing or zero expiries and values that
    cannot be converted all map to ``""``.
    """
    if not expires:
        return ""
    try:
        if expires < 0:
            return ""
        moment = datetime.fromtimestamp(expires, tz=UTC)
    except (TypeError, ValueError, OverflowError, OSError):
        return ""
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def to_record(raw: Mapping[str, Any], url: str, host: str, stage: cookies.CookieStage) -> cookies.CookieRecord:
    """Build a :class:`CookieRecord` from one raw Playwright cookie dict."""
    domain = raw.get("domain") or ""
    return cookies.CookieRecord(
        url=url,
        stage=stage,
        name=raw.get("name") or "",
        domain=domain,
        path=raw.get("path") or "",
        secure=bool(raw.get("secure")),
        http_only=bool(raw.get("httpOnly")),
        same_site=raw.get("sameSite") or "",
        expires_iso=to_iso(raw.get("expires")),
        first_party=is_first_party(domain, host),
    )


async def capture(
    session: protocol.ScanSession,
    url: str,
    stage: cookies.CookieStage,
) -> list[cookies.CookieRecord]:
    """Capture the session's cookie jar as records tagged with *stage*."""
    raw_cookies = await session.cookies()
    host = url_mod.extract_hostname(url)
    records = [to_record(raw, url, host, stage) for raw in raw_cookies]

    first_party = sum(1 for r in records if r.first_party)
    log.info(
        "Captured cookies",
        {"stage": stage, "total": len(records), "firstParty": first_party, "thirdParty": len(records) - first_party},
    )
    return records
