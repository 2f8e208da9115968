"""Consent diff: cookies that only appear after consent was given."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from cookie_scanner.models import cookies

IdentityKey = tuple[str, str, str]


def identity_key(record: cookies.CookieRecord) -> IdentityKey:
    """Return the ``(name, domain, path)`` identity of *record*."""
    return (record.name, record.domain, record.path)


def added_after_consent(
    pre: Iterable[cookies.CookieRecord],
    post: Sequence[cookies.CookieRecord],
) -> list[cookies.CookieRecord]:
    """Return the *post* records whose identity is absent from *pre*.

    Order follows *post*.  A cookie present in both snapshots is never
    reported, even if its value, flags or expiry changed.
    """
    seen = {identity_key(record) for record in pre}
    return [
        record.model_copy(update={"stage": cookies.ADDED_AFTER_CONSENT})
        for record in post
        if identity_key(record) not in seen
    ]
