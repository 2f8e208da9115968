"""Shared fixtures for the test suite."""

from __future__ import annotations

import pytest

from cookie_scanner import config
from cookie_scanner.models import cookies

# ── Fixtures ────────────────────────────────────────────────────


@pytest.fixture()
def settings() -> config.ScannerSettings:
    """Default settings, independent of the process environment."""
    return config.ScannerSettings(
        navigation_timeout_ms=45000,
        network_idle_timeout_ms=30000,
        pre_consent_settle_ms=6000,
        post_consent_settle_ms=2000,
        consent_selectors=[],
        settle_strategy="fixed",
    )


@pytest.fixture()
def sample_record() -> cookies.CookieRecord:
    """A first-party session cookie captured before consent."""
    return cookies.CookieRecord(
        url="https://example.com/",
        stage="pre-consent",
        name="session_id",
        domain="example.com",
        path="/",
        secure=True,
        http_only=True,
        same_site="Lax",
        expires_iso="",
        first_party=True,
    )


@pytest.fixture()
def tracking_record() -> cookies.CookieRecord:
    """A third-party tracking cookie captured after consent."""
    return cookies.CookieRecord(
        url="https://example.com/",
        stage="post-consent",
        name="IDE",
        domain=".doubleclick.net",
        path="/",
        secure=True,
        http_only=True,
        same_site="None",
        expires_iso="2030-01-01T00:00:00.000Z",
        first_party=False,
    )
