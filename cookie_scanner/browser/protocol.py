"""
The automated-browser capability the scan pipeline depends on.

The pipeline only talks to these protocols, so it can run against the
Playwright-backed :class:`~cookie_scanner.browser.session.BrowserSession`
or against a scripted fake in tests.
"""

from __future__ import annotations

from typing import Any, Protocol


class ConsentLocator(Protocol):
    """The first element matching a consent selector.

    Playwright's ``Locator`` satisfies this protocol.
    """

    async def is_visible(self) -> bool: ...

    async def click(self, *, timeout: float | None = None) -> None: ...


class ScanSession(Protocol):
    """One isolated browser session (driver, browser, context, page)."""

    async def launch(self) -> None:
        """Start the browser and open a fresh context and page."""
        ...

    async def navigate(self, url: str, timeout_ms: int) -> None:
        """Navigate until ``domcontentloaded`` or raise ``NavigationTimeout``."""
        ...

    async def wait_for_network_idle(self, timeout_ms: int) -> bool:
        """Wait for network quiescence; ``False`` on timeout."""
        ...

    async def wait_for_timeout(self, ms: int) -> None: ...

    async def cookies(self) -> list[dict[str, Any]]:
        """Return every cookie in the context's jar."""
        ...

    def locate_first(self, selector: str, text: str | None = None) -> ConsentLocator: ...

    async def close(self) -> None:
        """Release every browser resource; safe to call more than once."""
        ...
