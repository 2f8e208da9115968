"""
Playwright browser session for a single scan.

Each BrowserSession owns its own Playwright driver, browser process,
context and page, so concurrent scans never share a cookie jar.
"""

from __future__ import annotations

import asyncio
from typing import Any

from playwright import async_api

from cookie_scanner import config
from cookie_scanner.utils import errors, logger

log = logger.create_logger("BrowserSession")


class BrowserSession:
    """
    Manages an isolated browser session for a single cookie scan.
    """

    def __init__(self, settings: config.ScannerSettings | None = None) -> None:
        self._settings = settings or config.get_settings()
        self._playwright: async_api.Playwright | None = None
        self._browser: async_api.Browser | None = None
        self._context: async_api.BrowserContext | None = None
        self._page: async_api.Page | None = None

    # ==========================================================================
    # Helpers
    # ==========================================================================

    def _require_page(self) -> async_api.Page:
        if not self._page:
            raise RuntimeError("No browser session active")
        return self._page

    # ==========================================================================
    # Browser Lifecycle
    # ==========================================================================

    async def launch(self) -> None:
        """Launch headless Chromium with a fresh context and page.

        Raises:
            errors.BrowserLaunchFailure: If the driver, browser,
                context or page could not be created.  Anything that
                was already started is torn down first.
        """
        settings = self._settings
        log.debug("Launching browser", {"headless": settings.headless})
        try:
            self._playwright = await async_api.async_playwright().start()
            self._browser = await self._playwright.chromium.launch(
                headless=settings.headless,
                args=list(config.BROWSER_LAUNCH_ARGS),
            )
            self._context = await self._browser.new_context(
                viewport={"width": settings.viewport_width, "height": settings.viewport_height},
            )
            self._page = await self._context.new_page()
        except Exception as exc:
            log.error("Browser launch failed", {"error": errors.get_error_message(exc)})
            await self.close()
            raise errors.BrowserLaunchFailure("Could not launch browser", exc) from exc

        log.debug(
            "Browser launched",
            {"viewport": f"{settings.viewport_width}x{settings.viewport_height}"},
        )

    # ==========================================================================
    # Navigation
    # ==========================================================================

    async def navigate(self, url: str, timeout_ms: int) -> None:
        """Navigate to *url* and wait for ``domcontentloaded``.

        Raises:
            errors.NavigationTimeout: If the DOM was not ready in time.
            errors.ScanFailure: For any other navigation error (DNS,
                TLS, connection refused...).
        """
        page = self._require_page()
        log.debug("Navigating", {"url": url, "timeout": timeout_ms})
        try:
            response = await page.goto(url, wait_until="domcontentloaded", timeout=timeout_ms)
        except async_api.TimeoutError as exc:
            raise errors.NavigationTimeout(f"Navigation to {url} exceeded {timeout_ms}ms", exc) from exc
        except async_api.Error as exc:
            raise errors.ScanFailure(f"Navigation to {url} failed", exc) from exc

        if response is not None:
            log.debug("Navigation response", {"status": response.status})
        if page.url != url:
            log.info("Redirected", {"from": url, "to": page.url})

    async def wait_for_network_idle(self, timeout_ms: int) -> bool:
        """Wait for the network to become idle."""
        if not self._page:
            return False
        try:
            await self._page.wait_for_load_state("networkidle", timeout=timeout_ms)
            return True
        except Exception:
            log.debug("Network idle timeout", {"timeoutMs": timeout_ms})
            return False

    async def wait_for_timeout(self, ms: int) -> None:
        """Wait for a specified number of milliseconds.

        Uses ``asyncio.sleep`` instead of Playwright's
        ``page.wait_for_timeout`` which is intended only
        for debugging and should not be used in production.
        """
        await asyncio.sleep(ms / 1000)

    # ==========================================================================
    # Data Capture
    # ==========================================================================

    async def cookies(self) -> list[dict[str, Any]]:
        """Return all cookies from the current browser context."""
        if not self._context:
            raise RuntimeError("No browser session active")
        raw = await self._context.cookies()
        log.debug("Read raw cookies from browser", {"count": len(raw)})
        return [dict(cookie) for cookie in raw]

    def locate_first(self, selector: str, text: str | None = None) -> async_api.Locator:
        """Return the first element matching *selector* (and *text*)."""
        locator = self._require_page().locator(selector)
        if text:
            locator = locator.filter(has_text=text)
        return locator.first

    # ==========================================================================
    # Cleanup
    # ==========================================================================

    async def close(self) -> None:
        """Close the browser and clean up all resources."""
        log.debug("Closing browser session")
        self._page = None

        if self._context:
            try:
                await self._context.close()
            except Exception as exc:
                log.debug("Context close error (non-fatal)", {"error": str(exc)})
            self._context = None

        if self._browser:
            try:
                await self._browser.close()
            except Exception as exc:
                log.debug("Browser close error (non-fatal)", {"error": str(exc)})
            self._browser = None

        if self._playwright:
            try:
                await self._playwright.stop()
            except Exception as exc:
                log.debug("Playwright stop error (non-fatal)", {"error": str(exc)})
            self._playwright = None

        log.debug("Browser session closed")
