"""
Consent resolver: find and click an "accept all" control.

Matchers are tried strictly in priority order.  The first matcher
whose element is visible ends the search; the click on it is
best-effort, so a control hidden behind an overlay still counts as
found.  Nothing in here is allowed to fail the scan.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence

from cookie_scanner import config
from cookie_scanner.browser import protocol
from cookie_scanner.consent import matchers as matchers_mod
from cookie_scanner.utils import errors, logger

log = logger.create_logger("Consent")


class ConsentResolver:
    """Tries an ordered list of :class:`ConsentMatcher` on a page."""

    def __init__(
        self,
        matchers: Sequence[matchers_mod.ConsentMatcher] = matchers_mod.DEFAULT_CONSENT_MATCHERS,
        *,
        visibility_timeout_ms: int = 500,
        click_timeout_ms: int = 2000,
        post_click_delay_ms: int = 1500,
    ) -> None:
        self.matchers = tuple(matchers)
        self.visibility_timeout_ms = visibility_timeout_ms
        self.click_timeout_ms = click_timeout_ms
        self.post_click_delay_ms = post_click_delay_ms

    @classmethod
    def from_settings(cls, settings: config.ScannerSettings) -> ConsentResolver:
        """Build a resolver from settings, honouring ``CONSENT_SELECTORS``."""
        custom = matchers_mod.matchers_from_selectors(settings.consent_selectors)
        return cls(
            custom or matchers_mod.DEFAULT_CONSENT_MATCHERS,
            visibility_timeout_ms=settings.consent_visibility_timeout_ms,
            click_timeout_ms=settings.consent_click_timeout_ms,
            post_click_delay_ms=settings.consent_post_click_delay_ms,
        )

    async def _is_visible(self, locator: protocol.ConsentLocator) -> bool:
        async with asyncio.timeout(self.visibility_timeout_ms / 1000):
            return await locator.is_visible()

    async def try_accept(self, session: protocol.ScanSession) -> bool:
        """Activate the first visible consent control.

        Returns:
            ``True`` if a matcher found a visible element (whether or
            not the click went through), ``False`` if none did.
        """
        for matcher in self.matchers:
            try:
                locator = session.locate_first(matcher.selector, matcher.text)
                if not await self._is_visible(locator):
                    continue
            except Exception as exc:
                log.debug("Consent matcher skipped", {"matcher": matcher.name, "error": errors.get_error_message(exc)})
                continue

            log.info("Consent control found", {"matcher": matcher.name, "selector": matcher.describe()})
            try:
                await locator.click(timeout=self.click_timeout_ms)
                log.success("Consent control clicked", {"matcher": matcher.name})
            except Exception as exc:
                log.warn("Consent click failed", {"matcher": matcher.name, "error": errors.get_error_message(exc)})

            try:
                await session.wait_for_timeout(self.post_click_delay_ms)
            except Exception as exc:
                log.debug("Post-click delay interrupted", {"error": errors.get_error_message(exc)})
            return True

        log.info("No consent control found", {"matchersTried": len(self.matchers)})
        return False
