"""
Settle policies: how long to let page scripts run before a snapshot.

``FixedSettle`` is the default and simply waits the full window.
``CookieStabilitySettle`` polls the cookie jar and returns as soon as
the set of cookie identities has stopped changing, bounded by the same
window.
"""

from __future__ import annotations

import time
from typing import Protocol

from cookie_scanner import config
from cookie_scanner.browser import protocol
from cookie_scanner.utils import logger

log = logger.create_logger("Settle")


class SettlePolicy(Protocol):
    async def settle(self, session: protocol.ScanSession, max_ms: int) -> None: ...


class FixedSettle:
    """Wait exactly ``max_ms``."""

    async def settle(self, session: protocol.ScanSession, max_ms: int) -> None:
        if max_ms > 0:
            await session.wait_for_timeout(max_ms)


class CookieStabilitySettle:
    """Wait until the cookie jar is unchanged for a sliding window.

    Args:
        poll_interval_ms: Delay between two reads of the jar.
        stable_window_ms: How long the identity set must stay the same.
    """

    def __init__(self, poll_interval_ms: int = 500, stable_window_ms: int = 1500) -> None:
        self.poll_interval_ms = poll_interval_ms
        self.stable_window_ms = stable_window_ms

    @staticmethod
    async def _jar_keys(session: protocol.ScanSession) -> frozenset[tuple[str, str, str]]:
        raw = await session.cookies()
        return frozenset((c.get("name", ""), c.get("domain", ""), c.get("path", "")) for c in raw)

    async def settle(self, session: protocol.ScanSession, max_ms: int) -> None:
        if max_ms <= 0:
            return
        waited = 0
        stable_for = 0
        keys = await self._jar_keys(session)
        # Elapsed time is counted in poll steps so the bound does not
        # depend on how long each cookie read takes.
        started = time.monotonic()
        while waited < max_ms:
            step = min(self.poll_interval_ms, max_ms - waited)
            await session.wait_for_timeout(step)
            waited += step
            current = await self._jar_keys(session)
            if current == keys:
                stable_for += step
                if stable_for >= self.stable_window_ms:
                    break
            else:
                keys = current
                stable_for = 0
        log.debug(
            "Cookie jar settled",
            {"waitedMs": waited, "stableForMs": stable_for, "wallMs": int((time.monotonic() - started) * 1000)},
        )


def from_settings(settings: config.ScannerSettings) -> SettlePolicy:
    """Return the settle policy selected by ``SETTLE_STRATEGY``."""
    if settings.settle_strategy == "cookie-stability":
        return CookieStabilitySettle(settings.settle_poll_interval_ms, settings.settle_stable_window_ms)
    return FixedSettle()
