"""Tests for cookie_scanner.pipeline.settle — settle policies."""

from __future__ import annotations

import pytest

from cookie_scanner import config
from cookie_scanner.pipeline import settle
from tests.fakes import FakeSession, raw_cookie


class TestFixedSettle:
    @pytest.mark.asyncio
    async def test_waits_full_window(self) -> None:
        session = FakeSession()
        await settle.FixedSettle().settle(session, 6000)
        assert session.waits == [6000]

    @pytest.mark.asyncio
    async def test_zero_window_does_not_wait(self) -> None:
        session = FakeSession()
        await settle.FixedSettle().settle(session, 0)
        assert session.waits == []


class TestCookieStabilitySettle:
    @pytest.mark.asyncio
    async def test_stops_once_jar_is_stable(self) -> None:
        session = FakeSession([[raw_cookie("a")]])
        policy = settle.CookieStabilitySettle(poll_interval_ms=500, stable_window_ms=1000)

        await policy.settle(session, 6000)

        assert session.waits == [500, 500]

    @pytest.mark.asyncio
    async def test_changes_reset_the_window(self) -> None:
        jars = [[], [raw_cookie("a")], [raw_cookie("a")], [raw_cookie("a"), raw_cookie("b")], [raw_cookie("a"), raw_cookie("b")]]
        session = FakeSession(jars)
        policy = settle.CookieStabilitySettle(poll_interval_ms=500, stable_window_ms=1000)

        await policy.settle(session, 6000)

        # a appears, stable 500, b appears, then stable for 1000.
        assert session.waits == [500, 500, 500, 500, 500]

    @pytest.mark.asyncio
    async def test_never_exceeds_max(self) -> None:
        jars = [[raw_cookie(str(i))] for i in range(50)]
        session = FakeSession(jars)
        policy = settle.CookieStabilitySettle(poll_interval_ms=400, stable_window_ms=1000)

        await policy.settle(session, 1000)

        assert sum(session.waits) == 1000
        assert session.waits == [400, 400, 200]

    @pytest.mark.asyncio
    async def test_zero_window_returns_immediately(self) -> None:
        session = FakeSession()
        await settle.CookieStabilitySettle().settle(session, 0)
        assert session.events == []


class TestFromSettings:
    def test_fixed_is_default(self, settings: config.ScannerSettings) -> None:
        assert isinstance(settle.from_settings(settings), settle.FixedSettle)

    def test_cookie_stability(self, settings: config.ScannerSettings) -> None:
        chosen = settle.from_settings(
            settings.model_copy(
                update={"settle_strategy": "cookie-stability", "settle_poll_interval_ms": 250, "settle_stable_window_ms": 750}
            )
        )
        assert isinstance(chosen, settle.CookieStabilitySettle)
        assert chosen.poll_interval_ms == 250
        assert chosen.stable_window_ms == 750
