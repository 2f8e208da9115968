"""
Scanner configuration.

Centralises the environment variable names and default values for the
scan pipeline, the browser and the HTTP server.

Uses ``pydantic_settings.BaseSettings`` for automatic environment
variable binding, type coercion, and validation.  The defaults
reproduce the timing policy the scanner has always used: a 45 s
navigation budget, a 6 s settle window before the pre-consent
snapshot and 2 s after consent.
"""

from __future__ import annotations

import functools
import pathlib
from typing import Literal

import pydantic
import pydantic_settings

SettleStrategy = Literal["fixed", "cookie-stability"]

_DEFAULT_PUBLIC_DIR = pathlib.Path(__file__).resolve().parent.parent / "public"

# Flags passed to Chromium so it runs inside containers.
BROWSER_LAUNCH_ARGS: tuple[str, ...] = (
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
)


class ScannerSettings(pydantic_settings.BaseSettings):
    """Settings for the scan pipeline, browser and server.

    All durations are in milliseconds.

    Attributes:
        navigation_timeout_ms: Budget for reaching ``domcontentloaded``.
        network_idle_timeout_ms: Bound for each best-effort idle wait.
        pre_consent_settle_ms: Settle window before the first snapshot.
        post_consent_settle_ms: Settle window before the second snapshot.
        consent_visibility_timeout_ms: Budget per matcher visibility check.
        consent_click_timeout_ms: Budget for clicking a matched control.
        consent_post_click_delay_ms: Pause after a consent control matched.
        consent_selectors: Replaces the built-in matcher list when set.
        settle_strategy: ``fixed`` waits or ``cookie-stability`` polling.
    """

    model_config = pydantic_settings.SettingsConfigDict(populate_by_name=True)

    navigation_timeout_ms: int = pydantic.Field(default=45000, gt=0, validation_alias="NAV_TIMEOUT_MS")
    network_idle_timeout_ms: int = pydantic.Field(default=30000, ge=0, validation_alias="NETWORK_IDLE_TIMEOUT_MS")
    pre_consent_settle_ms: int = pydantic.Field(default=6000, ge=0, validation_alias="PRE_CONSENT_WAIT_MS")
    post_consent_settle_ms: int = pydantic.Field(default=2000, ge=0, validation_alias="POST_CONSENT_WAIT_MS")

    consent_visibility_timeout_ms: int = pydantic.Field(
        default=500, gt=0, validation_alias="CONSENT_VISIBILITY_TIMEOUT_MS"
    )
    consent_click_timeout_ms: int = pydantic.Field(default=2000, gt=0, validation_alias="CONSENT_CLICK_TIMEOUT_MS")
    consent_post_click_delay_ms: int = pydantic.Field(
        default=1500, ge=0, validation_alias="CONSENT_POST_CLICK_DELAY_MS"
    )
    consent_selectors: list[str] = pydantic.Field(default_factory=list, validation_alias="CONSENT_SELECTORS")

    settle_strategy: SettleStrategy = pydantic.Field(default="fixed", validation_alias="SETTLE_STRATEGY")
    settle_poll_interval_ms: int = pydantic.Field(default=500, gt=0, validation_alias="SETTLE_POLL_INTERVAL_MS")
    settle_stable_window_ms: int = pydantic.Field(default=1500, gt=0, validation_alias="SETTLE_STABLE_WINDOW_MS")

    headless: bool = pydantic.Field(default=True, validation_alias="HEADLESS")
    viewport_width: int = pydantic.Field(default=1280, gt=0, validation_alias="VIEWPORT_WIDTH")
    viewport_height: int = pydantic.Field(default=900, gt=0, validation_alias="VIEWPORT_HEIGHT")

    host: str = pydantic.Field(default="0.0.0.0", validation_alias="HOST")
    port: int = pydantic.Field(default=3000, validation_alias="PORT")
    environment: str = pydantic.Field(default="development", validation_alias="ENVIRONMENT")
    public_dir: pathlib.Path = pydantic.Field(default=_DEFAULT_PUBLIC_DIR, validation_alias="PUBLIC_DIR")

    @property
    def is_production(self) -> bool:
        return self.environment == "production"


@functools.lru_cache(maxsize=1)
def get_settings() -> ScannerSettings:
    """Return the process-wide settings, read once from the environment."""
    return ScannerSettings()
