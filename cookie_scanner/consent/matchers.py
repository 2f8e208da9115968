"""Known "accept all" controls of common consent-management platforms."""

from __future__ import annotations

import dataclasses
from collections.abc import Iterable


@dataclasses.dataclass(frozen=True)
class ConsentMatcher:
    """One way of locating an "accept all" consent control.

    Attributes:
        name: Short label used in logs.
        selector: CSS selector for candidate elements.
        text: Optional case-insensitive substring the element's text
            must contain (like Playwright's ``:has-text()``).
    """

    name: str
    selector: str
    text: str | None = None

    def describe(self) -> str:
        if self.text:
            return f'{self.selector}:has-text("{self.text}")'
        return self.selector


# Ordered by priority: the first visible match wins.
DEFAULT_CONSENT_MATCHERS: tuple[ConsentMatcher, ...] = (
    ConsentMatcher("onetrust", "#onetrust-accept-btn-handler"),
    ConsentMatcher("aria-accept-all", '[aria-label="Accept all"]'),
    ConsentMatcher("usercentrics", '[data-testid="uc-accept-all-button"]'),
    ConsentMatcher("text-accepter-alle", "button", text="Accepter alle"),
    ConsentMatcher("text-accepter", "button", text="Acceptér"),
    ConsentMatcher("text-tillad-alle", "button", text="Tillad alle"),
    ConsentMatcher("text-accept-all", "button", text="Accept All"),
    ConsentMatcher("title-accept-all", 'button[title="Accept all"]'),
    ConsentMatcher("title-accept-all-caps", 'button[title="Accept All"]'),
    ConsentMatcher("onetrust-sdk", ".ot-sdk-container .accept-btn-handler"),
    ConsentMatcher("accept-all-id", "button#acceptAll"),
    ConsentMatcher("consentmanager-yes", "button#cmpbntyestxt"),
    ConsentMatcher("consentmanager-welcome", "button#cmpwelcomebtnyes"),
)


def matchers_from_selectors(selectors: Iterable[str]) -> tuple[ConsentMatcher, ...]:
    """Build plain selector matchers, keeping the given order."""
    return tuple(
        ConsentMatcher(name=f"custom-{i}", selector=sel.strip())
        for i, sel in enumerate(selectors, start=1)
        if sel and sel.strip()
    )
