"""Pydantic models for captured cookies and scan results."""

from __future__ import annotations

from typing import Literal

import pydantic

from cookie_scanner.utils import serialization

CookieStage = Literal["pre-consent", "post-consent", "added_after_consent"]

PRE_CONSENT: CookieStage = "pre-consent"
POST_CONSENT: CookieStage = "post-consent"
ADDED_AFTER_CONSENT: CookieStage = "added_after_consent"


class CookieRecord(pydantic.BaseModel):
    """One cookie as seen at one stage of a scan.

    ``(name, domain, path)`` is the cookie's identity; the remaining
    attributes are informational and ignored when diffing.
    """

    model_config = pydantic.ConfigDict(
        alias_generator=serialization.snake_to_camel, populate_by_name=True, frozen=True
    )

    url: str
    stage: CookieStage
    name: str
    domain: str
    path: str
    secure: bool = False
    http_only: bool = False
    same_site: str = ""
    expires_iso: str = ""
    first_party: bool = False


class ScanResult(pydantic.BaseModel):
    """Output of a single scan.

    ``diff`` holds copies of ``post`` records that were absent before
    consent, re-stamped with the ``added_after_consent`` stage.
    """

    model_config = pydantic.ConfigDict(
        alias_generator=serialization.snake_to_camel, populate_by_name=True, frozen=True
    )

    pre: list[CookieRecord]
    post: list[CookieRecord]
    diff: list[CookieRecord]


class ErrorResponse(pydantic.BaseModel):
    """JSON body returned by the API when a request fails."""

    error: str
    detail: str | None = None
    hint: str | None = None
