"""
Request helpers for the scan endpoint.

The endpoint accepts the target URL in whatever shape clients send it:
a JSON body, a form-encoded body, or a ``?url=`` query parameter.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from urllib import parse

from cookie_scanner.models import cookies
from cookie_scanner.utils import errors, logger

log = logger.create_logger("Scan-Request")

# Largest request body the endpoint will read.
MAX_BODY_BYTES = 1024 * 1024

MISSING_URL_ERROR = "Missing url or unreadable request body"
MISSING_URL_HINT = 'Send JSON: {"url":"https://example.com/"} with Content-Type: application/json'
INVALID_URL_ERROR = "Invalid URL. Remember https://..."
SCAN_FAILED_ERROR = "Scan failed"


def _url_from_json(body: str) -> str | None:
    try:
        data = json.loads(body or "{}")
    except json.JSONDecodeError as exc:
        log.warn("JSON parse error", {"error": str(exc)})
        return None
    if isinstance(data, dict) and isinstance(data.get("url"), str):
        return data["url"]
    return None


def _url_from_form(body: str) -> str | None:
    values = parse.parse_qs(body or "", keep_blank_values=False).get("url")
    return values[0] if values else None


def extract_target_url(
    body: str,
    content_type: str | None,
    query: Mapping[str, str],
) -> str | None:
    """Pull the target URL out of a scan request.

    Sources are tried in order: JSON body (only when the content type
    says JSON), form-encoded body, then the ``url`` query parameter.

    Returns:
        The first non-empty URL found, or ``None``.
    """
    url: str | None = None
    if content_type and "application/json" in content_type.lower():
        url = _url_from_json(body)
    if not url:
        url = _url_from_form(body)
    if not url:
        url = query.get("url") or None
    return url


def failure_status(exc: errors.ScanFailure) -> int:
    """HTTP status code reported for a fatal scan error."""
    if isinstance(exc, errors.NavigationTimeout):
        return 504
    if isinstance(exc, errors.BrowserLaunchFailure):
        return 503
    return 500


def failure_body(exc: errors.ScanFailure) -> cookies.ErrorResponse:
    return cookies.ErrorResponse(error=SCAN_FAILED_ERROR, detail=str(exc))
