"""
Scan error taxonomy and error message extraction.

Only :class:`ScanFailure` and its subclasses are fatal to a scan.
Soft failures (idle-wait timeouts, consent clicks that miss) are
logged and swallowed where they happen.
"""

from __future__ import annotations


def get_error_message(error: BaseException | object) -> str:
    """
    Safely extract an error message from an unknown error type.

    Falls back to the exception class name when the message is empty.
    """
    if isinstance(error, BaseException):
        return str(error) or type(error).__name__
    return "Unknown error"


class InvalidUrl(ValueError):
    """The target URL is malformed or does not use http/https.

    Raised by the transport layer before any browser session exists.
    """

    def __init__(self, url: str, reason: str = "") -> None:
        self.url = url
        self.reason = reason
        super().__init__(f"Invalid URL {url!r}" + (f": {reason}" if reason else ""))


class ScanFailure(Exception):
    """A scan aborted with a fatal error.

    Attributes:
        message: Human readable description of what failed.
        cause: The underlying exception, if any.
    """

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        self.message = message
        self.cause = cause
        super().__init__(message)

    def __str__(self) -> str:
        if self.cause is not None:
            return f"{self.message}: {get_error_message(self.cause)}"
        return self.message


class NavigationTimeout(ScanFailure):
    """Navigation did not reach ``domcontentloaded`` within budget."""


class BrowserLaunchFailure(ScanFailure):
    """The automated browser could not be started."""
