"""
Command-line scanner.

Usage:
    cookie-scanner https://example.com/
    cookie-scanner https://example.com/ https://example.org/ --json
    cookie-scanner https://example.com/ --settle-strategy cookie-stability
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from collections.abc import Sequence

from cookie_scanner import config
from cookie_scanner.models import cookies
from cookie_scanner.pipeline import scanner as scanner_mod
from cookie_scanner.utils import errors, serialization
from cookie_scanner.utils import url as url_mod

EXIT_OK = 0
EXIT_SCAN_FAILED = 1
EXIT_INVALID_URL = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cookie-scanner",
        description="Report cookies that are only set after accepting a consent banner.",
    )
    parser.add_argument("urls", nargs="+", help="http(s) URLs to scan")
    parser.add_argument("--json", action="store_true", help="print the full results as JSON")
    parser.add_argument(
        "--settle-strategy",
        choices=["fixed", "cookie-stability"],
        default=None,
        help="how to wait for page scripts before each snapshot",
    )
    return parser


def format_summary(url: str, result: cookies.ScanResult) -> str:
    """Render a human readable summary of one scan."""
    lines = [
        url,
        f"  before consent: {len(result.pre)} cookies",
        f"  after consent:  {len(result.post)} cookies",
        f"  added after consent: {len(result.diff)}",
    ]
    for record in result.diff:
        party = "1st" if record.first_party else "3rd"
        expiry = record.expires_iso or "session"
        lines.append(f"    [{party}] {record.name}  {record.domain}{record.path}  expires={expiry}")
    return "\n".join(lines)


async def _scan_all(scanner: scanner_mod.CookieScanner, urls: Sequence[str], as_json: bool) -> int:
    exit_code = EXIT_OK
    collected: dict[str, object] = {}
    for url in urls:
        try:
            result = await scanner.scan(url)
        except errors.ScanFailure as exc:
            print(f"{url}: {exc}", file=sys.stderr)
            collected[url] = {"error": "Scan failed", "detail": str(exc)}
            exit_code = EXIT_SCAN_FAILED
            continue
        if as_json:
            collected[url] = serialization.to_wire_dict(result)
        else:
            print(format_summary(url, result))
    if as_json:
        print(json.dumps(collected, indent=2, ensure_ascii=False))
    return exit_code


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        urls = [url_mod.validate_scan_url(u) for u in args.urls]
    except errors.InvalidUrl as exc:
        print(str(exc), file=sys.stderr)
        return EXIT_INVALID_URL

    settings = config.get_settings()
    if args.settle_strategy:
        settings = settings.model_copy(update={"settle_strategy": args.settle_strategy})

    return asyncio.run(_scan_all(scanner_mod.CookieScanner(settings), urls, args.json))


if __name__ == "__main__":
    sys.exit(main())
