"""
Scan orchestration: the two-phase cookie visit.

Each scan runs in its own browser session:

1. navigate and wait for the page to settle
2. snapshot cookies (``pre-consent``)
3. try to accept the consent banner
4. wait again and snapshot cookies (``post-consent``)
5. diff the two snapshots

The session is always closed, whatever happened before.  Fatal errors
surface as :class:`~cookie_scanner.utils.errors.ScanFailure`; no
partial result is ever returned.
"""

from __future__ import annotations

from collections.abc import Callable

from cookie_scanner import config
from cookie_scanner.browser import protocol
from cookie_scanner.browser import session as browser_session
from cookie_scanner.consent import resolver as resolver_mod
from cookie_scanner.cookies import diff, snapshot
from cookie_scanner.models import cookies
from cookie_scanner.pipeline import settle as settle_mod
from cookie_scanner.utils import errors, logger
from cookie_scanner.utils import url as url_mod

log = logger.create_logger("Scan")

SessionFactory = Callable[[], protocol.ScanSession]


class CookieScanner:
    """Runs cookie scans, one isolated browser session per call.

    Collaborators are injected so the pipeline can be exercised
    against a fake browser; each defaults to the production
    implementation configured from *settings*.
    """

    def __init__(
        self,
        settings: config.ScannerSettings | None = None,
        *,
        session_factory: SessionFactory | None = None,
        consent_resolver: resolver_mod.ConsentResolver | None = None,
        settle_policy: settle_mod.SettlePolicy | None = None,
    ) -> None:
        self.settings = settings or config.get_settings()
        self._session_factory = session_factory or (lambda: browser_session.BrowserSession(self.settings))
        self.consent_resolver = consent_resolver or resolver_mod.ConsentResolver.from_settings(self.settings)
        self.settle_policy = settle_policy or settle_mod.from_settings(self.settings)

    async def scan(self, target_url: str) -> cookies.ScanResult:
        """Scan *target_url* and report cookies added after consent.

        *target_url* must already be a validated http(s) URL.

        Raises:
            errors.NavigationTimeout: The page did not load in time.
            errors.BrowserLaunchFailure: The browser could not start.
            errors.ScanFailure: Any other fatal error, with its cause.
        """
        try:
            session = self._session_factory()
        except Exception as exc:
            raise errors.BrowserLaunchFailure("Could not create browser session", exc) from exc

        hostname = url_mod.extract_hostname(target_url)
        logger.start_log_file(hostname or "scan")
        log.section(f"Cookie scan: {hostname}")
        log.start_timer("scan")
        try:
            result = await self._run(session, target_url)
            log.success(
                "Scan complete",
                {"pre": len(result.pre), "post": len(result.post), "addedAfterConsent": len(result.diff)},
            )
        except errors.ScanFailure as exc:
            log.error("Scan failed", {"url": target_url, "error": str(exc)})
            raise
        except Exception as exc:
            log.error("Scan failed", {"url": target_url, "error": errors.get_error_message(exc)})
            raise errors.ScanFailure("Scan failed", exc) from exc
        finally:
            await self._release(session)
            log.end_timer("scan", "Scan finished")
            logger.end_log_file()

        return result

    async def _run(self, session: protocol.ScanSession, target_url: str) -> cookies.ScanResult:
        settings = self.settings
        await session.launch()

        log.subsection("Pre-consent")
        log.start_timer("navigation")
        await session.navigate(target_url, settings.navigation_timeout_ms)
        log.end_timer("navigation", "Page DOM ready")

        if not await session.wait_for_network_idle(settings.network_idle_timeout_ms):
            log.debug("Proceeding without network idle")
        await self.settle_policy.settle(session, settings.pre_consent_settle_ms)
        pre = await snapshot.capture(session, target_url, cookies.PRE_CONSENT)

        log.subsection("Consent")
        accepted = await self.consent_resolver.try_accept(session)
        log.info("Consent step finished", {"accepted": accepted})

        log.subsection("Post-consent")
        if not await session.wait_for_network_idle(settings.network_idle_timeout_ms):
            log.debug("Proceeding without network idle")
        await self.settle_policy.settle(session, settings.post_consent_settle_ms)
        post = await snapshot.capture(session, target_url, cookies.POST_CONSENT)

        return cookies.ScanResult(pre=pre, post=post, diff=diff.added_after_consent(pre, post))

    @staticmethod
    async def _release(session: protocol.ScanSession) -> None:
        try:
            await session.close()
        except Exception as exc:
            log.warn("Session release failed", {"error": errors.get_error_message(exc)})


async def scan_url(target_url: str, settings: config.ScannerSettings | None = None) -> cookies.ScanResult:
    """Validate *target_url* and scan it with a default scanner."""
    validated = url_mod.validate_scan_url(target_url)
    return await CookieScanner(settings).scan(validated)
