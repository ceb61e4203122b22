"""
Link health classification.

Turns one anchor into one LinkCheckResult: read its href and label, skip
non-HTTP targets, probe the resolved URL (retrying a single transient
failure) and run the outcome through the suppression rules in heuristics.py.
"""
import asyncio
import logging
from typing import Optional
from urllib.parse import urljoin

from playwright.async_api import Error as PlaywrightError

from linkaudit.anchor_text import derive_text_from_url, extract_link_text, normalize_text
from linkaudit.config import AuditConfig, default_config
from linkaudit.constants import FALLBACK_LINK_TEXT, TRIVIAL_HREF_PREFIXES
from linkaudit.enumerator import AnchorRef
from linkaudit.heuristics import classify_exception, classify_response
from linkaudit.models import LinkCheckResult, LinkStatus
from linkaudit.probers import BaseProber, ProbeError, ProbeResponse

logger = logging.getLogger(__name__)


def is_trivial_href(href: str) -> bool:
    """Hrefs that point inside the document or outside HTTP are never probed."""
    return href.strip().lower().startswith(TRIVIAL_HREF_PREFIXES)


def resolve_url(href: str, base_url: Optional[str]) -> str:
    """Resolve root-relative and document-relative hrefs against the page URL."""
    href = href.strip()
    if not base_url:
        return href
    return urljoin(base_url, href)


class LinkClassifier:
    """Classifies anchors by probing them out of band."""

    def __init__(self, prober: BaseProber, config: Optional[AuditConfig] = None):
        """
        Args:
            prober: HTTP prober used for reachability checks
            config: Budgets and allowlists (defaults to default_config)
        """
        self.prober = prober
        self.config = config or default_config

    async def classify(self, anchor: AnchorRef, base_url: Optional[str] = None) -> LinkCheckResult:
        """
        Classify one enumerated anchor.

        Args:
            anchor: Anchor from enumerate_anchors
            base_url: URL relative hrefs resolve against (defaults to the
                page URL recorded at scan time)

        Returns:
            LinkCheckResult for the anchor
        """
        href = await self._read_href(anchor)
        text = await extract_link_text(anchor.locator, href, self.config.text_timeout_ms)
        return await self.classify_href(href, text, base_url or anchor.page_url)

    async def classify_href(
        self,
        href: Optional[str],
        text: str = "",
        base_url: Optional[str] = None,
    ) -> LinkCheckResult:
        """
        Classify an href that has already been read from the page.

        Args:
            href: Raw href attribute value (None or "" when missing)
            text: Label for the link; derived from the URL when empty
            base_url: URL relative hrefs resolve against

        Returns:
            LinkCheckResult for the href
        """
        text = normalize_text(text) or derive_text_from_url(href) or FALLBACK_LINK_TEXT

        if not href or not href.strip():
            return LinkCheckResult(
                url="",
                text=text,
                status=LinkStatus.ERROR,
                error="Missing href attribute",
            )

        if is_trivial_href(href):
            return LinkCheckResult(url=href, text=text, status=LinkStatus.OK)

        try:
            url = resolve_url(href, base_url)
        except ValueError as e:
            logger.warning(f"Unresolvable href {href!r}: {e}")
            return LinkCheckResult(
                url=href.strip(),
                text=text,
                status=LinkStatus.ERROR,
                error=f"Invalid URL: {e}",
            )

        try:
            response = await self._probe_with_retry(url)
        except ProbeError as e:
            return self._classify_probe_error(url, text, e)
        except Exception as e:
            # Client-side rejections (malformed URL, unsupported scheme) are not retried
            logger.warning(f"Probe of {url} failed unexpectedly: {e!r}")
            return LinkCheckResult(
                url=url,
                text=text,
                status=LinkStatus.ERROR,
                error=str(e) or type(e).__name__,
            )

        return await self._classify_probe_response(url, text, response)

    async def _read_href(self, anchor: AnchorRef) -> Optional[str]:
        try:
            return await anchor.locator.get_attribute(
                "href", timeout=self.config.text_timeout_ms
            )
        except PlaywrightError as e:
            logger.debug(f"Could not read href of anchor {anchor.index}: {e}")
            return None

    async def _probe_with_retry(self, url: str) -> ProbeResponse:
        """Probe a URL, retrying transport failures after a short delay."""
        attempts = self.config.probe_retries + 1
        last_error: Optional[ProbeError] = None

        for attempt in range(attempts):
            if attempt > 0:
                logger.warning(
                    f"Retrying {url} in {self.config.retry_delay_ms}ms "
                    f"(attempt {attempt + 1}/{attempts}): {last_error}"
                )
                await asyncio.sleep(self.config.retry_delay_ms / 1000)
            try:
                return await self.prober.get(
                    url,
                    timeout_ms=self.config.probe_timeout_ms,
                    max_redirects=self.config.max_redirects,
                )
            except ProbeError as e:
                last_error = e

        raise last_error

    async def _classify_probe_response(
        self, url: str, text: str, response: ProbeResponse
    ) -> LinkCheckResult:
        verdict = classify_response(url, response, self.config.social_domains)
        status_code = response.status

        if verdict.follow_redirect:
            status_code = await self._follow_redirect(url, response)

        if verdict.note:
            logger.info(f"Suppressed HTTP {response.status} for {url}: {verdict.note}")
        elif verdict.status.is_failure:
            logger.warning(f"Broken link {url} (HTTP {response.status})")
        else:
            logger.debug(f"OK {url} (HTTP {status_code})")

        return LinkCheckResult(
            url=url,
            text=text,
            status=verdict.status,
            status_code=status_code,
            error=verdict.note,
        )

    async def _follow_redirect(self, url: str, response: ProbeResponse) -> int:
        """
        Probe a redirect's target once to report its status.

        A failed follow-up keeps the redirect's own status; the redirect is
        healthy either way.
        """
        if not response.location:
            return response.status

        try:
            target = urljoin(response.url or url, response.location)
            target_response = await self.prober.get(
                target,
                timeout_ms=self.config.probe_timeout_ms,
                max_redirects=self.config.max_redirects,
            )
        except Exception as e:
            logger.debug(
                f"Redirect target {response.location!r} of {url} could not be probed: {e!r}"
            )
            return response.status
        return target_response.status

    def _classify_probe_error(self, url: str, text: str, error: ProbeError) -> LinkCheckResult:
        verdict = classify_exception(url, error.message, self.config.social_domains)

        if verdict is not None:
            logger.info(f"Suppressed probe error for {url}: {verdict.note}")
            return LinkCheckResult(
                url=url,
                text=text,
                status=verdict.status,
                error=f"{verdict.note} ({error.message})",
            )

        status = LinkStatus.TIMEOUT if error.timed_out else LinkStatus.ERROR
        logger.warning(f"Probe failed for {url} ({status.value}): {error.message}")
        return LinkCheckResult(url=url, text=text, status=status, error=error.message)
