"""
Batch link auditing.

Runs the classifier over every visible anchor of a page or section and
aggregates the verdicts into one report. Checking never stops at the first
bad link: each anchor gets exactly one result, and assert_healthy raises a
single error that lists every failing link.

Usage:
    auditor = LinkAuditor(page)
    report = await auditor.audit("footer")
    await auditor.assert_healthy(max_links=100)
"""
import asyncio
import logging
from typing import Any, List, Optional

from linkaudit.classifier import LinkClassifier
from linkaudit.config import AuditConfig, default_config
from linkaudit.enumerator import AnchorRef, describe_scope, enumerate_anchors
from linkaudit.models import AuditReport, LinkCheckResult, LinkStatus
from linkaudit.probers import BaseProber, PlaywrightProber

logger = logging.getLogger(__name__)


class BrokenLinksError(AssertionError):
    """Raised when an audited scope contains failing links."""

    def __init__(self, report: AuditReport, label: str = ""):
        self.report = report
        noun = f"{label} links" if label else "links"
        message = f"Found {report.broken_count} broken {noun}:\n{report.format_failures()}"
        super().__init__(message)


class LinkAuditor:
    """
    Audits the links of one Playwright page.

    Features:
    - Whole-page or per-section scans
    - Cap applied before any probing
    - Per-anchor failure isolation
    - Optional bounded concurrency with discovery-ordered results
    """

    def __init__(
        self,
        page: Any,
        prober: Optional[BaseProber] = None,
        config: Optional[AuditConfig] = None,
    ):
        """
        Initialize the auditor.

        Args:
            page: Playwright Page instance
            prober: HTTP prober (default: the page's own request context)
            config: Audit budgets (default: default_config)
        """
        self.page = page
        self.config = config or default_config
        self.prober = prober or PlaywrightProber(page.request)
        self.classifier = LinkClassifier(self.prober, self.config)

    def _effective_limit(self, scope: Optional[str], max_links: Optional[int]) -> Optional[int]:
        if max_links is not None:
            return max_links
        if scope is None:
            return self.config.page_max_links
        return None

    async def audit(self, scope: Optional[str] = None, max_links: Optional[int] = None) -> AuditReport:
        """
        Check every visible link in a scope.

        Args:
            scope: None for the whole page, a section name or a CSS selector
            max_links: Maximum anchors to check (default: page_max_links for
                whole-page scans, unbounded for sections)

        Returns:
            AuditReport with one result per checked anchor, in page order
        """
        anchors = await enumerate_anchors(
            self.page, scope, self.config.visibility_timeout_ms
        )

        limit = self._effective_limit(scope, max_links)
        if limit is not None and len(anchors) > limit:
            logger.info(f"Checking first {limit} of {len(anchors)} links in {describe_scope(scope)}")
            anchors = anchors[:limit]

        base_url = self.page.url
        if self.config.max_concurrent > 1:
            results = await self._classify_concurrently(anchors, base_url)
        else:
            results = [await self._classify_safely(anchor, base_url) for anchor in anchors]

        report = AuditReport(scope=describe_scope(scope), page_url=base_url, results=results)
        logger.info(
            f"Audited {len(report)} links in {report.scope}: "
            f"{report.ok_count} ok, {report.broken_count} failing"
        )
        return report

    async def assert_healthy(
        self,
        scope: Optional[str] = None,
        max_links: Optional[int] = None,
        label: str = "",
    ) -> AuditReport:
        """
        Audit a scope and fail if any link is broken, timed out or errored.

        Args:
            scope: None for the whole page, a section name or a CSS selector
            max_links: Maximum anchors to check
            label: Word used in the failure message ("footer" -> "broken footer links")

        Returns:
            The healthy AuditReport

        Raises:
            BrokenLinksError: Listing every failing link
        """
        report = await self.audit(scope, max_links)
        if not report.is_healthy:
            raise BrokenLinksError(report, label)
        return report

    async def _classify_safely(self, anchor: AnchorRef, base_url: str) -> LinkCheckResult:
        try:
            return await self.classifier.classify(anchor, base_url)
        except Exception as e:
            logger.error(f"Failed to check link {anchor.index}: {e}")
            return LinkCheckResult(
                url="",
                text=f"Link #{anchor.index + 1}",
                status=LinkStatus.ERROR,
                error=str(e) or type(e).__name__,
            )

    async def _classify_concurrently(self, anchors: List[AnchorRef], base_url: str) -> List[LinkCheckResult]:
        semaphore = asyncio.Semaphore(self.config.max_concurrent)

        async def bounded(anchor: AnchorRef) -> LinkCheckResult:
            async with semaphore:
                return await self._classify_safely(anchor, base_url)

        # gather preserves input order regardless of completion order
        return list(await asyncio.gather(*(bounded(a) for a in anchors)))


async def check_all_links(page: Any, max_links: Optional[int] = None, **kwargs) -> AuditReport:
    """Check the visible links of the whole page."""
    return await LinkAuditor(page, **kwargs).audit(None, max_links)


async def check_links_in_section(page: Any, scope: str, max_links: Optional[int] = None, **kwargs) -> AuditReport:
    """Check the visible links inside one section of the page."""
    return await LinkAuditor(page, **kwargs).audit(scope, max_links)


async def verify_no_broken_links(page: Any, max_links: Optional[int] = None, **kwargs) -> AuditReport:
    """Fail with BrokenLinksError if any visible link on the page is unhealthy."""
    return await LinkAuditor(page, **kwargs).assert_healthy(None, max_links)
