"""
Visible anchor enumeration.

Collects the hyperlinks a user could plausibly click on the current page, or
within one section of it. Elements that cannot be confirmed visible within a
short budget, or that misbehave while being probed, are skipped so that one
unstable node never aborts the scan.
"""
import asyncio
import logging
from dataclasses import dataclass
from typing import Any, List, Optional

from linkaudit.constants import (
    DEFAULT_VISIBILITY_TIMEOUT_MS,
    LINK_SELECTOR,
    SECTION_SELECTORS,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnchorRef:
    """
    Reference to one anchor found during a scan.

    Only valid while the page stays on ``page_url``; a navigation
    invalidates every reference from the scan.
    """
    index: int
    locator: Any
    page_url: str


def resolve_scope(scope: Optional[str]) -> Optional[str]:
    """
    Resolve a section name to its CSS selector.

    Args:
        scope: None for the whole page, a section name from SECTION_SELECTORS,
            or a raw CSS selector

    Returns:
        Selector for the section, or None for the whole page
    """
    if scope is None:
        return None
    return SECTION_SELECTORS.get(scope.strip().lower(), scope)


def describe_scope(scope: Optional[str]) -> str:
    return "page" if scope is None else scope


async def _is_visible(locator: Any, timeout_ms: int) -> bool:
    try:
        return bool(await asyncio.wait_for(locator.is_visible(), timeout=timeout_ms / 1000))
    except asyncio.TimeoutError:
        return False


async def enumerate_anchors(
    page: Any,
    scope: Optional[str] = None,
    visibility_timeout_ms: int = DEFAULT_VISIBILITY_TIMEOUT_MS,
) -> List[AnchorRef]:
    """
    Enumerate visible anchors on a page or within a section.

    Args:
        page: Playwright Page instance
        scope: None for the whole page, a section name, or a CSS selector
        visibility_timeout_ms: Budget for confirming each anchor is visible

    Returns:
        Visible anchors in document order, fully materialised
    """
    selector = resolve_scope(scope)
    if selector is None:
        links = page.locator(LINK_SELECTOR)
    else:
        links = page.locator(selector).locator(LINK_SELECTOR)

    count = await links.count()
    page_url = page.url
    anchors: List[AnchorRef] = []
    skipped = 0

    for i in range(count):
        link = links.nth(i)
        try:
            visible = await _is_visible(link, visibility_timeout_ms)
        except Exception as e:
            # Detached or re-rendered mid-scan
            logger.debug(f"Skipping anchor {i} in {describe_scope(scope)}: {e}")
            skipped += 1
            continue

        if visible:
            anchors.append(AnchorRef(index=i, locator=link, page_url=page_url))
        else:
            skipped += 1

    logger.info(
        f"Found {len(anchors)} visible links in {describe_scope(scope)} "
        f"({count} candidates, {skipped} skipped)"
    )
    return anchors
