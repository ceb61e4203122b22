"""
Navigation smoke check.

Where the auditor probes links out of band, this check clicks the first few
navigation links in the real browser and makes sure none of them lands on an
error page.
"""
import logging
import re
from typing import Any, List

from playwright.async_api import Error as PlaywrightError

from linkaudit.browser import wait_for_settle
from linkaudit.classifier import is_trivial_href
from linkaudit.constants import (
    DEFAULT_NAV_CLICK_LIMIT,
    DEFAULT_NETWORK_IDLE_TIMEOUT_MS,
    ERROR_PAGE_PATTERN,
    NAV_LINK_SELECTOR,
)
from linkaudit.models import NavigationCheck

logger = logging.getLogger(__name__)

_ERROR_PAGE = re.compile(ERROR_PAGE_PATTERN, re.IGNORECASE)


async def check_navigation_links(
    page: Any,
    return_url: str,
    selector: str = NAV_LINK_SELECTOR,
    limit: int = DEFAULT_NAV_CLICK_LIMIT,
    network_idle_timeout: int = DEFAULT_NETWORK_IDLE_TIMEOUT_MS,
) -> List[NavigationCheck]:
    """
    Click through the first navigation links and check where they land.

    The page is sent back to ``return_url`` after every click so each link
    is clicked from the same starting point.

    Args:
        page: Playwright Page instance
        return_url: URL to reopen after each click
        selector: Selector for navigation links
        limit: Maximum number of links to click
        network_idle_timeout: Budget for the page to settle after a click

    Returns:
        One NavigationCheck per clicked link

    Raises:
        ValueError: If the selector matches no links
    """
    links = page.locator(selector)
    count = await links.count()
    if count == 0:
        raise ValueError(f"No navigation links found for selector: {selector}")

    checks: List[NavigationCheck] = []
    for i in range(min(limit, count)):
        link = links.nth(i)
        href = await link.get_attribute("href")

        if not href or is_trivial_href(href):
            logger.debug(f"Skipping navigation link {i}: {href!r}")
            continue

        check = NavigationCheck(href=href)
        try:
            await link.click()
            await wait_for_settle(page, network_idle_timeout)
            check.landed_url = page.url
            if _ERROR_PAGE.search(page.url):
                check.ok = False
                check.error = f"Landed on error page: {page.url}"
        except PlaywrightError as e:
            check.ok = False
            check.error = str(e)

        if not check.ok:
            logger.warning(f"Navigation link {href} failed: {check.error}")
        checks.append(check)

        await page.goto(return_url)
        await wait_for_settle(page, network_idle_timeout)

    return checks
