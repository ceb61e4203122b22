"""
Playwright browser session for link audits.

This module provides a BrowserSession that owns one browser, one isolated
context and one page, used as an async context manager:

    async with BrowserSession(config) as session:
        page = await session.goto("https://example.com")
        report = await LinkAuditor(page).audit()
"""
import logging
from typing import Any, Optional

from playwright.async_api import TimeoutError as PlaywrightTimeoutError
from playwright.async_api import async_playwright

from linkaudit.browser_config import BrowserConfig
from linkaudit.constants import DEFAULT_NETWORK_IDLE_TIMEOUT_MS

logger = logging.getLogger(__name__)


async def wait_for_settle(page: Any, network_idle_timeout: int = DEFAULT_NETWORK_IDLE_TIMEOUT_MS) -> None:
    """
    Wait for a page to settle after navigation.

    Pages with long-polling or analytics beacons may never reach network
    idle, so running out the idle budget is not an error.
    """
    if network_idle_timeout > 0:
        try:
            await page.wait_for_load_state("networkidle", timeout=network_idle_timeout)
        except PlaywrightTimeoutError:
            logger.debug(f"Network did not go idle within {network_idle_timeout}ms on {page.url}")
    await page.wait_for_load_state("domcontentloaded")


class BrowserSession:
    """Single-page Playwright session."""

    def __init__(self, config: Optional[BrowserConfig] = None):
        """
        Initialize the session.

        Args:
            config: BrowserConfig instance (default: BrowserConfig())
        """
        self._config = config or BrowserConfig()
        self._playwright = None
        self._browser = None
        self._context = None
        self._page = None

        logger.debug(f"BrowserSession initialized with config: {self._config}")

    @property
    def page(self) -> Any:
        if self._page is None:
            raise RuntimeError(
                "Browser is not running. Use BrowserSession as an async context manager: "
                "async with BrowserSession(config) as session:"
            )
        return self._page

    async def __aenter__(self) -> "BrowserSession":
        """Enter async context manager, launching browser."""
        logger.info(f"Launching {self._config.browser_type} browser (headless={self._config.headless})")

        self._playwright = await async_playwright().start()
        try:
            browser_launcher = getattr(self._playwright, self._config.browser_type)

            launch_options = {"headless": self._config.headless}
            if self._config.launch_args:
                launch_options["args"] = self._config.launch_args

            self._browser = await browser_launcher.launch(**launch_options)
            self._context = await self._browser.new_context(**self._config.context_options())
            self._page = await self._context.new_page()
        except BaseException:
            await self.__aexit__(None, None, None)
            raise

        logger.info("Browser launched successfully")
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Exit async context manager, closing browser."""
        if self._context:
            await self._context.close()
            self._context = None
            self._page = None

        if self._browser:
            logger.info("Closing browser")
            await self._browser.close()
            self._browser = None

        if self._playwright:
            await self._playwright.stop()
            self._playwright = None

    async def goto(self, url: str) -> Any:
        """
        Navigate the session's page and wait for it to settle.

        Args:
            url: URL to open

        Returns:
            The Playwright Page

        Raises:
            playwright.async_api.Error: If navigation fails
        """
        page = self.page
        logger.info(f"Opening: {url}")
        await page.goto(url, wait_until=self._config.wait_until, timeout=self._config.timeout)
        await wait_for_settle(page, self._config.network_idle_timeout)
        return page
