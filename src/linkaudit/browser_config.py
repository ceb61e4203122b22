"""
Browser configuration for Playwright-driven link audits.

This module provides a validated Pydantic model for the browser session that
renders the page under audit, plus pre-configured instances for common runs.
The same context also backs ``page.request``, so headers and TLS settings
given here apply to link probes as well.
"""
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


# Keyed by (browser_type, mobile); each agent matches its rendering engine
USER_AGENTS = {
    ("chromium", False): "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36",
    ("chromium", True): "Mozilla/5.0 (Linux; Android 14; Pixel 8) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/124.0.0.0 Mobile Safari/537.36",
    ("firefox", False): "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:125.0) Gecko/20100101 Firefox/125.0",
    ("firefox", True): "Mozilla/5.0 (Android 14; Mobile; rv:125.0) Gecko/125.0 Firefox/125.0",
    ("webkit", False): "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15 (KHTML, like Gecko) Version/17.4 Safari/605.1.15",
    ("webkit", True): "Mozilla/5.0 (iPhone; CPU iPhone OS 17_4 like Mac OS X) AppleWebKit/605.1.15 (KHTML, like Gecko) Version/17.4 Mobile/15E148 Safari/604.1",
}

DESKTOP_VIEWPORT = {"width": 1920, "height": 1080}
MOBILE_VIEWPORT = {"width": 390, "height": 844}


class BrowserConfig(BaseModel):
    """
    Configuration for the browser session used by link audits.

    Values are validated on construction and on assignment.
    """

    headless: bool = Field(
        default=True,
        description="Run without a visible window"
    )

    browser_type: Literal["chromium", "firefox", "webkit"] = Field(
        default="chromium",
        description="Browser engine to render the page with"
    )

    timeout: int = Field(
        default=30000,
        description="Navigation timeout for the page under audit (milliseconds)",
        ge=1000,
        le=300000
    )

    wait_until: Literal["load", "domcontentloaded", "networkidle", "commit"] = Field(
        default="domcontentloaded",
        description="Load state that ends the initial navigation"
    )

    network_idle_timeout: int = Field(
        default=10000,
        description="Extra wait for network idle after navigation (milliseconds); never fatal",
        ge=0,
        le=120000
    )

    mobile: bool = Field(
        default=False,
        description="Mobile viewport, touch and user agent; menus often render different links"
    )

    user_agent: Optional[str] = Field(
        default=None,
        description="Custom user agent; defaults to one matching browser_type"
    )

    locale: str = Field(
        default="en-US",
        description="Browser locale, which some storefronts use to pick a regional site"
    )

    extra_http_headers: Dict[str, str] = Field(
        default_factory=dict,
        description="Headers sent with every page and probe request (e.g. staging basic auth)"
    )

    ignore_https_errors: bool = Field(
        default=False,
        description="Accept self-signed certificates on staging hosts"
    )

    launch_args: List[str] = Field(
        default_factory=list,
        description="Additional browser launch arguments"
    )

    model_config = ConfigDict(frozen=False, validate_assignment=True)

    def get_user_agent(self) -> str:
        """User agent for the browser context."""
        return self.user_agent or USER_AGENTS[(self.browser_type, self.mobile)]

    def get_viewport(self) -> dict:
        return MOBILE_VIEWPORT if self.mobile else DESKTOP_VIEWPORT

    def context_options(self) -> dict:
        """Keyword arguments for ``Browser.new_context``."""
        options = {
            "viewport": self.get_viewport(),
            "user_agent": self.get_user_agent(),
            "locale": self.locale,
            "has_touch": self.mobile,
            "ignore_https_errors": self.ignore_https_errors,
        }
        # Firefox has no mobile emulation
        if self.browser_type != "firefox":
            options["is_mobile"] = self.mobile
        if self.extra_http_headers:
            options["extra_http_headers"] = self.extra_http_headers
        return options


# --- Pre-configured Instances ---

DEFAULT_CONFIG = BrowserConfig()

MOBILE_CONFIG = BrowserConfig(
    mobile=True,
    browser_type="webkit",
)
"""
iPhone-sized Safari session, for sites whose mobile menu links differ.
"""

DEBUG_CONFIG = BrowserConfig(
    headless=False,
    timeout=60000,
    network_idle_timeout=20000,
)
"""
Visible browser with generous timeouts for debugging a failing audit.
"""
