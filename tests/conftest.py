"""Shared fakes for Playwright pages, locators and probers."""

from typing import Dict, List, Optional, Union
from unittest.mock import AsyncMock, MagicMock

import pytest

from linkaudit.config import AuditConfig
from linkaudit.probers import BaseProber, ProbeError, ProbeResponse


ProbeOutcome = Union[ProbeResponse, ProbeError]


class FakeProber(BaseProber):
    """Prober answering from a table; a list of outcomes is consumed in order."""

    def __init__(self, routes: Optional[Dict[str, Union[ProbeOutcome, List[ProbeOutcome]]]] = None):
        self.routes = routes or {}
        self.calls: List[str] = []

    @property
    def name(self) -> str:
        return "fake"

    async def get(self, url: str, timeout_ms: int, max_redirects: int) -> ProbeResponse:
        self.calls.append(url)
        outcome = self.routes.get(url)
        if outcome is None:
            raise ProbeError(f"net::ERR_NAME_NOT_RESOLVED at {url}")
        if isinstance(outcome, list):
            outcome = outcome.pop(0) if len(outcome) > 1 else outcome[0]
        if isinstance(outcome, ProbeError):
            raise outcome
        return outcome


@pytest.fixture
def make_prober():
    """Factory for FakeProber instances."""
    return FakeProber


@pytest.fixture
def fast_config():
    """Audit config without retry delays."""
    return AuditConfig(retry_delay_ms=0, visibility_timeout_ms=200, text_timeout_ms=200)


@pytest.fixture
def make_link():
    """Factory for fake anchor locators."""

    def _make(
        href: Optional[str],
        text: str = "",
        visible: bool = True,
        aria_label: Optional[str] = None,
        title: Optional[str] = None,
    ):
        attrs = {"href": href, "aria-label": aria_label, "title": title}
        link = MagicMock()
        link.is_visible = AsyncMock(return_value=visible)
        link.get_attribute = AsyncMock(side_effect=lambda name, timeout=None: attrs.get(name))
        link.inner_text = AsyncMock(return_value=text)
        link.text_content = AsyncMock(return_value=text)
        return link

    return _make


@pytest.fixture
def make_page():
    """Factory for fake pages exposing a fixed set of anchors.

    Whole-page and section lookups both resolve to the same anchors; the
    selectors used are recorded on ``page.selectors``.
    """

    def _make(links: list, url: str = "https://shop.example/home"):
        collection = MagicMock()
        collection.count = AsyncMock(return_value=len(links))
        collection.nth = MagicMock(side_effect=lambda i: links[i])

        section = MagicMock()
        section.locator = MagicMock(return_value=collection)

        page = MagicMock()
        page.url = url
        page.selectors = []

        def locator(selector):
            page.selectors.append(selector)
            return collection if selector == "a[href]" else section

        page.locator = MagicMock(side_effect=locator)
        return page

    return _make
