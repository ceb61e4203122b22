"""Tests for visible anchor enumeration."""

import asyncio

import pytest
from unittest.mock import AsyncMock

from playwright.async_api import Error as PlaywrightError

from linkaudit.constants import SECTION_SELECTORS
from linkaudit.enumerator import enumerate_anchors, resolve_scope


class TestResolveScope:
    """Tests for section name resolution."""

    def test_whole_page(self):
        assert resolve_scope(None) is None

    @pytest.mark.parametrize("name", ["header", "footer", "category", "nav"])
    def test_named_sections(self, name):
        assert resolve_scope(name) == SECTION_SELECTORS[name]

    def test_names_are_case_insensitive(self):
        assert resolve_scope(" Footer ") == "footer"
        assert resolve_scope("HEADER") == SECTION_SELECTORS["header"]

    def test_raw_selector_passthrough(self):
        assert resolve_scope("#mega-menu .col") == "#mega-menu .col"


class TestEnumerateAnchors:
    """Tests for enumerate_anchors."""

    @pytest.mark.asyncio
    async def test_visible_anchors_in_order(self, make_page, make_link):
        links = [make_link("/a"), make_link("/b"), make_link("/c")]
        page = make_page(links)

        anchors = await enumerate_anchors(page)

        assert [a.index for a in anchors] == [0, 1, 2]
        assert [a.locator for a in anchors] == links
        assert all(a.page_url == page.url for a in anchors)
        assert page.selectors == ["a[href]"]

    @pytest.mark.asyncio
    async def test_hidden_anchors_excluded(self, make_page, make_link):
        links = [make_link("/a"), make_link("/hidden", visible=False), make_link("/c")]

        anchors = await enumerate_anchors(make_page(links))

        assert [a.index for a in anchors] == [0, 2]

    @pytest.mark.asyncio
    async def test_unstable_anchor_skipped(self, make_page, make_link):
        detached = make_link("/gone")
        detached.is_visible = AsyncMock(side_effect=PlaywrightError("Element is not attached to the DOM"))
        links = [make_link("/a"), detached, make_link("/c")]

        anchors = await enumerate_anchors(make_page(links))

        assert [a.index for a in anchors] == [0, 2]

    @pytest.mark.asyncio
    async def test_slow_visibility_probe_excluded(self, make_page, make_link):
        async def never_settles():
            await asyncio.sleep(5)
            return True

        slow = make_link("/slow")
        slow.is_visible = AsyncMock(side_effect=never_settles)
        links = [slow, make_link("/fast")]

        anchors = await enumerate_anchors(make_page(links), visibility_timeout_ms=50)

        assert [a.index for a in anchors] == [1]

    @pytest.mark.asyncio
    async def test_section_scope_uses_selector(self, make_page, make_link):
        page = make_page([make_link("/about")])

        anchors = await enumerate_anchors(page, "footer")

        assert len(anchors) == 1
        assert page.selectors == ["footer"]

    @pytest.mark.asyncio
    async def test_empty_page(self, make_page):
        assert await enumerate_anchors(make_page([])) == []
