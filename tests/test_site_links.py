"""Link checks against a live storefront.

Run with a deployed site:

    LINKAUDIT_BASE_URL=https://staging.shop.example pytest -m e2e
"""

import pytest
import pytest_asyncio

from linkaudit.auditor import LinkAuditor, verify_no_broken_links
from linkaudit.browser import BrowserSession
from linkaudit.config import AuditConfig, settings
from linkaudit.navigation import check_navigation_links

pytestmark = [
    pytest.mark.e2e,
    pytest.mark.skipif(not settings.BASE_URL, reason="LINKAUDIT_BASE_URL not set"),
]


@pytest_asyncio.fixture
async def home_page():
    """Homepage of the site under test, settled."""
    async with BrowserSession() as session:
        yield await session.goto(settings.BASE_URL)


@pytest.mark.asyncio
async def test_homepage_has_no_broken_links(home_page):
    await verify_no_broken_links(home_page, max_links=100, config=AuditConfig.from_env())


@pytest.mark.asyncio
@pytest.mark.parametrize("section", ["header", "footer", "category"])
async def test_section_links(home_page, section):
    auditor = LinkAuditor(home_page, config=AuditConfig.from_env())

    await auditor.assert_healthy(section, label=section)


@pytest.mark.asyncio
async def test_navigation_links_land_on_real_pages(home_page):
    checks = await check_navigation_links(home_page, settings.BASE_URL)

    failed = [c for c in checks if not c.ok]
    assert not failed, "\n".join(f"{c.href}: {c.error}" for c in failed)
