"""Best-effort human label for an anchor."""

import logging
import re
from typing import Any, Awaitable, Callable, List, Optional
from urllib.parse import unquote, urlparse

from playwright.async_api import Error as PlaywrightError

from linkaudit.constants import DEFAULT_TEXT_TIMEOUT_MS, FALLBACK_LINK_TEXT

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")


def normalize_text(value: Optional[str]) -> str:
    """Collapse runs of whitespace and trim."""
    if not value:
        return ""
    return _WHITESPACE.sub(" ", value).strip()


def derive_text_from_url(href: Optional[str]) -> str:
    """
    Derive a readable label from the last path segment of a URL.

    "/wines/red-wine_sale/" -> "red wine sale"; falls back to the host name
    for bare domains and to "" when nothing usable is left.
    """
    if not href:
        return ""
    try:
        parsed = urlparse(href)
    except ValueError:
        return ""
    segments = [s for s in parsed.path.split("/") if s]
    if segments:
        label = unquote(segments[-1])
        label = re.sub(r"\.[a-z0-9]{1,5}$", "", label, flags=re.IGNORECASE)
        return normalize_text(re.sub(r"[-_+]+", " ", label))
    return parsed.hostname or ""


async def extract_link_text(
    locator: Any,
    href: Optional[str] = None,
    timeout_ms: int = DEFAULT_TEXT_TIMEOUT_MS,
) -> str:
    """
    Read an anchor's label through an ordered fallback pipeline.

    rendered text -> text content -> aria-label -> title -> URL path -> "Link".
    Each DOM read has its own timeout; a step that fails or times out just
    hands over to the next one.

    Args:
        locator: Playwright locator for the anchor
        href: The anchor's href, used for the URL-derived fallback
        timeout_ms: Budget for each DOM read

    Returns:
        First non-empty label
    """
    steps: List[Callable[[], Awaitable[Optional[str]]]] = [
        lambda: locator.inner_text(timeout=timeout_ms),
        lambda: locator.text_content(timeout=timeout_ms),
        lambda: locator.get_attribute("aria-label", timeout=timeout_ms),
        lambda: locator.get_attribute("title", timeout=timeout_ms),
    ]

    for step in steps:
        try:
            text = normalize_text(await step())
        except PlaywrightError as e:
            logger.debug(f"Text extraction step failed: {e}")
            continue
        if text:
            return text

    return derive_text_from_url(href) or FALLBACK_LINK_TEXT
