"""
Out-of-band HTTP probes for link reachability.

A prober issues one GET against a URL, follows redirects up to a cap and
reports the final response. Transport failures surface as ProbeError so the
classifier can retry and inspect them the same way whichever client is in use.

Usage:
    # Inside a browser test, reuse the page's request context
    prober = PlaywrightProber(page.request)

    # Without a browser
    async with HttpxProber() as prober:
        response = await prober.get("https://example.com", timeout_ms=10000, max_redirects=5)
"""
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import httpx
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from linkaudit.constants import MAX_BODY_CHARS

logger = logging.getLogger(__name__)


@dataclass
class ProbeResponse:
    """Final response observed by a probe."""
    status: int
    url: str
    headers: Dict[str, str] = field(default_factory=dict)
    body: str = ""

    @property
    def location(self) -> Optional[str]:
        return self.headers.get("location")


class ProbeError(Exception):
    """Transport-level probe failure (DNS, TLS, reset, timeout, redirect loop)."""

    def __init__(self, message: str, timed_out: bool = False):
        super().__init__(message)
        self.message = message
        self.timed_out = timed_out


class BaseProber(ABC):
    """
    Abstract base class for probers.

    Implement this class to probe through a different HTTP client.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Name of the probing backend."""
        pass

    @abstractmethod
    async def get(self, url: str, timeout_ms: int, max_redirects: int) -> ProbeResponse:
        """
        Issue one GET and return the final response.

        Raises:
            ProbeError: If no response could be obtained
        """
        pass


class PlaywrightProber(BaseProber):
    """Probes through a Playwright APIRequestContext (usually ``page.request``)."""

    def __init__(self, request_context: Any):
        self._request = request_context

    @property
    def name(self) -> str:
        return "playwright"

    async def get(self, url: str, timeout_ms: int, max_redirects: int) -> ProbeResponse:
        try:
            response = await self._request.get(
                url,
                timeout=timeout_ms,
                max_redirects=max_redirects,
            )
        except PlaywrightTimeoutError as e:
            raise ProbeError(str(e), timed_out=True) from e
        except PlaywrightError as e:
            raise ProbeError(str(e)) from e

        try:
            body = await response.text()
        except PlaywrightError as e:
            # Binary or undecodable payloads have no markers worth matching
            logger.debug(f"Could not read body of {url}: {e}")
            body = ""

        probe_response = ProbeResponse(
            status=response.status,
            url=response.url,
            headers={k.lower(): v for k, v in response.headers.items()},
            body=body[:MAX_BODY_CHARS],
        )
        await response.dispose()
        return probe_response


class HttpxProber(BaseProber):
    """
    Probes with httpx, for audits that run without a browser request context.

    Can be used as an async context manager; an externally supplied client is
    left open on exit.
    """

    def __init__(self, client: Optional[httpx.AsyncClient] = None, user_agent: Optional[str] = None):
        self._client = client
        self._owns_client = client is None
        self._user_agent = user_agent

    @property
    def name(self) -> str:
        return "httpx"

    async def __aenter__(self) -> "HttpxProber":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self) -> None:
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            headers = {"User-Agent": self._user_agent} if self._user_agent else None
            self._client = httpx.AsyncClient(headers=headers)
        return self._client

    async def get(self, url: str, timeout_ms: int, max_redirects: int) -> ProbeResponse:
        client = self._get_client()
        try:
            # httpx only caps redirects per client, so hops are followed here
            response = await client.get(
                url,
                timeout=timeout_ms / 1000,
                follow_redirects=False,
            )
            hops = 0
            while response.has_redirect_location and hops < max_redirects:
                next_url = response.next_request.url if response.next_request else None
                if next_url is None:
                    break
                hops += 1
                response = await client.get(
                    next_url,
                    timeout=timeout_ms / 1000,
                    follow_redirects=False,
                )
            # max_redirects=0 returns the redirect itself, matching Playwright
            if response.has_redirect_location and 0 < max_redirects <= hops:
                raise ProbeError(f"Exceeded maximum of {max_redirects} redirects for {url}")
        except httpx.TimeoutException as e:
            raise ProbeError(f"Timeout of {timeout_ms}ms exceeded: {e!r}", timed_out=True) from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise ProbeError(str(e) or repr(e)) from e

        try:
            body = response.text
        except (UnicodeDecodeError, LookupError) as e:
            logger.debug(f"Could not decode body of {url}: {e}")
            body = ""

        return ProbeResponse(
            status=response.status_code,
            url=str(response.url),
            headers={k.lower(): v for k, v in response.headers.items()},
            body=body[:MAX_BODY_CHARS],
        )
