"""
False-positive suppression for link probes.

A probe that comes back non-2xx is not necessarily a broken link: CDNs answer
automated clients with challenge pages, gated pages answer with 401/403, and
social platforms reject bots with 400. The rules below reclassify those
known-benign outcomes as healthy.

Rules are plain (name, predicate, verdict) entries evaluated top to bottom;
the first match wins. There are two lists because the same benign condition
can surface either as a response or as a transport exception.
"""
import logging
import re
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence
from urllib.parse import urlparse

from linkaudit.constants import (
    ACCOUNT_PATH_MARKERS,
    AUTH_NOTE,
    CHALLENGE_BODY_MARKERS,
    CHALLENGE_ERROR_MARKERS,
    CHALLENGE_HEADERS,
    CHALLENGE_NOTE,
    CHALLENGE_STATUS_CODES,
    LOGIN_MARKERS,
    SOCIAL_MEDIA_DOMAINS,
    SOCIAL_NOTE,
)
from linkaudit.models import LinkStatus
from linkaudit.probers import ProbeResponse

logger = logging.getLogger(__name__)

# A login form or a login page title in an error body
LOGIN_BODY_PATTERN = re.compile(
    r"<title[^>]*>[^<]*\b(log ?in|sign ?in)\b[^<]*</title>|type=[\"']password[\"']",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class Verdict:
    """Classification produced by a rule."""
    status: LinkStatus
    rule: str
    note: Optional[str] = None
    follow_redirect: bool = False


@dataclass(frozen=True)
class ResponseRule:
    name: str
    predicate: Callable[[str, ProbeResponse, Sequence[str]], bool]
    verdict: Verdict


@dataclass(frozen=True)
class ExceptionRule:
    name: str
    predicate: Callable[[str, str, Sequence[str]], bool]
    verdict: Verdict


# =============================================================================
# Predicates
# =============================================================================

def is_social_domain(url: str, domains: Sequence[str] = SOCIAL_MEDIA_DOMAINS) -> bool:
    """Check whether the URL's host is, or is a subdomain of, a social platform."""
    host = (urlparse(url).hostname or "").lower()
    if not host:
        return False
    return any(host == d or host.endswith("." + d) for d in domains)


def has_challenge_marker(body: str) -> bool:
    lowered = body.lower()
    return any(marker in lowered for marker in CHALLENGE_BODY_MARKERS)


def has_challenge_header(headers: dict) -> bool:
    return any(name in headers for name in CHALLENGE_HEADERS)


def indicates_login(final_url: str, body: str) -> bool:
    """Check whether a response landed on, or renders, a login page."""
    parsed = urlparse(final_url)
    location = f"{parsed.path}?{parsed.query}".lower()
    if any(marker in location for marker in LOGIN_MARKERS):
        return True
    return bool(LOGIN_BODY_PATTERN.search(body))


def is_account_path(url: str) -> bool:
    path = urlparse(url).path.lower()
    return any(marker in path for marker in ACCOUNT_PATH_MARKERS)


def _mentions_status(message: str, *codes: int) -> bool:
    return any(re.search(rf"\b{code}\b", message) for code in codes)


# =============================================================================
# Rule Tables
# =============================================================================

RESPONSE_RULES: List[ResponseRule] = [
    ResponseRule(
        name="cdn_challenge",
        predicate=lambda url, r, social: (
            r.status in CHALLENGE_STATUS_CODES
            or (r.status >= 400 and (has_challenge_marker(r.body) or has_challenge_header(r.headers)))
        ),
        verdict=Verdict(LinkStatus.OK, "cdn_challenge", CHALLENGE_NOTE),
    ),
    # cdn_challenge claims every 403 first, so in this table auth_gate only
    # fires on 401; the 403-login arm applies to tables without cdn_challenge.
    ResponseRule(
        name="auth_gate",
        predicate=lambda url, r, social: (
            r.status == 401 or (r.status == 403 and indicates_login(r.url, r.body))
        ),
        verdict=Verdict(LinkStatus.OK, "auth_gate", AUTH_NOTE),
    ),
    ResponseRule(
        name="redirect",
        predicate=lambda url, r, social: 300 <= r.status < 400,
        verdict=Verdict(LinkStatus.OK, "redirect", follow_redirect=True),
    ),
    ResponseRule(
        name="social_block",
        predicate=lambda url, r, social: (
            r.status == 400 and (is_social_domain(url, social) or is_social_domain(r.url, social))
        ),
        verdict=Verdict(LinkStatus.OK, "social_block", SOCIAL_NOTE),
    ),
]

EXCEPTION_RULES: List[ExceptionRule] = [
    ExceptionRule(
        name="cdn_challenge",
        predicate=lambda url, message, social: any(
            marker in message.lower() for marker in CHALLENGE_ERROR_MARKERS
        ),
        verdict=Verdict(LinkStatus.OK, "cdn_challenge", CHALLENGE_NOTE),
    ),
    ExceptionRule(
        name="auth_gate",
        predicate=lambda url, message, social: (
            _mentions_status(message, 401, 403) and is_account_path(url)
        ),
        verdict=Verdict(LinkStatus.OK, "auth_gate", AUTH_NOTE),
    ),
    ExceptionRule(
        name="social_block",
        predicate=lambda url, message, social: (
            (_mentions_status(message, 400) or "bad request" in message.lower())
            and is_social_domain(url, social)
        ),
        verdict=Verdict(LinkStatus.OK, "social_block", SOCIAL_NOTE),
    ),
]


# =============================================================================
# Classification
# =============================================================================

def base_verdict(status: int) -> Verdict:
    """Plain status check applied when no suppression matched."""
    if 200 <= status < 400:
        return Verdict(LinkStatus.OK, "status")
    return Verdict(LinkStatus.BROKEN, "status")


def classify_response(
    url: str,
    response: ProbeResponse,
    social_domains: Sequence[str] = SOCIAL_MEDIA_DOMAINS,
) -> Verdict:
    """
    Classify a probe response.

    Args:
        url: The URL that was probed
        response: Final response of the probe
        social_domains: Hosts whose 400s are treated as bot blocking

    Returns:
        Verdict of the first matching rule, else the plain status verdict
    """
    for rule in RESPONSE_RULES:
        if rule.predicate(url, response, social_domains):
            logger.debug(f"{url}: HTTP {response.status} matched rule '{rule.name}'")
            return rule.verdict
    return base_verdict(response.status)


def classify_exception(
    url: str,
    message: str,
    social_domains: Sequence[str] = SOCIAL_MEDIA_DOMAINS,
) -> Optional[Verdict]:
    """
    Classify a transport failure by its message.

    Returns:
        Verdict of the first matching suppression, or None when the failure
        is genuine
    """
    for rule in EXCEPTION_RULES:
        if rule.predicate(url, message, social_domains):
            logger.debug(f"{url}: probe error matched rule '{rule.name}'")
            return rule.verdict
    return None
