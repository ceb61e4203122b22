# src/linkaudit/constants.py
"""Centralized constants for the link auditor.

This module contains selectors, marker lists and default budgets that are
used across multiple modules. For user-configurable values, see config.py
and AuditConfig.
"""

# =============================================================================
# Anchor Enumeration
# =============================================================================

# Selector for hyperlink elements
LINK_SELECTOR = "a[href]"

# Named page sections that can be audited on their own
SECTION_SELECTORS = {
    "header": 'header, nav, [role="navigation"]',
    "nav": 'nav, [role="navigation"]',
    "footer": "footer",
    "category": '[data-testid="category"], .category, .menu-item',
}

# Navigation links clicked by the navigation smoke check
NAV_LINK_SELECTOR = "nav a[href], header a[href]"

# Budget for confirming a single anchor is visible (milliseconds)
DEFAULT_VISIBILITY_TIMEOUT_MS = 1000

# Budget for each step of the text fallback pipeline (milliseconds)
DEFAULT_TEXT_TIMEOUT_MS = 1000

# Label used when no text can be derived at all
FALLBACK_LINK_TEXT = "Link"


# =============================================================================
# Probing
# =============================================================================

# Hrefs that are never probed (non-HTTP or intra-document targets)
TRIVIAL_HREF_PREFIXES = ("mailto:", "tel:", "javascript:", "#")

DEFAULT_PROBE_TIMEOUT_MS = 10000
DEFAULT_MAX_REDIRECTS = 5
DEFAULT_PROBE_RETRIES = 1
DEFAULT_RETRY_DELAY_MS = 500

# Whole-page scans are capped to bound runtime on link-heavy pages
DEFAULT_PAGE_MAX_LINKS = 100

# Only the head of a response body is kept for marker matching
MAX_BODY_CHARS = 65536


# =============================================================================
# Suppression Heuristics
# =============================================================================

# Status codes CDNs and bot managers answer automated clients with
CHALLENGE_STATUS_CODES = (403, 503)

# Body fingerprints of challenge/interstitial pages (matched lower-case)
CHALLENGE_BODY_MARKERS = [
    "cf-browser-verification",
    "cf-challenge",
    "challenge-platform",
    "cf_chl_opt",
    "challenges.cloudflare.com",
    "just a moment...",
    "checking your browser",
    "attention required! | cloudflare",
    "_incapsula_resource",
    "captcha-delivery.com",
    "px-captcha",
    "ak-challenge",
    "verify you are human",
]

# Response headers only present on challenge responses
CHALLENGE_HEADERS = [
    "cf-mitigated",
    "cf-chl-bypass",
    "x-amzn-waf-action",
]

# Words in a transport error message that indicate a bot challenge
CHALLENGE_ERROR_MARKERS = [
    "cloudflare",
    "challenge",
    "captcha",
]

# Final URL / body fragments indicating a login redirect
LOGIN_MARKERS = [
    "login",
    "log-in",
    "signin",
    "sign-in",
    "sign_in",
    "logon",
    "authenticate",
]

# Paths of gated account areas
ACCOUNT_PATH_MARKERS = [
    "/account",
    "/my-account",
    "/login",
    "/signin",
    "/sign-in",
    "/auth",
]

# Platforms that routinely reject automated clients
SOCIAL_MEDIA_DOMAINS = (
    "facebook.com",
    "fb.com",
    "twitter.com",
    "x.com",
    "instagram.com",
    "youtube.com",
    "youtu.be",
    "linkedin.com",
    "pinterest.com",
)

# Annotations attached to suppressed results
CHALLENGE_NOTE = "Cloudflare/bot challenge - destination reachable in a real browser"
AUTH_NOTE = "Authentication required - link routes to a gated page"
SOCIAL_NOTE = "Social media platform blocks automated requests - link not verified as broken"


# =============================================================================
# Navigation Smoke Check
# =============================================================================

# Landed URLs matching this pattern are treated as error pages
ERROR_PAGE_PATTERN = r"404|error"

DEFAULT_NAV_CLICK_LIMIT = 3
DEFAULT_NETWORK_IDLE_TIMEOUT_MS = 10000
