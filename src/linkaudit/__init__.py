"""Link integrity auditing for browser-driven end-to-end tests."""

__version__ = "0.1.0"

from linkaudit.models import (
    LinkStatus,
    LinkCheckResult,
    AuditReport,
    NavigationCheck,
)
from linkaudit.config import AuditConfig, settings
from linkaudit.browser_config import BrowserConfig
from linkaudit.enumerator import AnchorRef, enumerate_anchors, resolve_scope
from linkaudit.probers import (
    BaseProber,
    PlaywrightProber,
    HttpxProber,
    ProbeResponse,
    ProbeError,
)
from linkaudit.classifier import LinkClassifier
from linkaudit.auditor import (
    LinkAuditor,
    BrokenLinksError,
    check_all_links,
    check_links_in_section,
    verify_no_broken_links,
)
from linkaudit.browser import BrowserSession
from linkaudit.navigation import check_navigation_links

__all__ = [
    # Models
    "LinkStatus",
    "LinkCheckResult",
    "AuditReport",
    "NavigationCheck",
    # Configuration
    "AuditConfig",
    "BrowserConfig",
    "settings",
    # Enumeration
    "AnchorRef",
    "enumerate_anchors",
    "resolve_scope",
    # Probing
    "BaseProber",
    "PlaywrightProber",
    "HttpxProber",
    "ProbeResponse",
    "ProbeError",
    # Classification and auditing
    "LinkClassifier",
    "LinkAuditor",
    "BrokenLinksError",
    "check_all_links",
    "check_links_in_section",
    "verify_no_broken_links",
    # Browser
    "BrowserSession",
    "check_navigation_links",
]
