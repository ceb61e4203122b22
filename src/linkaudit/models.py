"""Data models for link auditing."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional


class LinkStatus(str, Enum):
    """Health verdict for a single link."""

    OK = "ok"
    BROKEN = "broken"
    TIMEOUT = "timeout"
    ERROR = "error"

    @property
    def is_failure(self) -> bool:
        return self is not LinkStatus.OK


@dataclass(frozen=True)
class LinkCheckResult:
    """Outcome of checking one anchor.

    ``error`` carries the diagnostic for failing results, and the
    explanation for benign failures that were suppressed to ``ok``.
    """

    url: str
    text: str
    status: LinkStatus
    status_code: Optional[int] = None
    error: Optional[str] = None

    @property
    def is_failure(self) -> bool:
        return self.status.is_failure

    def describe(self) -> str:
        """Render the one-line diagnostic used in failure messages."""
        line = f'"{self.text}" ({self.url}) - {self.status.value}'
        if self.error:
            line += f": {self.error}"
        if self.status_code:
            line += f" (HTTP {self.status_code})"
        return line

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "url": self.url,
            "text": self.text,
            "status": self.status.value,
            "status_code": self.status_code,
            "error": self.error,
        }


@dataclass
class AuditReport:
    """Ordered results of one scan scope."""

    scope: str = "page"
    page_url: str = ""
    results: List[LinkCheckResult] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.results)

    def __iter__(self) -> Iterator[LinkCheckResult]:
        return iter(self.results)

    @property
    def failures(self) -> List[LinkCheckResult]:
        return [r for r in self.results if r.is_failure]

    @property
    def broken_count(self) -> int:
        return len(self.failures)

    @property
    def ok_count(self) -> int:
        return len(self.results) - self.broken_count

    @property
    def is_healthy(self) -> bool:
        return self.broken_count == 0

    def format_failures(self) -> str:
        """Diagnostic lines for every failing result, newline separated."""
        return "\n".join(r.describe() for r in self.failures)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "scope": self.scope,
            "page_url": self.page_url,
            "total": len(self.results),
            "ok": self.ok_count,
            "broken_count": self.broken_count,
            "results": [r.to_dict() for r in self.results],
        }


@dataclass
class NavigationCheck:
    """Result of clicking through one navigation link."""

    href: str
    landed_url: Optional[str] = None
    ok: bool = True
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "href": self.href,
            "landed_url": self.landed_url,
            "ok": self.ok,
            "error": self.error,
        }
