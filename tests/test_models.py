"""Tests for link audit data models."""

import pytest

from linkaudit.models import AuditReport, LinkCheckResult, LinkStatus, NavigationCheck


class TestLinkCheckResult:
    """Tests for LinkCheckResult."""

    def test_describe_broken(self):
        result = LinkCheckResult(
            url="https://shop.example/gone", text="Old Sale",
            status=LinkStatus.BROKEN, status_code=404,
        )

        assert result.describe() == '"Old Sale" (https://shop.example/gone) - broken (HTTP 404)'

    def test_describe_error(self):
        result = LinkCheckResult(
            url="https://down.example/", text="Down",
            status=LinkStatus.ERROR, error="net::ERR_CONNECTION_REFUSED",
        )

        assert result.describe() == '"Down" (https://down.example/) - error: net::ERR_CONNECTION_REFUSED'

    def test_describe_with_error_and_status(self):
        result = LinkCheckResult(
            url="u", text="t", status=LinkStatus.OK, status_code=400, error="note",
        )

        assert result.describe() == '"t" (u) - ok: note (HTTP 400)'

    def test_is_failure(self):
        assert not LinkCheckResult("u", "t", LinkStatus.OK).is_failure
        for status in (LinkStatus.BROKEN, LinkStatus.TIMEOUT, LinkStatus.ERROR):
            assert LinkCheckResult("u", "t", status).is_failure

    def test_immutable(self):
        result = LinkCheckResult("u", "t", LinkStatus.OK)

        with pytest.raises(AttributeError):
            result.status = LinkStatus.BROKEN

    def test_to_dict(self):
        data = LinkCheckResult("u", "t", LinkStatus.TIMEOUT, error="slow").to_dict()

        assert data == {
            "url": "u", "text": "t", "status": "timeout", "status_code": None, "error": "slow",
        }


class TestAuditReport:
    """Tests for AuditReport."""

    @pytest.fixture
    def report(self):
        return AuditReport(
            scope="footer",
            page_url="https://shop.example/",
            results=[
                LinkCheckResult("a", "A", LinkStatus.OK, 200),
                LinkCheckResult("b", "B", LinkStatus.BROKEN, 404),
                LinkCheckResult("c", "C", LinkStatus.OK, 400, error="social"),
                LinkCheckResult("d", "D", LinkStatus.TIMEOUT, error="Timeout"),
            ],
        )

    def test_counts(self, report):
        assert len(report) == 4
        assert report.broken_count == 2
        assert report.ok_count == 2
        assert not report.is_healthy

    def test_failures_keep_order(self, report):
        assert [r.text for r in report.failures] == ["B", "D"]

    def test_format_failures(self, report):
        assert report.format_failures() == (
            '"B" (b) - broken (HTTP 404)\n'
            '"D" (d) - timeout: Timeout'
        )

    def test_empty_report_is_healthy(self):
        report = AuditReport()

        assert report.is_healthy
        assert report.format_failures() == ""

    def test_to_dict(self, report):
        data = report.to_dict()

        assert data["scope"] == "footer"
        assert data["total"] == 4
        assert data["broken_count"] == 2
        assert data["results"][1]["status"] == "broken"


def test_navigation_check_to_dict():
    check = NavigationCheck(href="/wines", landed_url="https://shop.example/wines")

    assert check.to_dict() == {
        "href": "/wines",
        "landed_url": "https://shop.example/wines",
        "ok": True,
        "error": None,
    }
