"""Command-line interface for the link auditor."""

import asyncio
import json
import logging
import sys
from typing import List, Optional

from playwright.async_api import Error as PlaywrightError

from linkaudit.auditor import LinkAuditor
from linkaudit.browser import BrowserSession
from linkaudit.browser_config import BrowserConfig
from linkaudit.config import AuditConfig, settings
from linkaudit.constants import NAV_LINK_SELECTOR, SECTION_SELECTORS
from linkaudit.logging_config import setup_logging
from linkaudit.models import AuditReport, NavigationCheck
from linkaudit.navigation import check_navigation_links

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_BROKEN = 1
EXIT_BROWSER_ERROR = 2


def build_audit_config(args) -> AuditConfig:
    """File settings when given, environment otherwise; flags override both."""
    config = AuditConfig.from_file(args.config) if args.config else AuditConfig.from_env()
    if args.concurrency is not None:
        config.max_concurrent = args.concurrency
    return config


def planned_scopes(args) -> List[Optional[str]]:
    """Scopes to audit in order; None is the whole page."""
    scopes: List[Optional[str]] = []
    if args.whole_page or not args.sections:
        scopes.append(None)
    scopes.extend(args.sections or [])
    return scopes


async def _run_check(args) -> dict:
    """Open the page and audit every requested scope.

    Returns:
        Dictionary with reports and navigation checks
    """
    audit_config = build_audit_config(args)
    browser_config = BrowserConfig(
        headless=not args.headed,
        browser_type=args.browser_type,
        user_agent=settings.USER_AGENT,
        locale=args.locale,
        ignore_https_errors=args.ignore_https_errors,
    )

    reports: List[AuditReport] = []
    navigation: List[NavigationCheck] = []

    async with BrowserSession(browser_config) as session:
        page = await session.goto(args.url)
        auditor = LinkAuditor(page, config=audit_config)

        for scope in planned_scopes(args):
            reports.append(await auditor.audit(scope, args.max_links))

        if args.check_navigation:
            try:
                navigation = await check_navigation_links(page, args.url)
            except ValueError as e:
                logger.error(str(e))
                navigation = [NavigationCheck(href=NAV_LINK_SELECTOR, ok=False, error=str(e))]

    return {"url": args.url, "reports": reports, "navigation": navigation}


def print_report(report: AuditReport) -> None:
    """Print an audit report in a formatted way."""
    print(f"\n{'=' * 60}")
    print(f"Links in {report.scope}: {report.page_url}")
    print(f"{'=' * 60}")
    print(f"\nChecked: {len(report)}  OK: {report.ok_count}  Failing: {report.broken_count}")

    suppressed = [r for r in report if not r.is_failure and r.error]
    if suppressed:
        print(f"\n⚠️  Suppressed ({len(suppressed)}):")
        for result in suppressed:
            print(f"  • {result.describe()}")

    if report.failures:
        print(f"\n❌ Failing ({report.broken_count}):")
        for result in report.failures:
            print(f"  • {result.describe()}")
    else:
        print("\n✅ No broken links")


def print_navigation(checks: List[NavigationCheck]) -> None:
    if not checks:
        return
    print("\nNavigation clicks:")
    for check in checks:
        marker = "✅" if check.ok else "❌"
        detail = check.error or check.landed_url
        print(f"  {marker} {check.href} -> {detail}")


def check_command(args) -> int:
    """Handle the 'check' command."""
    if not args.url:
        args.url = settings.BASE_URL
    if not args.url:
        print("Error: no URL given and LINKAUDIT_BASE_URL is not set", file=sys.stderr)
        return EXIT_BROWSER_ERROR

    try:
        outcome = asyncio.run(_run_check(args))
    except PlaywrightError as e:
        logger.error(f"Browser error while auditing {args.url}: {e}")
        return EXIT_BROWSER_ERROR

    reports = outcome["reports"]
    navigation = outcome["navigation"]

    if args.output == "json":
        payload = {
            "url": outcome["url"],
            "reports": [r.to_dict() for r in reports],
            "navigation": [c.to_dict() for c in navigation],
        }
        output = json.dumps(payload, indent=2)
        if args.output_file:
            with open(args.output_file, "w") as f:
                f.write(output)
            print(f"Results written to {args.output_file}")
        else:
            print(output)
    else:
        for report in reports:
            print_report(report)
        print_navigation(navigation)

    healthy = all(r.is_healthy for r in reports) and all(c.ok for c in navigation)
    return EXIT_OK if healthy else EXIT_BROKEN


def sections_command(args) -> int:
    """Handle the 'sections' command."""
    for name, selector in SECTION_SELECTORS.items():
        print(f"{name:10} {selector}")
    return EXIT_OK


def build_parser():
    import argparse

    parser = argparse.ArgumentParser(
        description="Link Audit - Check the visible links of a page for broken targets"
    )

    # Global flags (before subcommands)
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=settings.LOG_LEVEL.upper(),
        help="Set logging verbosity (default: INFO)",
    )
    parser.add_argument(
        "--log-file",
        default=settings.LOG_FILE,
        help="Write logs to file in addition to console",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    check_parser = subparsers.add_parser(
        "check", help="Audit the links of a page."
    )
    check_parser.add_argument(
        "url", nargs="?", help="Page to audit (default: $LINKAUDIT_BASE_URL)"
    )
    check_parser.add_argument(
        "--section",
        "-s",
        dest="sections",
        action="append",
        help="Section name (header, nav, footer, category) or CSS selector; repeatable",
    )
    check_parser.add_argument(
        "--whole-page",
        action="store_true",
        help="Also audit the whole page when sections are given",
    )
    check_parser.add_argument(
        "--max-links",
        type=int,
        default=None,
        help="Maximum links per scope (default: 100 for the whole page, all for sections)",
    )
    check_parser.add_argument(
        "--concurrency",
        type=int,
        default=None,
        help="Links probed at once (default: 1)",
    )
    check_parser.add_argument(
        "--config",
        help="JSON or YAML file with audit settings",
    )
    check_parser.add_argument(
        "--output",
        "-o",
        choices=["text", "json"],
        default="text",
        help="Output format (default: text)",
    )
    check_parser.add_argument(
        "--output-file",
        "-f",
        help="Write output to file (only for json format)",
    )
    check_parser.add_argument(
        "--headed",
        action="store_true",
        help="Show the browser window",
    )
    check_parser.add_argument(
        "--browser-type",
        choices=["chromium", "firefox", "webkit"],
        default="chromium",
        help="Browser engine (default: chromium)",
    )
    check_parser.add_argument(
        "--locale",
        default="en-US",
        help="Browser locale (default: en-US)",
    )
    check_parser.add_argument(
        "--ignore-https-errors",
        action="store_true",
        help="Accept invalid certificates, e.g. on staging hosts",
    )
    check_parser.add_argument(
        "--check-navigation",
        action="store_true",
        help="Also click the first navigation links and check where they land",
    )
    check_parser.set_defaults(func=check_command)

    sections_parser = subparsers.add_parser(
        "sections", help="List named sections and their selectors."
    )
    sections_parser.set_defaults(func=sections_command)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(
        level=args.log_level,
        log_file=getattr(args, 'log_file', None),
    )

    if hasattr(args, "func"):
        return args.func(args)
    parser.print_help()
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
