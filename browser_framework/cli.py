"""Command-line entry point: accessibility scans and settings inspection."""

import argparse
import dataclasses
import json
import logging
import sys
from typing import List, Optional

from .accessibility import AXE_CDN_URL, AxeAccessibilityTester, is_accessible, unallowed_violations
from .browser import BrowserSession
from .config import BROWSER_ALIASES, load_settings
from .exceptions import FrameworkError
from .logging_utils import setup_logging
from .pages.base_page import BasePage

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="browser_framework", description="Browser test framework utilities")
    parser.add_argument("--settings", help="Settings file (default: $E2E_SETTINGS_FILE or ./appsettings.json)")
    parser.add_argument("--log-level", help="Override the configured log level (DEBUG, INFO, WARNING, ERROR)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    scan = subparsers.add_parser("scan", help="Run an accessibility scan on a URL and write an HTML report")
    scan.add_argument("url", help="Absolute URL, or a path relative to the configured base URL")
    scan.add_argument("--browser", choices=sorted(set(BROWSER_ALIASES.values())), help="Browser to use")
    scan.add_argument("--headless", action="store_true", default=None, help="Run browser in headless mode")
    scan.add_argument("--no-headless", action="store_false", dest="headless", help="Run browser with GUI")
    scan.add_argument("--allow", action="append", default=[], metavar="RULE", help="Violation rule id to ignore")
    scan.add_argument("--report", default="", help="Report file name inside the reports directory")
    scan.add_argument("--axe-source", default=AXE_CDN_URL, help="URL or path of axe.min.js")

    subparsers.add_parser("show-config", help="Print the effective settings")
    return parser


def run_scan(args, settings) -> int:
    overrides = {}
    if args.browser:
        overrides["browser"] = args.browser
    if args.headless is not None:
        overrides["headless"] = args.headless
    settings = dataclasses.replace(settings, **overrides)

    with BrowserSession(settings, name="accessibility-scan") as session:
        page = BasePage(session.driver, settings)
        page.navigate_to(args.url)
        tester = AxeAccessibilityTester(session.driver, settings, axe_source=args.axe_source)
        result = tester.run_full_scan()
        report_path = tester.generate_report(result, args.report)

    accessible = is_accessible(result, args.allow)
    counted = {v.id for v in unallowed_violations(result, args.allow)}
    for violation in result.violations:
        marker = "VIOLATION" if violation.id in counted else "allowed"
        impact = violation.impact.value if violation.impact else "unknown"
        print(f"{marker}: {violation.id} [{impact}] {violation.help} ({len(violation.nodes)} nodes)")
    print(f"Report: {report_path}")
    print("PASSED" if accessible else "FAILED")
    return 0 if accessible else 1


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point.

    Returns:
        0 on success, 1 on failure
    """
    args = build_parser().parse_args(argv)

    try:
        config = load_settings(args.settings)
    except FrameworkError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    logging_settings = config.logging
    if args.log_level:
        logging_settings = dataclasses.replace(logging_settings, level=args.log_level)
    setup_logging(logging_settings)

    if args.command == "show-config":
        print(json.dumps({"source": config.source, **dataclasses.asdict(config.settings)}, indent=2))
        return 0

    try:
        return run_scan(args, config.settings)
    except FrameworkError as e:
        logger.error(f"Scan failed: {e}")
        return 1
    except Exception as e:
        logger.exception(f"Scan failed unexpectedly: {e}")
        return 1
