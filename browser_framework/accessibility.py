"""Accessibility testing with axe-core running inside the browser."""

import json
import logging
import threading
import time
from dataclasses import dataclass
from enum import Enum
from html import escape
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

import requests
from selenium.common.exceptions import WebDriverException
from selenium.webdriver.remote.webdriver import WebDriver

from .config import Settings
from .exceptions import ExternalToolError
from .locators import Locator, resolve

logger = logging.getLogger(__name__)

AXE_CDN_URL = "https://cdnjs.cloudflare.com/ajax/libs/axe-core/4.9.1/axe.min.js"

AXE_PRESENT_SCRIPT = "return typeof window.axe !== 'undefined';"

AXE_RUN_SCRIPT = """
var context = arguments[0] || document;
var options = arguments[1] || {};
var done = arguments[arguments.length - 1];
window.axe.run(context, options)
    .then(function (results) { done(JSON.stringify(results)); })
    .catch(function (err) { done(JSON.stringify({error: String(err)})); });
"""

PASSES_SHOWN_IN_REPORT = 10


class Severity(Enum):
    CRITICAL = "critical"
    SERIOUS = "serious"
    MODERATE = "moderate"
    MINOR = "minor"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["Severity"]:
        try:
            return cls(value) if value else None
        except ValueError:
            return None


@dataclass(frozen=True)
class NodeResult:
    html: str
    target: Tuple[str, ...]
    failure_summary: str = ""

    @classmethod
    def from_axe(cls, data: dict) -> "NodeResult":
        target = tuple(str(t) for t in data.get("target") or ())
        return cls(html=data.get("html") or "", target=target, failure_summary=data.get("failureSummary") or "")


@dataclass(frozen=True)
class RuleResult:
    """One axe rule outcome (a violation, pass, incomplete or inapplicable entry)."""

    id: str
    help: str
    impact: Optional[Severity]
    help_url: str
    description: str
    nodes: Tuple[NodeResult, ...] = ()
    tags: Tuple[str, ...] = ()

    @classmethod
    def from_axe(cls, data: dict) -> "RuleResult":
        return cls(
            id=data.get("id", ""),
            help=data.get("help") or "",
            impact=Severity.parse(data.get("impact")),
            help_url=data.get("helpUrl") or "",
            description=data.get("description") or "",
            nodes=tuple(NodeResult.from_axe(n) for n in data.get("nodes") or ()),
            tags=tuple(data.get("tags") or ()),
        )


@dataclass(frozen=True)
class ScanResult:
    url: str
    timestamp: str
    violations: Tuple[RuleResult, ...]
    passes: Tuple[RuleResult, ...] = ()
    incomplete: Tuple[RuleResult, ...] = ()
    inapplicable: Tuple[RuleResult, ...] = ()

    @classmethod
    def from_axe(cls, data: dict) -> "ScanResult":
        """Build a ScanResult from the JSON object returned by axe.run()."""

        def rules(key: str) -> Tuple[RuleResult, ...]:
            return tuple(RuleResult.from_axe(r) for r in data.get(key) or ())

        return cls(
            url=data.get("url") or "",
            timestamp=data.get("timestamp") or "",
            violations=rules("violations"),
            passes=rules("passes"),
            incomplete=rules("incomplete"),
            inapplicable=rules("inapplicable"),
        )

    def violations_by_severity(self, severity: Severity) -> List[RuleResult]:
        return [v for v in self.violations if v.impact == severity]

    def count_by_severity(self) -> Dict[Severity, int]:
        counts = {severity: 0 for severity in Severity}
        for violation in self.violations:
            if violation.impact is not None:
                counts[violation.impact] += 1
        return counts


def unallowed_violations(result: ScanResult, allowed_ids: Optional[Iterable[str]] = None) -> List[RuleResult]:
    """Violations whose rule id is not in the allow-list."""
    allowed = set(allowed_ids or ())
    return [v for v in result.violations if v.id not in allowed]


def is_accessible(result: ScanResult, allowed_ids: Optional[Iterable[str]] = None) -> bool:
    """Return True iff every violation in result has an allow-listed rule id."""
    return not unallowed_violations(result, allowed_ids)


_axe_sources: Dict[str, str] = {}
_axe_lock = threading.Lock()


def load_axe_source(source: str = AXE_CDN_URL) -> str:
    """
    Return the axe-core script, downloading it once per process.

    Args:
        source: http(s) URL or local path of axe.min.js

    Raises:
        ExternalToolError: If the script cannot be fetched
    """
    with _axe_lock:
        if source in _axe_sources:
            return _axe_sources[source]
        try:
            if source.startswith(("http://", "https://")):
                logger.info(f"Downloading axe-core from {source}")
                response = requests.get(source, timeout=30)
                response.raise_for_status()
                script = response.text
            else:
                script = Path(source).read_text(encoding="utf-8")
        except (requests.RequestException, OSError) as e:
            logger.error(f"Could not load axe-core from {source}: {e}")
            raise ExternalToolError(f"Could not load axe-core from {source}: {e}") from e
        _axe_sources[source] = script
        return script


def render_html_report(result: ScanResult) -> str:
    """Render a scan result as a standalone HTML page."""
    generated = escape(result.timestamp or "unknown time")
    parts = [
        "<!DOCTYPE html>",
        "<html lang='en'>",
        "<head>",
        "<meta charset='UTF-8'>",
        "<meta name='viewport' content='width=device-width, initial-scale=1.0'>",
        f"<title>Accessibility Report - {generated}</title>",
        "<style>",
        "body { font-family: Arial, sans-serif; margin: 20px; background-color: #f5f5f5; }",
        ".header { background-color: #2c3e50; color: white; padding: 20px; border-radius: 5px; }",
        ".summary { background-color: white; padding: 15px; margin: 20px 0; border-radius: 5px; }",
        ".violation { background-color: #fff; margin: 15px 0; padding: 15px; border-left: 4px solid #e74c3c; }",
        ".violation-critical { border-left-color: #e74c3c; }",
        ".violation-serious { border-left-color: #f39c12; }",
        ".violation-moderate { border-left-color: #f1c40f; }",
        ".violation-minor { border-left-color: #3498db; }",
        ".impact { display: inline-block; padding: 3px 8px; border-radius: 3px; color: white; font-size: 12px; }",
        ".impact-critical { background-color: #e74c3c; }",
        ".impact-serious { background-color: #f39c12; }",
        ".impact-moderate { background-color: #f1c40f; color: #333; }",
        ".impact-minor { background-color: #3498db; }",
        ".node { background-color: #ecf0f1; padding: 10px; margin: 5px 0; border-radius: 3px; }",
        ".passed { color: #27ae60; }",
        ".failed { color: #e74c3c; }",
        "</style>",
        "</head>",
        "<body>",
        "<div class='header'>",
        "<h1>Accessibility Test Report</h1>",
        f"<p>Generated on: {generated}</p>",
        f"<p>URL: {escape(result.url)}</p>",
        "</div>",
        "<div class='summary'>",
        "<h2>Summary</h2>",
        f"<p><strong>Total Violations:</strong> <span class='failed'>{len(result.violations)}</span></p>",
    ]
    for severity, count in result.count_by_severity().items():
        parts.append(f"<p>{severity.value.capitalize()}: {count}</p>")
    parts += [
        f"<p><strong>Tests Passed:</strong> <span class='passed'>{len(result.passes)}</span></p>",
        f"<p><strong>Incomplete Tests:</strong> {len(result.incomplete)}</p>",
        f"<p><strong>Not Applicable:</strong> {len(result.inapplicable)}</p>",
        "</div>",
    ]

    if result.violations:
        parts += ["<div class='violations'>", "<h2>Accessibility Violations</h2>"]
        for violation in result.violations:
            impact = violation.impact.value if violation.impact else "unknown"
            parts += [
                f"<div class='violation violation-{impact}'>",
                f"<h3>{escape(violation.id)}: {escape(violation.help)}</h3>",
                f"<span class='impact impact-{impact}'>{impact.upper()}</span>",
                f"<p><strong>Description:</strong> {escape(violation.description)}</p>",
                f"<p><strong>Help URL:</strong> <a href='{escape(violation.help_url)}' target='_blank'>"
                f"{escape(violation.help_url)}</a></p>",
                f"<p><strong>Affected Elements ({len(violation.nodes)}):</strong></p>",
            ]
            for node in violation.nodes:
                parts += [
                    "<div class='node'>",
                    f"<strong>Element:</strong> <code>{escape(node.html)}</code><br>",
                    f"<strong>Target:</strong> <code>{escape(', '.join(node.target))}</code><br>",
                    f"<strong>Impact:</strong> {impact}",
                    "</div>",
                ]
            parts.append("</div>")
        parts.append("</div>")

    parts += [
        "<div class='summary'>",
        "<h2>Tests Passed</h2>",
        "<p>The following accessibility tests passed successfully:</p>",
        "<ul>",
    ]
    for rule in result.passes[:PASSES_SHOWN_IN_REPORT]:
        parts.append(f"<li><strong>{escape(rule.id)}:</strong> {escape(rule.help)}</li>")
    if len(result.passes) > PASSES_SHOWN_IN_REPORT:
        parts.append(f"<li>... and {len(result.passes) - PASSES_SHOWN_IN_REPORT} more tests passed</li>")
    parts += ["</ul>", "</div>", "</body>", "</html>"]
    return "\n".join(parts)


class AxeAccessibilityTester:
    """Runs axe-core against the current page and reports on the results."""

    def __init__(self, driver: WebDriver, settings: Settings, axe_source: str = AXE_CDN_URL):
        """
        Initialize the tester.

        Args:
            driver: Selenium WebDriver instance
            settings: Test settings (script timeout, report directory)
            axe_source: URL or local path of axe.min.js
        """
        self.driver = driver
        self.settings = settings
        self.axe_source = axe_source

    def _ensure_axe(self) -> None:
        if self.driver.execute_script(AXE_PRESENT_SCRIPT):
            return
        logger.info("Injecting axe-core into the page")
        self.driver.execute_script(load_axe_source(self.axe_source))

    def _run_axe(self, context=None) -> ScanResult:
        try:
            self._ensure_axe()
            self.driver.set_script_timeout(self.settings.timeout_seconds)
            raw = self.driver.execute_async_script(AXE_RUN_SCRIPT, context, {})
        except WebDriverException as e:
            raise ExternalToolError(f"axe-core run failed: {e.msg}") from e
        try:
            data = json.loads(raw) if isinstance(raw, str) else raw
        except ValueError as e:
            raise ExternalToolError(f"Could not parse axe-core result: {e}") from e
        if not isinstance(data, dict):
            raise ExternalToolError(f"Unexpected axe-core result: {raw!r}")
        if "error" in data:
            raise ExternalToolError(f"axe-core reported an error: {data['error']}")
        return ScanResult.from_axe(data)

    def run_full_scan(self) -> ScanResult:
        """Run axe-core on the whole page."""
        logger.info("Running full accessibility scan on current page")
        try:
            result = self._run_axe()
        except ExternalToolError as e:
            logger.error(f"Error running accessibility scan: {e}")
            raise
        logger.info(f"Accessibility scan completed. Found {len(result.violations)} violations")
        return result

    def run_element_scan(self, locator: Locator) -> ScanResult:
        """
        Run axe-core scoped to one element.

        Any failure (element missing, scoped run rejected) falls back to a full
        page scan. This is lossy: a broken locator produces page-wide results
        instead of an error.
        """
        logger.info(f"Running accessibility scan on {locator}")
        try:
            element = resolve(self.driver, locator)
            result = self._run_axe(element)
        except Exception as e:
            logger.warning(f"Element scan of {locator} failed ({e}), falling back to full page scan")
            return self.run_full_scan()
        logger.info(f"Element accessibility scan completed. Found {len(result.violations)} violations")
        return result

    def is_page_accessible(self, allowed_rule_ids: Optional[Iterable[str]] = None) -> bool:
        """Scan the page and report whether all violations are allow-listed."""
        result = self.run_full_scan()
        allowed = set(allowed_rule_ids or ())
        counted = unallowed_violations(result, allowed)
        accessible = is_accessible(result, allowed)
        logger.info(
            f"Page accessibility check: {'PASSED' if accessible else 'FAILED'} - {len(counted)} violations not allow-listed"
        )
        return accessible

    def generate_report(self, result: ScanResult, file_name: str = "") -> str:
        """
        Write an HTML report for result.

        Args:
            result: Scan result to render (the page is not scanned again)
            file_name: File name inside the reports directory (timestamped default)

        Returns:
            Path to the written report as string

        Raises:
            ExternalToolError: If the report cannot be written
        """
        if not file_name:
            file_name = f"accessibility-report-{time.strftime('%Y%m%d-%H%M%S')}.html"
        report_path = self.settings.reports_dir / file_name
        try:
            report_path.parent.mkdir(parents=True, exist_ok=True)
            report_path.write_text(render_html_report(result), encoding="utf-8")
        except OSError as e:
            logger.error(f"Error generating accessibility report: {e}")
            raise ExternalToolError(f"Could not write accessibility report {report_path}: {e}") from e
        logger.info(f"Accessibility report saved: {report_path}")
        return str(report_path)
