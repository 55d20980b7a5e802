"""Accessibility scans of the sample registration form with axe-core."""

import os

import pytest

from browser_framework.accessibility import AXE_CDN_URL, AxeAccessibilityTester, Severity

pytestmark = pytest.mark.integration


@pytest.fixture
def tester(form_page, browser_settings):
    # E2E_AXE_SOURCE may point at a local axe.min.js for offline runs
    return AxeAccessibilityTester(form_page.driver, browser_settings, os.environ.get("E2E_AXE_SOURCE", AXE_CDN_URL))


def test_full_page_scan_and_report(tester, browser_settings):
    result = tester.run_full_scan()

    assert result.passes
    assert result.count_by_severity()[Severity.CRITICAL] == 0

    path = tester.generate_report(result, "sample-form.html")
    assert (browser_settings.reports_dir / "sample-form.html").is_file()
    with open(path, encoding="utf-8") as f:
        assert "Accessibility Test Report" in f.read()


def test_form_scan(tester, form_page):
    result = tester.run_element_scan(form_page.locators.by_selector("#registrationForm"))
    assert result.count_by_severity()[Severity.CRITICAL] == 0


def test_page_accessible_with_allowed_rules(tester):
    assert tester.is_page_accessible(["color-contrast", "region"]) is True
