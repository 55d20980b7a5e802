"""
Fixtures for browser-driven tests against the bundled sample form.

Set E2E_RUN_BROWSER=1 to run them; TestSettings__* environment variables
select the browser and headless mode.
"""
import os
from dataclasses import replace
from pathlib import Path

import pytest

from browser_framework.browser import BrowserSession
from browser_framework.config import load_settings
from browser_framework.logging_utils import setup_logging
from browser_framework.pages import SampleFormPage

REPO_ROOT = Path(__file__).resolve().parents[2]
DATA_DIR = REPO_ROOT / "tests" / "data"


def pytest_collection_modifyitems(config, items):
    if os.environ.get("E2E_RUN_BROWSER") == "1":
        return
    skip = pytest.mark.skip(reason="browser tests disabled (set E2E_RUN_BROWSER=1)")
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip)


@pytest.fixture
def browser_settings(tmp_path):
    """Repository settings pointed at the local sample form"""
    config = load_settings(os.environ.get("E2E_SETTINGS_FILE", REPO_ROOT / "appsettings.json"))
    setup_logging(replace(config.logging, log_to_file=False))
    return replace(config.settings, base_url=DATA_DIR.as_uri(), slow_mo=0, artifacts_dir=str(tmp_path))


@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item, call):
    outcome = yield
    report = outcome.get_result()
    setattr(item, f"rep_{report.when}", report)


@pytest.fixture
def session(request, browser_settings):
    """One browser per test; a failing test leaves a screenshot under tmp_path"""
    browser_session = BrowserSession(browser_settings, request.node.name).__enter__()
    yield browser_session
    report = getattr(request.node, "rep_call", None)
    browser_session.close(failed=report is None or report.failed)


@pytest.fixture
def form_page(session, browser_settings):
    page = SampleFormPage(session.driver, browser_settings)
    page.navigate()
    page.verify_page_loaded()
    return page
