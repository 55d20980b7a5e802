"""
Pytest configuration and fixtures for browser framework tests
"""
from unittest.mock import MagicMock

import pytest

from browser_framework.accessibility import _axe_sources
from browser_framework.config import Settings, reset_config
from browser_framework.logging_utils import reset_logging


@pytest.fixture(autouse=True)
def reset_process_state():
    """Give every test a fresh configuration, logging setup and axe-core cache"""
    reset_config()
    reset_logging()
    _axe_sources.clear()
    yield
    reset_config()
    reset_logging()
    _axe_sources.clear()


@pytest.fixture
def settings(tmp_path):
    """Settings with short timeouts, no slow motion and artifacts under tmp_path"""
    return Settings(
        base_url="http://test.com",
        timeout=200,
        slow_mo=0,
        artifacts_dir=str(tmp_path),
    )


@pytest.fixture
def mock_driver():
    """Create mock WebDriver"""
    driver = MagicMock()
    driver.current_url = "http://test.com/page"
    driver.title = "Test Page"
    driver.page_source = "<html><body>Test</body></html>"
    driver.get_screenshot_as_png.return_value = b"\x89PNG"
    driver.execute_script.return_value = "complete"
    return driver


@pytest.fixture
def mock_element():
    """Create a visible, enabled, unchecked mock element"""
    element = MagicMock()
    element.is_displayed.return_value = True
    element.is_enabled.return_value = True
    element.is_selected.return_value = False
    return element
