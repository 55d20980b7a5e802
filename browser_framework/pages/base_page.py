"""Page object base class: navigation, page checks and debug artifacts."""

import logging
import time
from pathlib import Path
from typing import Optional

from selenium.common.exceptions import TimeoutException, WebDriverException
from selenium.webdriver.remote.webdriver import WebDriver

from ..config import Settings
from ..exceptions import ActionFailedError, ValidationError, WaitTimeoutError
from ..interactions import ElementInteractions
from ..locators import ElementLocators
from ..waits import WaitHelpers

logger = logging.getLogger(__name__)


def timestamp() -> str:
    return time.strftime("%Y%m%d_%H%M%S")


class BasePage:
    """Common behaviour of page objects built on locators, waits and interactions."""

    def __init__(self, driver: WebDriver, settings: Settings):
        """
        Initialize page object.

        Args:
            driver: Selenium WebDriver instance
            settings: Test settings (base URL, timeouts, artifact directories)
        """
        self.driver = driver
        self.settings = settings
        self.locators = ElementLocators(driver)
        self.waits = WaitHelpers(driver, settings)
        self.interactions = ElementInteractions(driver, settings, self.locators, self.waits)

    @property
    def base_url(self) -> str:
        return self.settings.base_url.rstrip("/")

    def navigate_to(self, url: str = "") -> None:
        """
        Navigate to an absolute URL, or to a path relative to the base URL, and wait for the load.

        Raises:
            WaitTimeoutError: If the page does not load within the page-load timeout
            ActionFailedError: If the browser cannot reach the URL or the session is gone
        """
        if "://" not in url:
            url = f"{self.base_url}{url}"
        logger.info(f"Navigating to URL: {url}")
        try:
            self.driver.get(url)
        except TimeoutException as e:
            logger.error(f"Page load timed out: {url}")
            raise WaitTimeoutError(f"page load of {url}", self.settings.timeout) from e
        except WebDriverException as e:
            logger.error(f"Navigation to {url} failed: {e.msg}")
            raise ActionFailedError(f"Could not navigate to {url}: {e.msg}") from e
        self.waits.wait_for_page_load()
        logger.info("Navigation completed successfully")

    def get_current_url(self) -> str:
        """Return the URL the browser is on."""
        url = self.driver.current_url
        logger.info(f"Current URL: {url}")
        return url

    def get_page_title(self) -> str:
        """Return the document title."""
        title = self.driver.title
        logger.info(f"Page title: {title}")
        return title

    def verify_page_loaded(self, expected_title: str) -> bool:
        title = self.get_page_title()
        if expected_title not in title:
            raise ValidationError(f"Page title '{title}' does not contain '{expected_title}'")
        logger.info(f"Page loaded: {title}")
        return True

    def wait_for_element_visible(self, selector: str, timeout_ms: Optional[int] = None) -> None:
        """Wait for the element matching a CSS selector to be visible."""
        self.waits.wait_for_element_visible(self.locators.by_selector(selector), timeout_ms)

    def is_element_present(self, selector: str) -> bool:
        """Check if an element matching a CSS selector is in the DOM."""
        return self.interactions.is_element_present(self.locators.by_selector(selector))

    def take_screenshot(self, file_name: Optional[str] = None) -> str:
        """
        Save a full-page screenshot where the driver supports it, the viewport otherwise.

        Args:
            file_name: File name inside the screenshots directory (timestamped default)

        Returns:
            Path of the written PNG file
        """
        file_name = file_name or f"screenshot_{timestamp()}.png"
        directory = self.settings.screenshots_dir
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / file_name
        save_screenshot(self.driver, path)
        logger.info(f"Screenshot saved: {path}")
        return str(path)

    def save_page_source(self, name: str) -> str:
        """
        Save the current page source next to the screenshots.

        Args:
            name: Base name for the file (no extension)

        Returns:
            Path of the written HTML file
        """
        directory = self.settings.screenshots_dir
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / f"{name}-{timestamp()}.html"
        with open(path, "w", encoding="utf-8") as f:
            f.write(self.driver.page_source)
        logger.info(f"Page source saved: {path}")
        return str(path)

    def save_debug_artifacts(self, name: str) -> dict:
        """Capture a screenshot and the page source under one name."""
        return {
            "screenshot": self.take_screenshot(f"{name}-{timestamp()}.png"),
            "page_source": self.save_page_source(name),
        }


def save_screenshot(driver: WebDriver, path: Path) -> None:
    """Write a PNG of the page; Firefox can capture the full page, other drivers the viewport."""
    full_page = getattr(driver, "save_full_page_screenshot", None)
    if callable(full_page):
        full_page(str(path))
    else:
        driver.save_screenshot(str(path))
