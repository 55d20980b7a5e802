"""Browser lifecycle: WebDriver creation and per-scenario sessions."""

import json
import logging
import platform
import shutil
import time
import zipfile
from typing import Optional, Sequence, Tuple

from selenium import webdriver
from selenium.webdriver.chrome.options import Options as ChromeOptions
from selenium.webdriver.chrome.service import Service as ChromeService
from selenium.webdriver.edge.options import Options as EdgeOptions
from selenium.webdriver.firefox.options import Options as FirefoxOptions
from selenium.webdriver.firefox.service import Service as FirefoxService
from selenium.webdriver.remote.webdriver import WebDriver

from .config import Settings
from .exceptions import BrowserSetupError
from .pages.base_page import save_screenshot, timestamp

logger = logging.getLogger(__name__)

ARM_ARCHITECTURES = ("aarch64", "arm64", "armv7l")

# Flags shared by the Chromium-based browsers
CHROMIUM_ARGUMENTS = (
    "--no-sandbox",
    "--disable-dev-shm-usage",
    "--disable-gpu",
    "--disable-extensions",
    "--disable-notifications",
    # file:// pages may load local scripts
    "--allow-file-access-from-files",
)


def find_system_driver(browser_names: Sequence[str], driver_name: str) -> Tuple[Optional[str], Optional[str]]:
    """
    Locate a system browser binary and its driver on ARM hosts.

    Selenium Manager ships no ARM drivers, so on ARM the packaged browser and
    driver from PATH are used. Returns (None, None) on other architectures.

    Args:
        browser_names: Candidate browser executables, in order of preference
        driver_name: Driver executable name

    Returns:
        (browser path, driver path); either may be None when not installed
    """
    arch = platform.machine().lower()
    if arch not in ARM_ARCHITECTURES:
        return None, None
    logger.info(f"Detected ARM architecture ({arch}), looking up system {driver_name}")
    browser_path = next((p for p in map(shutil.which, browser_names) if p), None)
    driver_path = shutil.which(driver_name)
    if browser_path:
        logger.info(f"Using browser binary: {browser_path}")
    if not driver_path:
        logger.warning(f"{driver_name} not found in PATH, falling back to Selenium Manager")
    return browser_path, driver_path


class BrowserFactory:
    """Creates WebDriver instances for the configured browser."""

    @staticmethod
    def create_driver(settings: Settings) -> WebDriver:
        """
        Create a WebDriver instance configured from settings.

        Args:
            settings: Browser kind, headless flag, viewport and timeout

        Returns:
            Configured WebDriver instance

        Raises:
            BrowserSetupError: If the browser cannot be launched or configured
        """
        creators = {
            "chrome": BrowserFactory._create_chrome,
            "firefox": BrowserFactory._create_firefox,
            "edge": BrowserFactory._create_edge,
        }
        browser_type = settings.browser
        driver = None
        try:
            if browser_type not in creators:
                raise ValueError(f"Unsupported browser type: {browser_type}")
            logger.info(f"Launching {browser_type} (headless: {settings.headless})")
            driver = creators[browser_type](settings.headless)

            driver.set_window_size(settings.viewport_width, settings.viewport_height)
            driver.set_page_load_timeout(settings.timeout_seconds)
            if settings.video:
                logger.warning("Video recording is not available through WebDriver; ignoring Video setting")
            logger.info(f"{browser_type} browser ready")
            return driver
        except Exception as e:
            logger.error(f"Could not start {browser_type}: {e}")
            if driver is not None:
                driver.quit()
            raise BrowserSetupError(f"Failed to create {browser_type} browser: {e}") from e

    @staticmethod
    def _create_chrome(headless: bool) -> WebDriver:
        options = ChromeOptions()
        if headless:
            options.add_argument("--headless=new")
        for argument in CHROMIUM_ARGUMENTS:
            options.add_argument(argument)
        options.page_load_strategy = "normal"

        browser_path, driver_path = find_system_driver(("chromium", "chromium-browser"), "chromedriver")
        if browser_path:
            options.binary_location = browser_path
        if driver_path:
            return webdriver.Chrome(service=ChromeService(executable_path=driver_path), options=options)
        return webdriver.Chrome(options=options)

    @staticmethod
    def _create_firefox(headless: bool) -> WebDriver:
        options = FirefoxOptions()
        if headless:
            options.add_argument("--headless")
        options.set_preference("dom.webnotifications.enabled", False)
        options.set_preference("media.volume_scale", "0.0")

        browser_path, driver_path = find_system_driver(("firefox", "firefox-esr"), "geckodriver")
        if browser_path:
            options.binary_location = browser_path
        if driver_path:
            return webdriver.Firefox(service=FirefoxService(executable_path=driver_path), options=options)
        return webdriver.Firefox(options=options)

    @staticmethod
    def _create_edge(headless: bool) -> WebDriver:
        # Edge has no ARM Linux builds; Selenium Manager handles it everywhere else
        options = EdgeOptions()
        if headless:
            options.add_argument("--headless=new")
        for argument in CHROMIUM_ARGUMENTS:
            options.add_argument(argument)
        return webdriver.Edge(options=options)


class BrowserSession:
    """
    One browser per test scenario.

    Entering the context launches the browser. Leaving it saves a failure
    screenshot (when the block raised and screenshots are enabled), writes a
    trace bundle (when tracing is enabled) and always quits the browser.
    """

    def __init__(self, settings: Settings, name: str = "session"):
        self.settings = settings
        self.name = "".join(c if c.isalnum() or c in "-_" else "_" for c in name)
        self.driver: Optional[WebDriver] = None
        self.screenshot_path: Optional[str] = None
        self.trace_path: Optional[str] = None

    def __enter__(self) -> "BrowserSession":
        logger.info(f"Starting scenario: {self.name}")
        self.driver = BrowserFactory.create_driver(self.settings)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close(failed=exc_type is not None)
        return False

    def close(self, failed: bool = False) -> None:
        """Save artifacts as configured, then quit the browser."""
        if self.driver is None:
            return
        try:
            if failed and self.settings.screenshot:
                try:
                    self.screenshot_path = self.save_failure_screenshot()
                except Exception as e:
                    logger.warning(f"Failed to save screenshot: {e}")
            if self.settings.trace:
                try:
                    self.trace_path = self.save_trace()
                except Exception as e:
                    logger.warning(f"Failed to save trace: {e}")
        finally:
            driver, self.driver = self.driver, None
            try:
                driver.quit()
                logger.info(f"Browser closed for scenario: {self.name}")
            except Exception as e:
                logger.error(f"Error during scenario cleanup: {e}")

    def save_failure_screenshot(self) -> str:
        directory = self.settings.screenshots_dir
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / f"{self.name}_{timestamp()}.png"
        save_screenshot(self.driver, path)
        logger.info(f"Screenshot saved: {path}")
        return str(path)

    def save_trace(self) -> str:
        """
        Write a zip bundle with the page state at the end of the scenario.

        Contains metadata.json (URL, title, browser), page.html, screenshot.png
        and, where the driver exposes it, browser.log.
        """
        directory = self.settings.traces_dir
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / f"{self.name}_{timestamp()}.zip"
        metadata = {
            "scenario": self.name,
            "browser": self.settings.browser,
            "url": self.driver.current_url,
            "title": self.driver.title,
            "saved_at": time.strftime("%Y-%m-%dT%H:%M:%S"),
        }
        with zipfile.ZipFile(path, "w", compression=zipfile.ZIP_DEFLATED) as bundle:
            bundle.writestr("metadata.json", json.dumps(metadata, indent=2))
            bundle.writestr("page.html", self.driver.page_source)
            bundle.writestr("screenshot.png", self.driver.get_screenshot_as_png())
            get_log = getattr(self.driver, "get_log", None)
            if callable(get_log):
                try:
                    entries = get_log("browser")
                except Exception:  # geckodriver has no log endpoint
                    entries = None
                if entries:
                    bundle.writestr("browser.log", "\n".join(json.dumps(e) for e in entries))
        logger.info(f"Trace saved: {path}")
        return str(path)
