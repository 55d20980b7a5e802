"""Wait helpers for synchronizing tests with the page.

Every wait takes a timeout in milliseconds; 0 or None means the configured
default timeout. A wait either returns once its condition holds, raises
WaitTimeoutError when the timeout expires, or raises ResolutionError when the
page or session can no longer be queried.
"""

import logging
import re
import time
from typing import Callable, Optional, Pattern, Union

from selenium.common.exceptions import (
    NoSuchElementException,
    StaleElementReferenceException,
    TimeoutException,
    WebDriverException,
)
from selenium.webdriver.remote.webdriver import WebDriver
from selenium.webdriver.support import expected_conditions as EC
from selenium.webdriver.support.ui import WebDriverWait

from .config import Settings, Timeouts
from .exceptions import ResolutionError, WaitTimeoutError
from .locators import Locator

logger = logging.getLogger(__name__)

# Errors that mean "not there yet": the query is re-run on the next poll
TRANSIENT_ERRORS = (NoSuchElementException, StaleElementReferenceException)

NETWORK_IDLE_SCRIPT = "return [document.readyState, performance.getEntriesByType('resource').length];"


def glob_to_regex(pattern: str) -> Pattern[str]:
    """
    Compile a URL glob into a regular expression matching the whole URL.

    ``**`` matches any run of characters, ``*`` any run without ``/``, and
    ``?`` a single character other than ``/``. Everything else is literal.
    """
    parts = []
    i = 0
    while i < len(pattern):
        if pattern.startswith("**", i):
            parts.append(".*")
            i += 2
        elif pattern[i] == "*":
            parts.append("[^/]*")
            i += 1
        elif pattern[i] == "?":
            parts.append("[^/]")
            i += 1
        else:
            parts.append(re.escape(pattern[i]))
            i += 1
    return re.compile("".join(parts) + r"\Z", re.DOTALL)


class WaitHelpers:
    """Explicit waits on locators and on the page itself."""

    def __init__(self, driver: WebDriver, settings: Settings):
        """
        Initialize wait helpers.

        Args:
            driver: Selenium WebDriver instance
            settings: Test settings providing the default timeout
        """
        self.driver = driver
        self.settings = settings

    def resolve_timeout(self, timeout_ms: Optional[int]) -> int:
        if timeout_ms is None or timeout_ms <= 0:
            return self.settings.timeout
        return timeout_ms

    def _until(
        self,
        condition: Callable[[WebDriver], object],
        description: str,
        timeout_ms: Optional[int],
        polling_interval_ms: int = Timeouts.POLL_INTERVAL,
    ):
        """Poll condition until it returns a truthy value and return that value."""
        timeout = self.resolve_timeout(timeout_ms)
        logger.info(f"Waiting for {description} (timeout: {timeout}ms)")
        wait = WebDriverWait(
            self.driver, timeout / 1000, poll_frequency=polling_interval_ms / 1000, ignored_exceptions=TRANSIENT_ERRORS
        )
        try:
            result = wait.until(condition)
        except TimeoutException as e:
            logger.error(f"Timed out after {timeout}ms waiting for {description}")
            raise WaitTimeoutError(description, timeout) from e
        except WebDriverException as e:
            logger.error(f"Error while waiting for {description}: {e.msg}")
            raise ResolutionError(f"Could not evaluate {description}: {e.msg}") from e
        logger.info(f"Condition met: {description}")
        return result

    # Element state

    def wait_for_element_visible(self, locator: Locator, timeout_ms: Optional[int] = None):
        """Wait until the first match of locator is displayed; returns that element."""
        return self._until(EC.visibility_of_element_located(locator.as_tuple()), f"{locator} to be visible", timeout_ms)

    def wait_for_element_hidden(self, locator: Locator, timeout_ms: Optional[int] = None) -> None:
        """Wait until locator matches nothing visible (absent elements count as hidden)."""
        self._until(EC.invisibility_of_element_located(locator.as_tuple()), f"{locator} to be hidden", timeout_ms)

    def wait_for_element_attached(self, locator: Locator, timeout_ms: Optional[int] = None):
        """Wait until locator matches an element in the DOM; returns that element."""
        return self._until(EC.presence_of_element_located(locator.as_tuple()), f"{locator} to be attached", timeout_ms)

    def wait_for_element_detached(self, locator: Locator, timeout_ms: Optional[int] = None) -> None:
        """Wait until locator matches nothing in the DOM."""
        self._until(lambda d: len(d.find_elements(*locator.as_tuple())) == 0, f"{locator} to be detached", timeout_ms)

    # Page state

    def wait_for_page_load(self, timeout_ms: Optional[int] = None) -> None:
        self._until(
            lambda d: d.execute_script("return document.readyState") == "complete", "page load", timeout_ms
        )

    def wait_for_dom_content_loaded(self, timeout_ms: Optional[int] = None) -> None:
        self._until(
            lambda d: d.execute_script("return document.readyState") in ("interactive", "complete"),
            "DOM content loaded",
            timeout_ms,
        )

    def wait_for_network_idle(self, timeout_ms: Optional[int] = None, quiet_ms: int = Timeouts.NETWORK_IDLE_QUIET) -> None:
        """
        Wait until the page is loaded and no new resources were requested for quiet_ms.

        WebDriver exposes no network events, so this watches the resource timing
        entries of the page instead.
        """
        state = {"count": -1, "since": 0.0}

        def idle(d: WebDriver) -> bool:
            ready_state, count = d.execute_script(NETWORK_IDLE_SCRIPT)
            now = time.monotonic()
            if ready_state != "complete" or count != state["count"]:
                state["count"] = count
                state["since"] = now
                return False
            return (now - state["since"]) * 1000 >= quiet_ms

        self._until(idle, "network idle", timeout_ms, polling_interval_ms=100)

    def wait_for_url(self, url_pattern: Union[str, Pattern[str]], timeout_ms: Optional[int] = None) -> None:
        """
        Wait until the current URL matches.

        Args:
            url_pattern: Glob pattern (``**/form.html*``, see glob_to_regex) or compiled regular expression
            timeout_ms: Timeout in milliseconds
        """
        if isinstance(url_pattern, str):
            description = f"URL to match '{url_pattern}'"
            glob = glob_to_regex(url_pattern)
            matches = lambda url: glob.match(url) is not None  # noqa: E731
        else:
            description = f"URL to match /{url_pattern.pattern}/"
            regex = url_pattern
            matches = lambda url: regex.search(url) is not None  # noqa: E731
        self._until(lambda d: matches(d.current_url), description, timeout_ms)

    # Predicates

    def wait_for_condition(
        self,
        condition: Callable[[], bool],
        timeout_ms: Optional[int] = None,
        polling_interval_ms: int = Timeouts.POLL_INTERVAL,
        description: str = "custom condition",
    ) -> None:
        """
        Poll a caller-supplied predicate at a fixed interval.

        Args:
            condition: Callable returning True once the condition holds
            timeout_ms: Timeout in milliseconds
            polling_interval_ms: Delay between checks
            description: Used in log and timeout messages
        """
        self._until(lambda _: bool(condition()), description, timeout_ms, polling_interval_ms)

    def wait_for_text(self, locator: Locator, expected_text: str, timeout_ms: Optional[int] = None) -> None:
        """Wait until the first match of locator contains expected_text."""

        def has_text(d: WebDriver) -> bool:
            element = d.find_element(*locator.as_tuple())
            return expected_text in (element.get_attribute("textContent") or "")

        self._until(has_text, f"text '{expected_text}' in {locator}", timeout_ms)

    def wait_for_count(self, locator: Locator, expected_count: int, timeout_ms: Optional[int] = None) -> None:
        """Wait until locator matches exactly expected_count elements."""
        self._until(
            lambda d: len(d.find_elements(*locator.as_tuple())) == expected_count,
            f"{expected_count} matches of {locator}",
            timeout_ms,
        )

    def smart_wait(self, locator: Locator, timeout_ms: Optional[int] = None):
        """Wait for locator to be attached, then visible, then let animations settle."""
        timeout = self.resolve_timeout(timeout_ms)
        logger.info(f"Performing smart wait on {locator} (timeout: {timeout}ms)")
        self.wait_for_element_attached(locator, timeout)
        element = self.wait_for_element_visible(locator, timeout)
        time.sleep(Timeouts.SETTLE_DELAY / 1000)
        logger.info("Smart wait completed successfully")
        return element
