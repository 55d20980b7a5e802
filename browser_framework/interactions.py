"""Semantic actions on page elements.

Every action resolves its locator fresh, waits for the element to be visible
with the configured default timeout, then issues a single state-changing call
to the browser.
"""

import logging
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional, Sequence, Union

from selenium.common.exceptions import (
    ElementClickInterceptedException,
    ElementNotInteractableException,
    InvalidArgumentException,
    InvalidElementStateException,
    NoSuchElementException,
    StaleElementReferenceException,
    UnexpectedTagNameException,
    WebDriverException,
)
from selenium.webdriver.common.keys import Keys
from selenium.webdriver.remote.webdriver import WebDriver
from selenium.webdriver.remote.webelement import WebElement
from selenium.webdriver.support.ui import Select

from .config import Settings
from .exceptions import ActionFailedError, ResolutionError, ValidationError
from .locators import ElementLocators, Locator, LookupResult, lookup, resolve_all
from .waits import WaitHelpers

logger = logging.getLogger(__name__)

# Raised by the browser when it refuses the action itself
ACTION_ERRORS = (
    ElementClickInterceptedException,
    ElementNotInteractableException,
    InvalidElementStateException,
    InvalidArgumentException,
)

# Raised when the element is gone or never existed
RESOLUTION_ERRORS = (NoSuchElementException, StaleElementReferenceException)

PathLike = Union[str, Path]


class ElementInteractions:
    """Fill, check, select, click, upload and read elements located by ElementLocators."""

    def __init__(
        self,
        driver: WebDriver,
        settings: Settings,
        locators: Optional[ElementLocators] = None,
        waits: Optional[WaitHelpers] = None,
    ):
        self.driver = driver
        self.settings = settings
        self.locators = locators or ElementLocators(driver)
        self.waits = waits or WaitHelpers(driver, settings)

    @contextmanager
    def _action(self, description: str) -> Iterator[None]:
        """Translate Selenium failures of one action into framework errors."""
        try:
            yield
        except RESOLUTION_ERRORS as e:
            logger.error(f"Element lost while trying to {description}: {e.msg}")
            raise ResolutionError(f"Could not {description}: {e.msg}") from e
        except (ACTION_ERRORS + (UnexpectedTagNameException,)) as e:
            logger.error(f"Browser rejected action '{description}': {e.msg}")
            raise ActionFailedError(f"Could not {description}: {e.msg}") from e
        except WebDriverException as e:
            logger.error(f"WebDriver error while trying to {description}: {e.msg}")
            raise ResolutionError(f"Could not {description}: {e.msg}") from e

    def _visible(self, locator: Locator) -> WebElement:
        return self.waits.wait_for_element_visible(locator)

    def _slow_mo(self) -> None:
        if self.settings.slow_mo > 0:
            time.sleep(self.settings.slow_mo / 1000)

    # Generic actions

    def fill(self, locator: Locator, text: str, clear_first: bool = True) -> None:
        """
        Type text into an input.

        Args:
            locator: Textbox or combobox locator
            text: Text to enter (may be empty)
            clear_first: Replace existing content instead of appending to it
        """
        logger.info(f"Entering text '{text}' in {locator}")
        element = self._visible(locator)
        with self._action(f"enter text in {locator}"):
            if clear_first:
                element.clear()
            if text:
                element.send_keys(text)
        self._slow_mo()

    def read_value(self, locator: Locator) -> str:
        """Return the current value of an input ('' when it has none)."""
        element = self._visible(locator)
        with self._action(f"read value of {locator}"):
            value = element.get_property("value")
        value = "" if value is None else str(value)
        logger.info(f"Value of {locator}: '{value}'")
        return value

    def read_text(self, locator: Locator) -> str:
        """Return the text content of an element ('' when it has none)."""
        element = self._visible(locator)
        with self._action(f"read text of {locator}"):
            text = element.get_attribute("textContent")
        text = (text or "").strip()
        logger.info(f"Text of {locator}: '{text}'")
        return text

    def is_checked(self, locator: Locator) -> bool:
        element = self._visible(locator)
        with self._action(f"read state of {locator}"):
            checked = element.is_selected()
        logger.info(f"{locator} checked: {checked}")
        return checked

    def check(self, locator: Locator) -> None:
        """Check a checkbox or radio button; already checked elements are left alone."""
        logger.info(f"Checking {locator}")
        element = self._visible(locator)
        with self._action(f"check {locator}"):
            if element.is_selected():
                logger.info(f"{locator} already checked")
                return
            element.click()
        self._slow_mo()

    def uncheck(self, locator: Locator) -> None:
        """Uncheck a checkbox; already unchecked elements are left alone."""
        logger.info(f"Unchecking {locator}")
        element = self._visible(locator)
        with self._action(f"uncheck {locator}"):
            if not element.is_selected():
                logger.info(f"{locator} already unchecked")
                return
            element.click()
        self._slow_mo()

    def toggle(self, locator: Locator) -> None:
        """Flip a checkbox exactly once."""
        if self.is_checked(locator):
            self.uncheck(locator)
        else:
            self.check(locator)

    def select_option(self, locator: Locator, text: Optional[str] = None, value: Optional[str] = None) -> None:
        """
        Select a dropdown option by its visible text or by its value.

        Raises:
            ValueError: If neither or both of text and value are given
        """
        if (text is None) == (value is None):
            raise ValueError("select_option needs exactly one of text or value")
        logger.info(f"Selecting option {'text' if text is not None else 'value'} '{text or value}' in {locator}")
        element = self._visible(locator)
        with self._action(f"select option in {locator}"):
            select = Select(element)
            if text is not None:
                select.select_by_visible_text(text)
            else:
                select.select_by_value(value)
        self._slow_mo()

    def get_selected_option_text(self, locator: Locator) -> str:
        element = self._visible(locator)
        with self._action(f"read selected option of {locator}"):
            selected = Select(element).all_selected_options
            text = selected[0].text if selected else ""
        logger.info(f"Selected option in {locator}: '{text}'")
        return text or ""

    def click(self, locator: Locator) -> None:
        logger.info(f"Clicking {locator}")
        element = self._visible(locator)
        with self._action(f"click {locator}"):
            element.click()
        self._slow_mo()

    def upload(self, locator: Locator, file_paths: Union[PathLike, Sequence[PathLike]]) -> None:
        """
        Set one or more files on a file input.

        All paths are checked before the browser is touched; if any is missing
        nothing is uploaded.

        Raises:
            ValidationError: If any file does not exist
        """
        if isinstance(file_paths, (str, Path)):
            file_paths = [file_paths]
        paths = [Path(p) for p in file_paths]
        if not paths:
            raise ValidationError(f"No files given for upload to {locator}")
        for path in paths:
            if not path.is_file():
                logger.error(f"File not found: {path}")
                raise ValidationError(f"File not found: {path}")

        logger.info(f"Uploading {len(paths)} file(s) to {locator}")
        element = self._visible(locator)
        with self._action(f"upload files to {locator}"):
            element.send_keys("\n".join(str(p.resolve()) for p in paths))
        self._slow_mo()

    def find(self, locator: Locator) -> LookupResult:
        """Look up an element without waiting; returns Found or NotFound."""
        return lookup(self.driver, locator)

    def is_element_present(self, locator: Locator) -> bool:
        """Return whether locator currently matches anything; resolution failures count as absent."""
        try:
            present = len(resolve_all(self.driver, locator)) > 0
        except ResolutionError:
            present = False
        logger.info(f"Element present check for {locator}: {present}")
        return present

    # Textboxes

    def enter_text_in_textbox_by_id(self, element_id: str, text: str, clear_first: bool = True) -> None:
        self.fill(self.locators.textbox_by_id(element_id), text, clear_first)

    def enter_text_in_textbox_by_name(self, name: str, text: str, clear_first: bool = True) -> None:
        self.fill(self.locators.textbox_by_name(name), text, clear_first)

    def enter_text_in_textbox_by_placeholder(self, placeholder: str, text: str, clear_first: bool = True) -> None:
        self.fill(self.locators.textbox_by_placeholder(placeholder), text, clear_first)

    def enter_text_in_textbox_by_label(self, label_text: str, text: str, clear_first: bool = True) -> None:
        self.fill(self.locators.textbox_by_label(label_text), text, clear_first)

    def get_text_from_textbox_by_id(self, element_id: str) -> str:
        return self.read_value(self.locators.textbox_by_id(element_id))

    def get_text_from_textbox_by_name(self, name: str) -> str:
        return self.read_value(self.locators.textbox_by_name(name))

    # Radio buttons

    def select_radio_button_by_value(self, value: str) -> None:
        self.check(self.locators.radio_by_value(value))

    def select_radio_button_by_name_and_value(self, name: str, value: str) -> None:
        self.check(self.locators.radio_by_name_and_value(name, value))

    def select_radio_button_by_label(self, label_text: str) -> None:
        self.check(self.locators.radio_by_label(label_text))

    def is_radio_button_selected_by_value(self, value: str) -> bool:
        return self.is_checked(self.locators.radio_by_value(value))

    # Checkboxes

    def check_checkbox_by_id(self, element_id: str) -> None:
        self.check(self.locators.checkbox_by_id(element_id))

    def uncheck_checkbox_by_id(self, element_id: str) -> None:
        self.uncheck(self.locators.checkbox_by_id(element_id))

    def toggle_checkbox_by_id(self, element_id: str) -> None:
        self.toggle(self.locators.checkbox_by_id(element_id))

    def check_checkbox_by_label(self, label_text: str) -> None:
        self.check(self.locators.checkbox_by_label(label_text))

    def is_checkbox_checked_by_id(self, element_id: str) -> bool:
        return self.is_checked(self.locators.checkbox_by_id(element_id))

    # Dropdowns

    def select_dropdown_by_text(self, dropdown_id: str, option_text: str) -> None:
        self.select_option(self.locators.dropdown_by_id(dropdown_id), text=option_text)

    def select_dropdown_by_value(self, dropdown_id: str, option_value: str) -> None:
        self.select_option(self.locators.dropdown_by_id(dropdown_id), value=option_value)

    def get_selected_dropdown_text(self, dropdown_id: str) -> str:
        return self.get_selected_option_text(self.locators.dropdown_by_id(dropdown_id))

    # Comboboxes

    def enter_text_in_combobox_by_id(self, element_id: str, text: str) -> None:
        self.fill(self.locators.combobox_by_id(element_id), text)

    def select_combobox_option(self, combobox_id: str, option_text: str) -> None:
        """Type into a datalist-backed input and accept the first suggestion."""
        locator = self.locators.combobox_by_id(combobox_id)
        logger.info(f"Selecting '{option_text}' in {locator}")
        element = self._visible(locator)
        with self._action(f"select option in {locator}"):
            element.clear()
            element.send_keys(option_text, Keys.ARROW_DOWN, Keys.ENTER)
        self._slow_mo()

    # File inputs

    def upload_file_by_id(self, element_id: str, file_path: PathLike) -> None:
        self.upload(self.locators.file_input_by_id(element_id), [file_path])

    def upload_multiple_files_by_id(self, element_id: str, file_paths: Sequence[PathLike]) -> None:
        self.upload(self.locators.file_input_by_id(element_id), file_paths)

    # Buttons and links

    def click_button_by_text(self, text: str) -> None:
        self.click(self.locators.button_by_text(text))

    def click_button_by_id(self, element_id: str) -> None:
        self.click(self.locators.button_by_id(element_id))

    def click_button_by_name(self, name: str) -> None:
        self.click(self.locators.button_by_name(name))

    def click_link_by_text(self, text: str) -> None:
        self.click(self.locators.link_by_text(text))

    # Generic

    def click_element_by_selector(self, selector: str) -> None:
        self.click(self.locators.by_selector(selector))

    def get_text_by_selector(self, selector: str) -> str:
        return self.read_text(self.locators.by_selector(selector))
