"""Reusable element locators for common HTML controls.

Locators are queries, not elements: building one never touches the page, and
every use resolves it again against the live DOM, so a locator cannot go stale.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Tuple, Union

from selenium.common.exceptions import InvalidSelectorException, WebDriverException
from selenium.webdriver.common.by import By
from selenium.webdriver.remote.webdriver import WebDriver
from selenium.webdriver.remote.webelement import WebElement

from .exceptions import ResolutionError

logger = logging.getLogger(__name__)


class ElementCategory(Enum):
    TEXTBOX = "textbox"
    RADIO = "radio"
    CHECKBOX = "checkbox"
    DROPDOWN = "dropdown"
    COMBOBOX = "combobox"
    FILE_INPUT = "file input"
    BUTTON = "button"
    LINK = "link"
    GENERIC = "element"


@dataclass(frozen=True)
class Locator:
    """Element query: category, Selenium strategy and selector, plus a readable description."""

    category: ElementCategory
    by: str
    value: str
    description: str

    def as_tuple(self) -> Tuple[str, str]:
        return (self.by, self.value)

    def __str__(self) -> str:
        return f"{self.category.value} {self.description}"


@dataclass(frozen=True)
class Found:
    locator: Locator
    element: WebElement


@dataclass(frozen=True)
class NotFound:
    locator: Locator


LookupResult = Union[Found, NotFound]


def xpath_literal(text: str) -> str:
    """Quote a string for use inside an XPath expression."""
    if "'" not in text:
        return f"'{text}'"
    if '"' not in text:
        return f'"{text}"'
    parts = text.split("'")
    return "concat(" + ", \"'\", ".join(f"'{part}'" for part in parts) + ")"


def _union(*paths: str) -> str:
    return " | ".join(paths)


# HTML representations per category
TEXTBOX_INPUT = "input[@type='text' or @type='password' or @type='email' or @type='number']"
TEXTBOX_NODES = (TEXTBOX_INPUT, "textarea")
BUTTON_NODES = ("button", "input[@type='button']", "input[@type='submit']")
COMBOBOX_INPUT = "input[@type='text'][@list]"


def _associated_xpaths(label_text: str, control: str) -> Tuple[str, str]:
    """Controls a label is bound to: through its for attribute, or nested inside it."""
    text = xpath_literal(label_text)
    return (
        f"//{control}[@id=//label[contains(normalize-space(.), {text})]/@for]",
        f"//label[contains(normalize-space(.), {text})]//{control}",
    )


def _label_xpaths(label_text: str, control: str) -> Tuple[str, str, str]:
    """Like _associated_xpaths, but also accepts a control that directly follows its label."""
    text = xpath_literal(label_text)
    return _associated_xpaths(label_text, control) + (
        f"//label[contains(normalize-space(.), {text})]/following-sibling::*[1][self::{control}]",
    )


class ElementLocators:
    """Factory for element locators by category and discriminator."""

    def __init__(self, driver: WebDriver):
        self.driver = driver

    def _make(self, category: ElementCategory, xpath: str, description: str) -> Locator:
        logger.info(f"Locating {category.value} by {description}")
        return Locator(category, By.XPATH, xpath, description)

    # Textboxes

    def textbox_by_id(self, element_id: str) -> Locator:
        attr = f"[@id={xpath_literal(element_id)}]"
        return self._make(ElementCategory.TEXTBOX, _union(*(f"//{n}{attr}" for n in TEXTBOX_NODES)), f"id '{element_id}'")

    def textbox_by_name(self, name: str) -> Locator:
        attr = f"[@name={xpath_literal(name)}]"
        return self._make(ElementCategory.TEXTBOX, _union(*(f"//{n}{attr}" for n in TEXTBOX_NODES)), f"name '{name}'")

    def textbox_by_placeholder(self, placeholder: str) -> Locator:
        attr = f"[@placeholder={xpath_literal(placeholder)}]"
        return self._make(ElementCategory.TEXTBOX, _union(f"//input{attr}", f"//textarea{attr}"), f"placeholder '{placeholder}'")

    def textbox_by_label(self, label_text: str) -> Locator:
        paths = _label_xpaths(label_text, TEXTBOX_INPUT) + _label_xpaths(label_text, "textarea")
        return self._make(ElementCategory.TEXTBOX, _union(*paths), f"label '{label_text}'")

    # Radio buttons

    def radio_by_value(self, value: str) -> Locator:
        xpath = f"//input[@type='radio'][@value={xpath_literal(value)}]"
        return self._make(ElementCategory.RADIO, xpath, f"value '{value}'")

    def radio_by_name_and_value(self, name: str, value: str) -> Locator:
        xpath = f"//input[@type='radio'][@name={xpath_literal(name)}][@value={xpath_literal(value)}]"
        return self._make(ElementCategory.RADIO, xpath, f"name '{name}' and value '{value}'")

    def radio_by_label(self, label_text: str) -> Locator:
        return self._make(
            ElementCategory.RADIO, _union(*_associated_xpaths(label_text, "input[@type='radio']")), f"label '{label_text}'"
        )

    # Checkboxes

    def checkbox_by_id(self, element_id: str) -> Locator:
        xpath = f"//input[@type='checkbox'][@id={xpath_literal(element_id)}]"
        return self._make(ElementCategory.CHECKBOX, xpath, f"id '{element_id}'")

    def checkbox_by_name(self, name: str) -> Locator:
        xpath = f"//input[@type='checkbox'][@name={xpath_literal(name)}]"
        return self._make(ElementCategory.CHECKBOX, xpath, f"name '{name}'")

    def checkbox_by_label(self, label_text: str) -> Locator:
        return self._make(
            ElementCategory.CHECKBOX,
            _union(*_associated_xpaths(label_text, "input[@type='checkbox']")),
            f"label '{label_text}'",
        )

    def checkbox_by_value(self, value: str) -> Locator:
        xpath = f"//input[@type='checkbox'][@value={xpath_literal(value)}]"
        return self._make(ElementCategory.CHECKBOX, xpath, f"value '{value}'")

    # Dropdowns

    def dropdown_by_id(self, element_id: str) -> Locator:
        return self._make(ElementCategory.DROPDOWN, f"//select[@id={xpath_literal(element_id)}]", f"id '{element_id}'")

    def dropdown_by_name(self, name: str) -> Locator:
        return self._make(ElementCategory.DROPDOWN, f"//select[@name={xpath_literal(name)}]", f"name '{name}'")

    def dropdown_by_label(self, label_text: str) -> Locator:
        return self._make(ElementCategory.DROPDOWN, _union(*_label_xpaths(label_text, "select")), f"label '{label_text}'")

    # Comboboxes (text inputs bound to a datalist)

    def combobox_by_id(self, element_id: str) -> Locator:
        xpath = f"//{COMBOBOX_INPUT}[@id={xpath_literal(element_id)}]"
        return self._make(ElementCategory.COMBOBOX, xpath, f"id '{element_id}'")

    def combobox_by_name(self, name: str) -> Locator:
        xpath = f"//{COMBOBOX_INPUT}[@name={xpath_literal(name)}]"
        return self._make(ElementCategory.COMBOBOX, xpath, f"name '{name}'")

    def combobox_by_label(self, label_text: str) -> Locator:
        return self._make(ElementCategory.COMBOBOX, _union(*_label_xpaths(label_text, COMBOBOX_INPUT)), f"label '{label_text}'")

    # File inputs

    def file_input_by_id(self, element_id: str) -> Locator:
        xpath = f"//input[@type='file'][@id={xpath_literal(element_id)}]"
        return self._make(ElementCategory.FILE_INPUT, xpath, f"id '{element_id}'")

    def file_input_by_name(self, name: str) -> Locator:
        xpath = f"//input[@type='file'][@name={xpath_literal(name)}]"
        return self._make(ElementCategory.FILE_INPUT, xpath, f"name '{name}'")

    def file_input_by_label(self, label_text: str) -> Locator:
        return self._make(
            ElementCategory.FILE_INPUT, _union(*_label_xpaths(label_text, "input[@type='file']")), f"label '{label_text}'"
        )

    # Buttons and links

    def button_by_text(self, text: str) -> Locator:
        literal = xpath_literal(text)
        xpath = _union(
            f"//button[contains(normalize-space(.), {literal})]",
            f"//input[@type='button'][@value={literal}]",
            f"//input[@type='submit'][@value={literal}]",
        )
        return self._make(ElementCategory.BUTTON, xpath, f"text '{text}'")

    def button_by_id(self, element_id: str) -> Locator:
        attr = f"[@id={xpath_literal(element_id)}]"
        return self._make(ElementCategory.BUTTON, _union(*(f"//{n}{attr}" for n in BUTTON_NODES)), f"id '{element_id}'")

    def button_by_name(self, name: str) -> Locator:
        attr = f"[@name={xpath_literal(name)}]"
        return self._make(ElementCategory.BUTTON, _union(*(f"//{n}{attr}" for n in BUTTON_NODES)), f"name '{name}'")

    def link_by_text(self, text: str) -> Locator:
        return self._make(ElementCategory.LINK, f"//a[contains(normalize-space(.), {xpath_literal(text)})]", f"text '{text}'")

    def link_by_href(self, href: str) -> Locator:
        return self._make(ElementCategory.LINK, f"//a[@href={xpath_literal(href)}]", f"href '{href}'")

    # Generic

    def by_selector(self, selector: str) -> Locator:
        logger.info(f"Locating element by selector: {selector}")
        return Locator(ElementCategory.GENERIC, By.CSS_SELECTOR, selector, f"selector '{selector}'")

    def by_xpath(self, xpath: str) -> Locator:
        return self._make(ElementCategory.GENERIC, xpath, f"xpath '{xpath}'")

    def by_text(self, text: str) -> Locator:
        # innermost elements whose own text contains the string
        literal = xpath_literal(text)
        xpath = f"//*[contains(normalize-space(.), {literal})][not(*[contains(normalize-space(.), {literal})])]"
        return self._make(ElementCategory.GENERIC, xpath, f"text '{text}'")


def resolve_all(driver: WebDriver, locator: Locator) -> List[WebElement]:
    """
    Resolve a locator against the live page.

    Args:
        driver: Selenium WebDriver instance
        locator: Locator to resolve

    Returns:
        Matching elements in document order (possibly empty)

    Raises:
        ResolutionError: If the selector is invalid or the page/session is gone
    """
    try:
        return driver.find_elements(*locator.as_tuple())
    except InvalidSelectorException as e:
        logger.error(f"Invalid selector for {locator}: {locator.value}")
        raise ResolutionError(f"Invalid selector for {locator}: {locator.value}") from e
    except WebDriverException as e:
        logger.error(f"Could not resolve {locator}: {e.msg}")
        raise ResolutionError(f"Could not resolve {locator}: {e.msg}") from e


def resolve(driver: WebDriver, locator: Locator) -> WebElement:
    """
    Resolve a locator to its first match in document order.

    Raises:
        ResolutionError: If nothing matches or the page/session is gone
    """
    elements = resolve_all(driver, locator)
    if not elements:
        logger.error(f"No element matches {locator}")
        raise ResolutionError(f"Element not found: {locator}")
    return elements[0]


def lookup(driver: WebDriver, locator: Locator) -> LookupResult:
    """Resolve a locator into Found or NotFound instead of raising for an empty match."""
    elements = resolve_all(driver, locator)
    if elements:
        return Found(locator, elements[0])
    return NotFound(locator)
