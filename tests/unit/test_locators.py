"""Tests for element locators."""

from unittest.mock import MagicMock

import pytest
from selenium.common.exceptions import InvalidSelectorException, WebDriverException
from selenium.webdriver.common.by import By

from browser_framework.exceptions import ResolutionError
from browser_framework.locators import (
    ElementCategory,
    ElementLocators,
    Found,
    Locator,
    NotFound,
    lookup,
    resolve,
    resolve_all,
    xpath_literal,
)


@pytest.fixture
def locators(mock_driver):
    return ElementLocators(mock_driver)


def test_building_locator_does_not_touch_page(locators, mock_driver):
    """Test factories only build queries."""
    locators.textbox_by_id("firstName")
    locators.button_by_text("Submit")
    locators.by_selector("#successMessage")

    mock_driver.find_element.assert_not_called()
    mock_driver.find_elements.assert_not_called()


class TestXpathLiteral:
    def test_plain(self):
        assert xpath_literal("abc") == "'abc'"

    def test_single_quote(self):
        assert xpath_literal("it's") == '"it\'s"'

    def test_both_quotes(self):
        assert xpath_literal("a'b\"c") == "concat('a', \"'\", 'b\"c')"


class TestCategories:
    """Each category covers the HTML representations of its control."""

    def test_textbox_by_id(self, locators):
        locator = locators.textbox_by_id("firstName")

        assert locator.category == ElementCategory.TEXTBOX
        assert locator.by == By.XPATH
        for kind in ("text", "password", "email", "number"):
            assert f"@type='{kind}'" in locator.value
        assert "//textarea[@id='firstName']" in locator.value
        assert "@type='checkbox'" not in locator.value

    def test_textbox_by_label_excludes_other_inputs(self, locators):
        locator = locators.textbox_by_label("First Name")

        assert "label[contains(normalize-space(.), 'First Name')]" in locator.value
        assert "//input[@type='text'" in locator.value
        assert "self::input[@type='text'" in locator.value
        assert "@type='radio'" not in locator.value

    def test_textbox_by_placeholder(self, locators):
        locator = locators.textbox_by_placeholder("Enter email")
        assert locator.value == "//input[@placeholder='Enter email'] | //textarea[@placeholder='Enter email']"

    def test_radio_by_value(self, locators):
        locator = locators.radio_by_value("female")

        assert locator.category == ElementCategory.RADIO
        assert locator.value == "//input[@type='radio'][@value='female']"

    def test_radio_by_name_and_value(self, locators):
        locator = locators.radio_by_name_and_value("gender", "male")
        assert locator.value == "//input[@type='radio'][@name='gender'][@value='male']"

    def test_radio_by_label_uses_for_and_nesting(self, locators):
        locator = locators.radio_by_label("Female")

        assert "//input[@type='radio'][@id=//label[contains(normalize-space(.), 'Female')]/@for]" in locator.value
        assert "//label[contains(normalize-space(.), 'Female')]//input[@type='radio']" in locator.value
        assert "following-sibling" not in locator.value

    def test_checkbox_by_label_uses_for_and_nesting(self, locators):
        locator = locators.checkbox_by_label("Sports")

        assert "[@id=//label[contains(normalize-space(.), 'Sports')]/@for]" in locator.value
        assert "following-sibling" not in locator.value

    def test_checkbox_by_id(self, locators):
        locator = locators.checkbox_by_id("sports")

        assert locator.category == ElementCategory.CHECKBOX
        assert locator.value == "//input[@type='checkbox'][@id='sports']"

    def test_dropdown_by_id(self, locators):
        locator = locators.dropdown_by_id("country")

        assert locator.category == ElementCategory.DROPDOWN
        assert locator.value == "//select[@id='country']"

    def test_combobox_requires_datalist(self, locators):
        locator = locators.combobox_by_id("city")

        assert locator.category == ElementCategory.COMBOBOX
        assert locator.value == "//input[@type='text'][@list][@id='city']"

    def test_file_input_by_id(self, locators):
        locator = locators.file_input_by_id("profilePicture")

        assert locator.category == ElementCategory.FILE_INPUT
        assert locator.value == "//input[@type='file'][@id='profilePicture']"

    def test_button_by_text(self, locators):
        locator = locators.button_by_text("Submit")

        assert locator.category == ElementCategory.BUTTON
        assert "//button[contains(normalize-space(.), 'Submit')]" in locator.value
        assert "//input[@type='button'][@value='Submit']" in locator.value
        assert "//input[@type='submit'][@value='Submit']" in locator.value

    def test_button_by_id(self, locators):
        locator = locators.button_by_id("submitBtn")
        assert locator.value == (
            "//button[@id='submitBtn'] | //input[@type='button'][@id='submitBtn'] | //input[@type='submit'][@id='submitBtn']"
        )

    def test_link_by_href(self, locators):
        locator = locators.link_by_href("/help")

        assert locator.category == ElementCategory.LINK
        assert locator.value == "//a[@href='/help']"

    def test_by_selector_uses_css(self, locators):
        locator = locators.by_selector("#successMessage")

        assert locator.category == ElementCategory.GENERIC
        assert locator.as_tuple() == (By.CSS_SELECTOR, "#successMessage")

    def test_by_xpath(self, locators):
        assert locators.by_xpath("//div").as_tuple() == (By.XPATH, "//div")

    def test_label_text_with_quote(self, locators):
        locator = locators.checkbox_by_label("I'm in")
        assert '"I\'m in"' in locator.value


def test_locator_str():
    locator = Locator(ElementCategory.TEXTBOX, By.XPATH, "//input", "id 'firstName'")
    assert str(locator) == "textbox id 'firstName'"


class TestResolution:
    """Tests for resolving locators against the page."""

    def test_resolve_all(self, locators, mock_driver):
        elements = [MagicMock(), MagicMock()]
        mock_driver.find_elements.return_value = elements
        locator = locators.checkbox_by_id("sports")

        assert resolve_all(mock_driver, locator) == elements
        mock_driver.find_elements.assert_called_once_with(By.XPATH, "//input[@type='checkbox'][@id='sports']")

    def test_resolve_uses_first_match(self, locators, mock_driver):
        """Test ambiguous locators resolve to the first element in document order."""
        first, second = MagicMock(), MagicMock()
        mock_driver.find_elements.return_value = [first, second]

        assert resolve(mock_driver, locators.textbox_by_label("Name")) is first

    def test_resolve_not_found(self, locators, mock_driver):
        mock_driver.find_elements.return_value = []

        with pytest.raises(ResolutionError, match="Element not found: textbox id 'missing'"):
            resolve(mock_driver, locators.textbox_by_id("missing"))

    def test_resolve_every_call_queries_again(self, locators, mock_driver):
        """Test a locator is re-resolved on every use."""
        mock_driver.find_elements.return_value = [MagicMock()]
        locator = locators.by_selector("#x")

        resolve(mock_driver, locator)
        resolve(mock_driver, locator)

        assert mock_driver.find_elements.call_count == 2

    def test_invalid_selector(self, locators, mock_driver):
        mock_driver.find_elements.side_effect = InvalidSelectorException("bad")

        with pytest.raises(ResolutionError, match="Invalid selector"):
            resolve_all(mock_driver, locators.by_xpath("//["))

    def test_session_gone(self, locators, mock_driver):
        mock_driver.find_elements.side_effect = WebDriverException("invalid session id")

        with pytest.raises(ResolutionError, match="invalid session id"):
            resolve_all(mock_driver, locators.by_selector("#x"))

    def test_lookup_found(self, locators, mock_driver):
        element = MagicMock()
        mock_driver.find_elements.return_value = [element]
        locator = locators.by_selector("#x")

        assert lookup(mock_driver, locator) == Found(locator, element)

    def test_lookup_not_found(self, locators, mock_driver):
        mock_driver.find_elements.return_value = []
        locator = locators.by_selector("#x")

        assert lookup(mock_driver, locator) == NotFound(locator)
