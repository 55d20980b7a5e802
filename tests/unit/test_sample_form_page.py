"""Tests for SampleFormPage with a mocked driver."""

from unittest.mock import patch

import pytest

from browser_framework.exceptions import ValidationError
from browser_framework.pages import SampleFormPage


@pytest.fixture
def form_page(mock_driver, settings, mock_element):
    mock_driver.find_element.return_value = mock_element
    mock_driver.title = "Sample Test Page"
    return SampleFormPage(mock_driver, settings)


def test_navigate(form_page, mock_driver):
    form_page.navigate()
    mock_driver.get.assert_called_once_with("http://test.com/TestData/SampleTestPage.html")


def test_verify_page_loaded(form_page):
    assert form_page.verify_page_loaded() is True


def test_verify_page_loaded_wrong_page(form_page, mock_driver):
    mock_driver.title = "Login"

    with pytest.raises(ValidationError):
        form_page.verify_page_loaded()


def test_fill_user_registration_form(form_page, mock_driver, mock_element):
    """Test the four registration fields are filled in order."""
    form_page.fill_user_registration_form("John", "Doe", "john@example.com", "Secret123")

    typed = [c.args[0] for c in mock_element.send_keys.call_args_list]
    assert typed == ["John", "Doe", "john@example.com", "Secret123"]
    queried = [c.args[1] for c in mock_driver.find_element.call_args_list]
    for field in ("firstName", "lastName", "email", "password"):
        assert any(f"@id='{field}'" in q for q in queried)


def test_get_first_and_last_name(form_page, mock_element):
    mock_element.get_property.side_effect = ["John", "Doe"]

    assert form_page.get_first_name() == "John"
    assert form_page.get_last_name() == "Doe"


def test_select_gender_is_case_insensitive(form_page, mock_driver, mock_element):
    form_page.select_gender("Female")

    mock_driver.find_element.assert_called_with("xpath", "//input[@type='radio'][@value='female']")
    mock_element.click.assert_called_once()


def test_select_interests(form_page, mock_driver, mock_element):
    form_page.select_interests("Sports", "music")

    queried = [c.args[1] for c in mock_driver.find_element.call_args_list]
    assert "//input[@type='checkbox'][@id='sports']" in queried
    assert "//input[@type='checkbox'][@id='music']" in queried
    assert mock_element.click.call_count == 2


@patch("browser_framework.interactions.Select")
def test_select_country(mock_select, form_page):
    form_page.select_country("Canada")
    mock_select.return_value.select_by_visible_text.assert_called_once_with("Canada")


def test_enter_city(form_page, mock_element):
    form_page.enter_city("Toronto")
    mock_element.send_keys.assert_called_once_with("Toronto")


def test_upload_profile_picture(form_page, mock_element, tmp_path):
    picture = tmp_path / "me.png"
    picture.write_bytes(b"png")

    form_page.upload_profile_picture(picture)

    mock_element.send_keys.assert_called_once_with(str(picture.resolve()))


def test_upload_missing_profile_picture(form_page, tmp_path):
    with pytest.raises(ValidationError, match="File not found"):
        form_page.upload_profile_picture(tmp_path / "missing.png")


def test_submit_and_reset(form_page, mock_driver, mock_element):
    form_page.submit_form()
    form_page.reset_form()

    queried = [c.args[1] for c in mock_driver.find_element.call_args_list]
    assert any("@id='submitBtn'" in q for q in queried)
    assert any("@id='resetBtn'" in q for q in queried)
    assert mock_element.click.call_count == 2


def test_form_submitted_successfully(form_page, mock_element):
    mock_element.get_attribute.return_value = "Registration completed successfully!"

    assert form_page.is_form_submitted_successfully() is True
    assert "Registration completed successfully" in form_page.get_success_message()


def test_form_not_submitted(form_page, mock_element):
    """Test a success message that never shows up reports False instead of raising."""
    mock_element.is_displayed.return_value = False
    assert form_page.is_form_submitted_successfully(timeout_ms=100) is False
