"""Page Object for the sample registration form."""

import logging
from pathlib import Path
from typing import Union

from ..config import Timeouts
from ..exceptions import WaitTimeoutError
from .base_page import BasePage

logger = logging.getLogger(__name__)


class SampleFormPage(BasePage):
    """Page object for the sample registration form."""

    PAGE_PATH = "/TestData/SampleTestPage.html"
    PAGE_TITLE_TEXT = "Sample Test Page"

    # Element ids
    FIRST_NAME = "firstName"
    LAST_NAME = "lastName"
    EMAIL = "email"
    PASSWORD = "password"
    COUNTRY = "country"
    CITY = "city"
    PROFILE_PICTURE = "profilePicture"
    SUBMIT_BUTTON = "submitBtn"
    RESET_BUTTON = "resetBtn"
    SUCCESS_MESSAGE = "#successMessage"

    def navigate(self) -> None:
        """Navigate to the sample form."""
        self.navigate_to(self.PAGE_PATH)

    def verify_page_loaded(self, expected_title: str = PAGE_TITLE_TEXT) -> bool:
        return super().verify_page_loaded(expected_title)

    def fill_user_registration_form(self, first_name: str, last_name: str, email: str, password: str) -> None:
        """
        Fill the registration fields in order.

        The first failing field aborts the fill; fields already entered keep their values.
        """
        logger.info(f"Filling registration form for {first_name} {last_name}")
        self.interactions.enter_text_in_textbox_by_id(self.FIRST_NAME, first_name)
        self.interactions.enter_text_in_textbox_by_id(self.LAST_NAME, last_name)
        self.interactions.enter_text_in_textbox_by_id(self.EMAIL, email)
        self.interactions.enter_text_in_textbox_by_id(self.PASSWORD, password)

    def get_first_name(self) -> str:
        return self.interactions.get_text_from_textbox_by_id(self.FIRST_NAME)

    def get_last_name(self) -> str:
        return self.interactions.get_text_from_textbox_by_id(self.LAST_NAME)

    def select_gender(self, gender: str) -> None:
        self.interactions.select_radio_button_by_value(gender.lower())

    def select_interests(self, *interests: str) -> None:
        for interest in interests:
            self.interactions.check_checkbox_by_id(interest.lower())

    def select_country(self, country: str) -> None:
        self.interactions.select_dropdown_by_text(self.COUNTRY, country)

    def get_selected_country(self) -> str:
        return self.interactions.get_selected_dropdown_text(self.COUNTRY)

    def enter_city(self, city: str) -> None:
        self.interactions.enter_text_in_combobox_by_id(self.CITY, city)

    def upload_profile_picture(self, file_path: Union[str, Path]) -> None:
        self.interactions.upload_file_by_id(self.PROFILE_PICTURE, file_path)

    def submit_form(self) -> None:
        logger.info("Submitting registration form")
        self.interactions.click_button_by_id(self.SUBMIT_BUTTON)

    def reset_form(self) -> None:
        logger.info("Resetting registration form")
        self.interactions.click_button_by_id(self.RESET_BUTTON)

    def is_form_submitted_successfully(self, timeout_ms: int = Timeouts.SUCCESS_MESSAGE) -> bool:
        """Return whether the success message shows up within timeout_ms."""
        try:
            self.wait_for_element_visible(self.SUCCESS_MESSAGE, timeout_ms)
        except WaitTimeoutError:
            logger.info("Success message did not appear")
            return False
        return True

    def get_success_message(self) -> str:
        return self.interactions.get_text_by_selector(self.SUCCESS_MESSAGE)
