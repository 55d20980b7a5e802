"""Page objects for the browser test framework."""

from .base_page import BasePage
from .sample_form_page import SampleFormPage

__all__ = ["BasePage", "SampleFormPage"]
