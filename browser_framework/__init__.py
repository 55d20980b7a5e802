"""Selenium-based browser test framework: page objects, locators, waits and accessibility scans."""

from .accessibility import AxeAccessibilityTester, ScanResult, Severity, is_accessible, render_html_report
from .browser import BrowserFactory, BrowserSession
from .config import FrameworkConfig, LoggingSettings, Settings, Timeouts, get_config, load_settings
from .exceptions import (
    ActionFailedError,
    BrowserSetupError,
    ConfigurationError,
    ExternalToolError,
    FrameworkError,
    ResolutionError,
    ValidationError,
    WaitTimeoutError,
)
from .interactions import ElementInteractions
from .locators import ElementCategory, ElementLocators, Found, Locator, NotFound
from .pages import BasePage, SampleFormPage
from .waits import WaitHelpers

__version__ = "1.0.0"

__all__ = [
    "AxeAccessibilityTester",
    "ScanResult",
    "Severity",
    "is_accessible",
    "render_html_report",
    "BrowserFactory",
    "BrowserSession",
    "FrameworkConfig",
    "LoggingSettings",
    "Settings",
    "Timeouts",
    "get_config",
    "load_settings",
    "FrameworkError",
    "ConfigurationError",
    "ResolutionError",
    "WaitTimeoutError",
    "ActionFailedError",
    "ValidationError",
    "ExternalToolError",
    "BrowserSetupError",
    "ElementInteractions",
    "ElementCategory",
    "ElementLocators",
    "Locator",
    "Found",
    "NotFound",
    "BasePage",
    "SampleFormPage",
    "WaitHelpers",
]
