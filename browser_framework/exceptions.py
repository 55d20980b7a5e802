"""Custom exceptions for the browser test framework."""


class FrameworkError(Exception):
    """Base exception for all framework failures."""

    pass


class ConfigurationError(FrameworkError):
    """Settings source is missing or malformed."""

    pass


class ResolutionError(FrameworkError):
    """Element query could not be matched, or its page is gone."""

    pass


class WaitTimeoutError(FrameworkError):
    """Wait condition did not hold within the timeout."""

    def __init__(self, condition: str, timeout_ms: int):
        super().__init__(f"Timed out after {timeout_ms}ms waiting for {condition}")
        self.condition = condition
        self.timeout_ms = timeout_ms


class ActionFailedError(FrameworkError):
    """The browser rejected an action on an element, or a navigation."""

    pass


class ValidationError(FrameworkError):
    """Expected condition or caller precondition failed."""

    pass


class ExternalToolError(FrameworkError):
    """Accessibility engine or report writer failed."""

    pass


class BrowserSetupError(FrameworkError):
    """Browser initialization failed."""

    pass
