"""Configuration loading for browser tests.

Settings come from a JSON file (``appsettings.json`` by default) with
``TestSettings`` and ``Logging`` sections. Environment variables named
``<Section>__<Key>`` override the file values, e.g. ``TestSettings__Headless=true``.
"""

import json
import os
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Literal, Mapping, Optional, Union

from .exceptions import ConfigurationError

SETTINGS_FILE_ENV = "E2E_SETTINGS_FILE"
DEFAULT_SETTINGS_FILE = "appsettings.json"

BrowserName = Literal["chrome", "firefox", "edge"]

BROWSER_ALIASES = {
    "chrome": "chrome",
    "chromium": "chrome",
    "firefox": "firefox",
    "edge": "edge",
    "msedge": "edge",
}


class Timeouts:
    """Timing constants in milliseconds."""

    POLL_INTERVAL = 500  # Polling interval for predicate-based waits
    SETTLE_DELAY = 100  # Pause after visibility for animations to finish
    SUCCESS_MESSAGE = 10000  # Form submission feedback
    NETWORK_IDLE_QUIET = 500  # Window without new network requests


@dataclass(frozen=True)
class Settings:
    """Browser test settings (``TestSettings`` section)."""

    base_url: str = "http://localhost:5000"
    browser: BrowserName = "chrome"
    headless: bool = False
    timeout: int = 30000
    slow_mo: int = 100
    viewport_width: int = 1920
    viewport_height: int = 1080
    screenshot: bool = True
    video: bool = False
    trace: bool = True
    # Root for screenshots/, traces/ and accessibility-reports/
    artifacts_dir: str = "."

    @property
    def timeout_seconds(self) -> float:
        return self.timeout / 1000

    @property
    def screenshots_dir(self) -> Path:
        return Path(self.artifacts_dir) / "screenshots"

    @property
    def traces_dir(self) -> Path:
        return Path(self.artifacts_dir) / "traces"

    @property
    def reports_dir(self) -> Path:
        return Path(self.artifacts_dir) / "accessibility-reports"


@dataclass(frozen=True)
class LoggingSettings:
    """Logging settings (``Logging`` section)."""

    level: str = "Information"
    log_to_file: bool = True
    log_path: str = "logs/test-{Date}.log"


@dataclass(frozen=True)
class FrameworkConfig:
    """Everything read from the settings source."""

    settings: Settings
    logging: LoggingSettings
    source: Optional[str] = None


def parse_bool(value: Union[str, bool, int]) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    text = str(value).strip().lower()
    if text in ("true", "1", "yes", "on"):
        return True
    if text in ("false", "0", "no", "off"):
        return False
    raise ValueError(f"not a boolean: {value!r}")


def _parse_int(minimum: int) -> Callable[[Any], int]:
    def parse(value: Any) -> int:
        if isinstance(value, bool):
            raise ValueError(f"not an integer: {value!r}")
        number = int(str(value).strip())
        if number < minimum:
            raise ValueError(f"must be >= {minimum}, got {number}")
        return number

    return parse


def parse_browser(value: Any) -> str:
    name = str(value).strip().lower()
    if name not in BROWSER_ALIASES:
        raise ValueError(f"unsupported browser {value!r} (expected one of {sorted(set(BROWSER_ALIASES.values()))})")
    return BROWSER_ALIASES[name]


# Recognized keys per section: config key -> (dataclass field, parser)
SETTINGS_KEYS: Dict[str, tuple] = {
    "BaseUrl": ("base_url", str),
    "Browser": ("browser", parse_browser),
    "Headless": ("headless", parse_bool),
    "Timeout": ("timeout", _parse_int(1)),
    "SlowMo": ("slow_mo", _parse_int(0)),
    "ViewportWidth": ("viewport_width", _parse_int(1)),
    "ViewportHeight": ("viewport_height", _parse_int(1)),
    "Screenshot": ("screenshot", parse_bool),
    "Video": ("video", parse_bool),
    "Trace": ("trace", parse_bool),
    "ArtifactsDir": ("artifacts_dir", str),
}

LOGGING_KEYS: Dict[str, tuple] = {
    "Level": ("level", str),
    "LogToFile": ("log_to_file", parse_bool),
    "LogPath": ("log_path", str),
}


def _read_json_file(path: Path) -> dict:
    if not path.is_file():
        raise ConfigurationError(f"Settings file not found: {path}")
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Could not read settings file {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigurationError(f"Settings file {path} must contain a JSON object")
    return data


def _collect_section(section: str, keys: Dict[str, tuple], file_data: dict, environ: Mapping[str, str]) -> dict:
    """Merge one section from file and environment into dataclass kwargs."""
    raw = file_data.get(section) or {}
    if not isinstance(raw, dict):
        raise ConfigurationError(f"Section '{section}' must be a JSON object")

    # keys are matched case-insensitively in both sources
    merged = {key.lower(): (key, value) for key, value in raw.items()}
    prefix = f"{section.lower()}__"
    for env_key, env_value in environ.items():
        if env_key.lower().startswith(prefix):
            name = env_key[len(prefix) :]
            merged[name.lower()] = (env_key, env_value)

    kwargs = {}
    for key, (field_name, parser) in keys.items():
        if key.lower() not in merged:
            continue
        origin, value = merged[key.lower()]
        try:
            kwargs[field_name] = parser(value)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid value for {section}:{key} (from {origin}): {e}") from e
    return kwargs


def load_settings(path: Union[str, Path, None] = None, environ: Optional[Mapping[str, str]] = None) -> FrameworkConfig:
    """
    Load settings from a JSON file layered with environment variables.

    Args:
        path: Settings file; defaults to $E2E_SETTINGS_FILE or ./appsettings.json
        environ: Environment mapping (defaults to os.environ)

    Returns:
        FrameworkConfig with test and logging settings

    Raises:
        ConfigurationError: If the file is missing, malformed or holds invalid values
    """
    if environ is None:
        environ = os.environ
    if path is None:
        path = environ.get(SETTINGS_FILE_ENV, DEFAULT_SETTINGS_FILE)
    settings_path = Path(path)

    file_data = _read_json_file(settings_path)
    settings = Settings(**_collect_section("TestSettings", SETTINGS_KEYS, file_data, environ))
    logging_settings = LoggingSettings(**_collect_section("Logging", LOGGING_KEYS, file_data, environ))
    return FrameworkConfig(settings=settings, logging=logging_settings, source=str(settings_path))


_config: Optional[FrameworkConfig] = None
_config_lock = threading.Lock()


def get_config() -> FrameworkConfig:
    """Return the process-wide configuration, loading it on first use."""
    global _config
    if _config is None:
        with _config_lock:
            if _config is None:
                _config = load_settings()
    return _config


def reset_config() -> None:
    """Forget the cached configuration (used by tests)."""
    global _config
    with _config_lock:
        _config = None
