"""
Process-wide API settings for the bookstore clients.

The settings are initialized exactly once, explicitly, behind a lock. The
first initialize() call wins; later calls (including concurrent ones from
parallel scenarios) are no-ops that return the existing settings.
"""
import logging
import os
import threading
from dataclasses import dataclass
from typing import Any, Callable, Optional

from bookstore_api.build.config.testing import get_api_defaults
from bookstore_api.exceptions import ConfigException

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://fakerestapi.azurewebsites.net"
DEFAULT_API_VERSION = "/api/v1"

MODE_REMOTE = 'REMOTE'
MODE_IN_MEMORY = 'IN_MEMORY'
MODES = (MODE_REMOTE, MODE_IN_MEMORY)

# Reference data assumed present on the service
VALID_BOOK_ID = 1
VALID_AUTHOR_ID = 1
INVALID_ID = 99999
NEGATIVE_ID = -1
ZERO_ID = 0

# Response time bounds (ms)
SCENARIO_RESPONSE_TIME_LIMIT_MS = 5000
CONCURRENT_OPERATIONS_LIMIT_MS = 15000
BULK_OPERATIONS_LIMIT_MS = 30000


def log_exchange(capture: Any) -> None:
    """Default observer: record every captured exchange in the log."""
    observer_logger = logging.getLogger('bookstore_api.observer')
    observer_logger.info(capture.describe())
    observer_logger.debug(f"Response headers: {dict(capture.headers)}")
    observer_logger.debug(f"Response body: {capture.body}")


@dataclass(frozen=True)
class ApiSettings:
    """Shared client configuration: base URL, mode and the observer hook."""
    base_url: str
    mode: str
    api_version: str = DEFAULT_API_VERSION
    observer: Callable[[Any], None] = log_exchange

    @property
    def books_endpoint(self) -> str:
        return f"{self.api_version}/Books"

    @property
    def book_by_id_endpoint(self) -> str:
        return f"{self.api_version}/Books/{{id}}"

    @property
    def authors_endpoint(self) -> str:
        return f"{self.api_version}/Authors"

    @property
    def author_by_id_endpoint(self) -> str:
        return f"{self.api_version}/Authors/{{id}}"


_settings: Optional[ApiSettings] = None
_settings_lock = threading.Lock()


def _resolve_mode(mode: Optional[str], defaults: dict) -> str:
    resolved = (mode or os.environ.get('TEST_API_MODE') or defaults.get('mode') or MODE_REMOTE)
    resolved = resolved.strip().upper()
    if resolved not in MODES:
        raise ConfigException(
            f"Invalid TEST_API_MODE value: {resolved}. Use {' or '.join(MODES)}.",
            setting_name='TEST_API_MODE',
            value=resolved
        )
    return resolved


def initialize(base_url: Optional[str] = None, mode: Optional[str] = None,
               observer: Optional[Callable[[Any], None]] = None) -> ApiSettings:
    """
    Initialize the shared settings once.

    Precedence, lowest to highest: packaged tests.yaml, ./tests.yaml,
    environment (TEST_API_URL, TEST_API_MODE), explicit arguments.

    Args:
        base_url: Base URL of the bookstore service
        mode: REMOTE or IN_MEMORY
        observer: Callable receiving every Capture; must not alter it

    Returns:
        The settings in effect (the existing ones if already initialized)
    """
    global _settings

    if _settings is not None:
        return _settings

    with _settings_lock:
        if _settings is not None:
            logger.debug("API settings already initialized, ignoring repeated initialization")
            return _settings

        defaults = get_api_defaults()
        settings = ApiSettings(
            base_url=(base_url or os.environ.get('TEST_API_URL')
                      or defaults.get('base_url') or DEFAULT_BASE_URL).rstrip('/'),
            mode=_resolve_mode(mode, defaults),
            api_version=defaults.get('api_version') or DEFAULT_API_VERSION,
            observer=observer or log_exchange,
        )
        logger.info(f"API settings initialized: mode={settings.mode}, base_url={settings.base_url}")
        _settings = settings

    return _settings


def get_settings() -> ApiSettings:
    """Return the shared settings, initializing them with defaults on first use."""
    if _settings is None:
        return initialize()
    return _settings


def is_initialized() -> bool:
    return _settings is not None


def reset_settings() -> None:
    """Forget the shared settings. Intended for unit tests only."""
    global _settings
    with _settings_lock:
        _settings = None
