"""
Base API client abstract class for testing.

Provides consistent interface regardless of whether tests run in-memory or over HTTP.
Every call is a single round trip: no retries, no timeout beyond the transport
default, and every HTTP status comes back as a Capture rather than an exception.
"""
import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Dict, Mapping, Optional, Tuple

from bookstore_api.run.config.settings import get_settings
from .response import Capture

logger = logging.getLogger(__name__)

DEFAULT_HEADERS = {
    'Content-Type': 'application/json',
    'Accept': 'application/json',
}


class APITestClient(ABC):
    """Abstract base class for API testing clients.

    Subclasses implement _send() for one transport; timing, logging and the
    observer hook are shared here.
    """

    def __init__(self, base_url: str, default_headers: Optional[Dict[str, str]] = None):
        self.base_url = base_url.rstrip('/')
        self.default_headers = {**DEFAULT_HEADERS, **(default_headers or {})}

    def get(self, path, params=None, headers=None) -> Capture:
        """Make GET request to API endpoint."""
        return self.request('GET', path, params=params, headers=headers)

    def post(self, path, json=None, data=None, headers=None) -> Capture:
        """Make POST request to API endpoint."""
        return self.request('POST', path, json=json, data=data, headers=headers)

    def put(self, path, json=None, data=None, headers=None) -> Capture:
        """Make PUT request to API endpoint."""
        return self.request('PUT', path, json=json, data=data, headers=headers)

    def delete(self, path, headers=None) -> Capture:
        """Make DELETE request to API endpoint."""
        return self.request('DELETE', path, headers=headers)

    def request(self, method: str, path: str, params: Optional[Mapping[str, Any]] = None,
                json: Any = None, data: Any = None,
                headers: Optional[Mapping[str, str]] = None) -> Capture:
        """
        Issue exactly one request and capture the outcome.

        Args:
            method: HTTP verb
            path: Path relative to the base URL (e.g., /api/v1/Books/1)
            params: Optional query parameters
            json: Optional JSON-serializable body
            data: Optional raw body (str or bytes), sent as-is
            headers: Optional headers merged over the defaults

        Returns:
            Capture of the response

        Raises:
            TransportError: If no response could be received
        """
        merged_headers = {**self.default_headers}
        if headers:
            merged_headers.update(headers)

        url = f"{self.base_url}{path}"
        logger.info(f"→ {method} {url}" + (f" params={dict(params)}" if params else ""))
        if json is not None:
            logger.debug(f"Request body: {json}")

        start = time.perf_counter()
        status_code, response_headers, body = self._send(
            method, url, params=params, json=json, data=data, headers=merged_headers
        )
        elapsed_ms = (time.perf_counter() - start) * 1000.0

        capture = Capture(
            method=method,
            url=url,
            status_code=status_code,
            elapsed_ms=elapsed_ms,
            headers=response_headers,
            body=body,
        )
        logger.info(f"← {status_code} {method} {url} in {elapsed_ms:.0f} ms")

        get_settings().observer(capture)
        return capture

    @abstractmethod
    def _send(self, method: str, url: str, params=None, json=None, data=None,
              headers=None) -> Tuple[int, Dict[str, str], str]:
        """Perform the round trip and return (status_code, headers, body_text)."""
        pass
