"""
Remote HTTP API client using requests library.

Used by the scenario suite for real network interface testing against a
deployed bookstore service.
"""
import threading

import requests

from bookstore_api.exceptions import TransportError
from .base_client import APITestClient


class RemoteAPITestClient(APITestClient):
    """Remote HTTP API client using requests library.

    Each thread gets its own requests.Session so concurrent scenarios do not
    share connection state.
    """

    def __init__(self, base_url, default_headers=None, timeout=None):
        """Initialize with base URL for remote API.

        Args:
            base_url: Base URL for the remote API (e.g., https://fakerestapi.azurewebsites.net)
            default_headers: Optional default headers to include in all requests
            timeout: Optional requests timeout in seconds; None leaves the transport default
        """
        super().__init__(base_url, default_headers)
        self.timeout = timeout
        self._local = threading.local()

    @property
    def session(self) -> requests.Session:
        session = getattr(self._local, 'session', None)
        if session is None:
            session = requests.Session()
            self._local.session = session
        return session

    def _send(self, method, url, params=None, json=None, data=None, headers=None):
        """Make one request over HTTP."""
        try:
            response = self.session.request(
                method,
                url,
                params=params,
                json=json,
                data=data,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            raise TransportError(method, url, e) from e

        return response.status_code, dict(response.headers), response.text
