"""
In-memory API client using FastAPI TestClient.

Used for fast, isolated runs against the in-process bookstore service.
This is a generic, reusable client that doesn't know which app it wraps.
"""
import httpx

from bookstore_api.exceptions import TransportError
from .base_client import APITestClient


class InMemoryAPITestClient(APITestClient):
    """In-memory API client using FastAPI TestClient."""

    def __init__(self, fastapi_client, default_headers=None):
        """Initialize with FastAPI TestClient instance.

        Args:
            fastapi_client: FastAPI TestClient instance
            default_headers: Optional default headers to include in all requests
        """
        super().__init__(str(fastapi_client.base_url), default_headers)
        self.client = fastapi_client

    def _send(self, method, url, params=None, json=None, data=None, headers=None):
        """Make one request using FastAPI TestClient."""
        try:
            response = self.client.request(
                method,
                url,
                params=params,
                json=json,
                content=data,
                headers=headers,
            )
        except httpx.HTTPError as e:
            raise TransportError(method, url, e) from e

        return response.status_code, dict(response.headers), response.text
