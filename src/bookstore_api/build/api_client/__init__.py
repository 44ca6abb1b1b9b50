"""
API Client package for testing.

Provides a consistent interface whether the scenarios run against the
remote bookstore service or the in-process one.
"""
from typing import Optional, Tuple

from bookstore_api.exceptions import ConfigException
from bookstore_api.run.config.settings import MODE_IN_MEMORY, MODES, get_settings
from .base_client import APITestClient
from .in_memory_client import InMemoryAPITestClient
from .remote_client import RemoteAPITestClient
from .resources import AuthorClient, BookClient, ResourceClient
from .response import Capture


def create_api_client(mode: Optional[str] = None, base_url: Optional[str] = None) -> APITestClient:
    """
    Build the transport for the configured mode.

    Args:
        mode: REMOTE or IN_MEMORY; defaults to the shared settings
        base_url: Remote base URL; defaults to the shared settings

    Returns:
        RemoteAPITestClient, or InMemoryAPITestClient over a freshly seeded app
    """
    settings = get_settings()
    mode = (mode or settings.mode).strip().upper()
    if mode not in MODES:
        raise ConfigException(f"Invalid API mode: {mode}. Use {' or '.join(MODES)}.",
                              setting_name='TEST_API_MODE', value=mode)

    if mode == MODE_IN_MEMORY:
        from fastapi.testclient import TestClient
        from bookstore_api.run.api.base import create_app
        return InMemoryAPITestClient(
            TestClient(create_app(settings.api_version), raise_server_exceptions=False)
        )

    return RemoteAPITestClient(base_url or settings.base_url)


def create_resource_clients(api_client: APITestClient) -> Tuple[BookClient, AuthorClient]:
    """Build the Book and Author clients sharing one transport."""
    return BookClient(api_client), AuthorClient(api_client)


__all__ = [
    'APITestClient',
    'InMemoryAPITestClient',
    'RemoteAPITestClient',
    'ResourceClient',
    'BookClient',
    'AuthorClient',
    'Capture',
    'create_api_client',
    'create_resource_clients',
]
