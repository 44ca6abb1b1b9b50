"""
Resource clients for the bookstore collections.

A ResourceClient knows one collection (Books or Authors) and turns each
operation into exactly one request on an APITestClient. Nothing here asserts
on status codes: callers inspect the returned Capture.
"""
import logging
from typing import Any, Mapping, Optional, Type, Union

from bookstore_api.models import Author, Book, Resource, encode
from bookstore_api.run.config.settings import ApiSettings, get_settings
from .base_client import APITestClient
from .response import Capture

logger = logging.getLogger(__name__)

Payload = Union[Resource, Mapping[str, Any]]


class ResourceClient:
    """CRUD operations against one bookstore collection."""

    resource_type: Type[Resource] = Resource
    resource_name = 'resource'

    def __init__(self, api_client: APITestClient, collection_path: str, item_path_template: str):
        """
        Args:
            api_client: Transport used for every request
            collection_path: e.g. /api/v1/Books
            item_path_template: e.g. /api/v1/Books/{id}
        """
        self.api_client = api_client
        self.collection_path = collection_path
        self.item_path_template = item_path_template

    def item_path(self, resource_id) -> str:
        return self.item_path_template.format(id=resource_id)

    @staticmethod
    def _payload(resource: Payload) -> Any:
        if isinstance(resource, Resource):
            return encode(resource)
        return dict(resource)

    def list(self) -> Capture:
        logger.debug(f"Listing all {self.resource_name}s")
        return self.api_client.get(self.collection_path)

    def get_by_id(self, resource_id) -> Capture:
        logger.debug(f"Fetching {self.resource_name} {resource_id}")
        return self.api_client.get(self.item_path(resource_id))

    def create(self, resource: Payload) -> Capture:
        logger.debug(f"Creating {self.resource_name}")
        return self.api_client.post(self.collection_path, json=self._payload(resource))

    def update(self, resource_id, resource: Payload) -> Capture:
        logger.debug(f"Updating {self.resource_name} {resource_id}")
        return self.api_client.put(self.item_path(resource_id), json=self._payload(resource))

    def delete(self, resource_id) -> Capture:
        logger.debug(f"Deleting {self.resource_name} {resource_id}")
        return self.api_client.delete(self.item_path(resource_id))

    def list_with_query(self, key: str, value: Any) -> Capture:
        logger.debug(f"Listing {self.resource_name}s where {key}={value}")
        return self.api_client.get(self.collection_path, params={key: value})

    def send_raw(self, body: Union[str, bytes], content_type: str = 'application/json',
                 method: str = 'POST', resource_id=None,
                 headers: Optional[Mapping[str, str]] = None) -> Capture:
        """
        Send a body verbatim, bypassing model encoding.

        Used for malformed JSON and wrong content types. Targets the
        collection, or the item path when resource_id is given.
        """
        path = self.collection_path if resource_id is None else self.item_path(resource_id)
        merged = {'Content-Type': content_type}
        if headers:
            merged.update(headers)
        logger.debug(f"Sending raw {method} {path} as {content_type}")
        return self.api_client.request(method, path, data=body, headers=merged)


class BookClient(ResourceClient):
    resource_type = Book
    resource_name = 'book'

    def __init__(self, api_client: APITestClient, settings: Optional[ApiSettings] = None):
        settings = settings or get_settings()
        super().__init__(api_client, settings.books_endpoint, settings.book_by_id_endpoint)


class AuthorClient(ResourceClient):
    resource_type = Author
    resource_name = 'author'

    def __init__(self, api_client: APITestClient, settings: Optional[ApiSettings] = None):
        settings = settings or get_settings()
        super().__init__(api_client, settings.authors_endpoint, settings.author_by_id_endpoint)

    def list_for_book(self, book_id) -> Capture:
        """List the authors linked to a book via the idBook query parameter."""
        return self.list_with_query('idBook', book_id)
