"""
Response capture for bookstore API clients.

Provides a consistent, read-only record of one HTTP call regardless of the
underlying HTTP library.
"""
import json as jsonlib
from dataclasses import dataclass, field as dataclass_field
from types import MappingProxyType
from typing import Any, List, Mapping, Optional, Type

from requests.structures import CaseInsensitiveDict

from bookstore_api.exceptions import DeserializationError
from bookstore_api.models import R, decode, decode_list

_MISSING = object()


@dataclass(frozen=True)
class Capture:
    """Recorded outcome (status, headers, timing, body) of one HTTP call.

    Built once per call by the transport clients; read-only afterward. Headers
    are copied into a read-only, case-insensitive view.
    """
    method: str
    url: str
    status_code: int
    elapsed_ms: float
    headers: Mapping[str, str] = dataclass_field(default_factory=CaseInsensitiveDict)
    body: str = ''

    def __post_init__(self):
        object.__setattr__(self, 'headers', MappingProxyType(CaseInsensitiveDict(self.headers)))

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    def json(self) -> Any:
        """Return the body parsed as raw JSON (untyped escape hatch)."""
        try:
            return jsonlib.loads(self.body)
        except ValueError as e:
            raise DeserializationError('JSON', str(e), self.body) from e

    def field(self, path: str) -> Optional[Any]:
        """Look up a dotted path ("0.title", "idBook") in the raw JSON body.

        Returns None when any segment is missing.
        """
        node = self.json()
        for part in path.split('.'):
            if isinstance(node, list):
                try:
                    node = node[int(part)]
                except (ValueError, IndexError):
                    return None
            elif isinstance(node, Mapping):
                node = node.get(part, _MISSING)
                if node is _MISSING:
                    return None
            else:
                return None
        return node

    def as_resource(self, resource_type: Type[R]) -> R:
        """Parse the body as a single resource of resource_type."""
        try:
            data = self.json()
        except DeserializationError as e:
            raise DeserializationError(resource_type.__name__, e.detail, self.body) from e
        try:
            return decode(data, resource_type)
        except DeserializationError as e:
            raise DeserializationError(e.target_type, e.detail, self.body) from e

    def as_resource_list(self, resource_type: Type[R]) -> List[R]:
        """Parse the body as a list of resources of resource_type."""
        try:
            data = self.json()
        except DeserializationError as e:
            raise DeserializationError(f"List[{resource_type.__name__}]", e.detail, self.body) from e
        try:
            return decode_list(data, resource_type)
        except DeserializationError as e:
            raise DeserializationError(e.target_type, e.detail, self.body) from e

    def has_header(self, name: str) -> bool:
        return name in self.headers

    def describe(self) -> str:
        """One-line summary used in log entries and assertion messages."""
        return f"{self.method} {self.url} -> {self.status_code} in {self.elapsed_ms:.0f} ms"
