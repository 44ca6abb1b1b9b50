"""
Pydantic models for the bookstore resources.

Decoding is permissive in the way a POJO deserializer is: unknown keys are
ignored and absent or null fields fall back to zero values. No business
validation lives here; validity is something the scenarios probe.
"""
from collections.abc import Mapping
from typing import Any, Dict, List, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from bookstore_api.exceptions import DeserializationError

R = TypeVar('R', bound='Resource')


class Resource(BaseModel):
    """Base for resources exchanged as JSON with the bookstore service."""
    model_config = ConfigDict(frozen=True, extra='ignore', populate_by_name=True)

    id: int = 0

    @field_validator('*', mode='before')
    @classmethod
    def _null_to_zero_value(cls, value, info):
        if value is None:
            return cls.model_fields[info.field_name].default
        return value

    def with_changes(self: R, **fields) -> R:
        """Return a copy with the given fields (python names) replaced."""
        return self.model_copy(update=fields)


class Book(Resource):
    """A book as served by /api/v1/Books."""
    title: str = ''
    description: str = ''
    page_count: int = Field(0, alias='pageCount')
    excerpt: str = ''
    publish_date: str = Field('', alias='publishDate')


class Author(Resource):
    """An author as served by /api/v1/Authors.

    id_book references a Book id; the service, not the client, decides
    whether the reference must exist.
    """
    id_book: int = Field(0, alias='idBook')
    first_name: str = Field('', alias='firstName')
    last_name: str = Field('', alias='lastName')


def encode(resource: Resource) -> Dict[str, Any]:
    """Encode a resource into a JSON object keyed by wire names."""
    return resource.model_dump(by_alias=True)


def decode(data: Any, resource_type: Type[R]) -> R:
    """Decode a JSON object into resource_type, ignoring unknown keys.

    Raises:
        DeserializationError: If data is not an object or a field cannot be coerced
    """
    if not isinstance(data, Mapping):
        raise DeserializationError(
            resource_type.__name__,
            f"expected a JSON object, got {type(data).__name__}"
        )
    try:
        return resource_type.model_validate(dict(data))
    except ValidationError as e:
        raise DeserializationError(resource_type.__name__, str(e)) from e


def decode_list(data: Any, resource_type: Type[R]) -> List[R]:
    """Decode a JSON array of objects into a list of resource_type."""
    if not isinstance(data, list):
        raise DeserializationError(
            f"List[{resource_type.__name__}]",
            f"expected a JSON array, got {type(data).__name__}"
        )
    return [decode(item, resource_type) for item in data]
