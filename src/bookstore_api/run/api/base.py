"""
In-process bookstore service.

A FastAPI application serving the same Books/Authors contract as the public
demo service, used when TEST_API_MODE=IN_MEMORY so the scenarios run
offline. Error bodies follow the problem-details shape of the remote
service.
"""
import json
import logging
import re
from datetime import datetime
from typing import Any, Callable, Dict, Optional

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from bookstore_api.run.config.settings import DEFAULT_API_VERSION
from .store import SEED_BOOK_COUNT, BookstoreStore, Collection

logger = logging.getLogger(__name__)

INT32_MIN = -2**31
INT32_MAX = 2**31 - 1
MAX_BODY_BYTES = 1024 * 1024

HTML_TAG = re.compile(r'<[^>]*>')
TRAVERSAL_SEQUENCES = ('../', '..\\')

PROBLEM_TYPES = {
    400: "https://tools.ietf.org/html/rfc7231#section-6.5.1",
    404: "https://tools.ietf.org/html/rfc7231#section-6.5.4",
    413: "https://tools.ietf.org/html/rfc7231#section-6.5.11",
    415: "https://tools.ietf.org/html/rfc7231#section-6.5.13",
}


class ProblemError(Exception):
    """Raised inside a route to answer with a problem-details body."""

    def __init__(self, status: int, title: str, errors: Optional[Dict[str, list]] = None):
        super().__init__(title)
        self.status = status
        self.title = title
        self.errors = errors

    def to_response(self) -> JSONResponse:
        content = {
            'type': PROBLEM_TYPES.get(self.status, 'about:blank'),
            'title': self.title,
            'status': self.status,
        }
        if self.errors:
            content['errors'] = self.errors
        return JSONResponse(status_code=self.status, content=content,
                            media_type='application/problem+json')


def validation_problem(errors: Dict[str, list]) -> ProblemError:
    return ProblemError(400, "One or more validation errors occurred.", errors)


def sanitize_text(value: str) -> str:
    """Strip markup and path traversal sequences from stored text."""
    value = HTML_TAG.sub('', value)
    previous = None
    while previous != value:
        previous = value
        for sequence in TRAVERSAL_SEQUENCES:
            value = value.replace(sequence, '')
    return value


def _int_field(payload: Dict[str, Any], name: str, errors: Dict[str, list], minimum: int = INT32_MIN) -> int:
    value = payload.get(name, 0)
    if isinstance(value, bool) or not isinstance(value, int):
        errors[name] = [f"The JSON value could not be converted to System.Int32. Path: $.{name}"]
        return 0
    if not INT32_MIN <= value <= INT32_MAX:
        errors[name] = [f"The value {value} is out of range for System.Int32. Path: $.{name}"]
    elif value < minimum:
        errors[name] = [f"The field {name} must be at least {minimum}."]
    return value


def _text_field(payload: Dict[str, Any], name: str, errors: Dict[str, list], required: bool = False) -> str:
    value = payload.get(name)
    if value is None:
        if required:
            errors[name] = [f"The {name} field is required."]
        return ''
    if not isinstance(value, str):
        errors[name] = [f"The JSON value could not be converted to System.String. Path: $.{name}"]
        return ''
    if required and not value.strip():
        errors[name] = [f"The {name} field is required."]
    return sanitize_text(value)


def _date_field(payload: Dict[str, Any], name: str, errors: Dict[str, list]) -> str:
    value = payload.get(name)
    if not isinstance(value, str):
        errors[name] = [f"The JSON value could not be converted to System.DateTime. Path: $.{name}"]
        return ''
    try:
        datetime.fromisoformat(value.replace('Z', '+00:00'))
    except ValueError:
        errors[name] = [f"The JSON value could not be converted to System.DateTime. Path: $.{name}"]
    return value


def _require_object(payload: Any) -> Dict[str, Any]:
    if not isinstance(payload, dict):
        raise validation_problem({'$': ["The JSON value could not be converted to an object."]})
    return payload


def validate_book(payload: Any) -> Dict[str, Any]:
    """Validate a Book payload and return the fields to store."""
    payload = _require_object(payload)
    errors: Dict[str, list] = {}
    fields = {
        'id': _int_field(payload, 'id', errors),
        'title': _text_field(payload, 'title', errors, required=True),
        'description': _text_field(payload, 'description', errors),
        'pageCount': _int_field(payload, 'pageCount', errors, minimum=0),
        'excerpt': _text_field(payload, 'excerpt', errors),
        'publishDate': _date_field(payload, 'publishDate', errors),
    }
    if errors:
        raise validation_problem(errors)
    return fields


def validate_author(payload: Any) -> Dict[str, Any]:
    """Validate an Author payload and return the fields to store.

    idBook is not checked against the Books collection.
    """
    payload = _require_object(payload)
    errors: Dict[str, list] = {}
    fields = {
        'id': _int_field(payload, 'id', errors),
        'idBook': _int_field(payload, 'idBook', errors, minimum=0),
        'firstName': _text_field(payload, 'firstName', errors, required=True),
        'lastName': _text_field(payload, 'lastName', errors, required=True),
    }
    if errors:
        raise validation_problem(errors)
    return fields


async def read_json(request: Request) -> Any:
    """Parse a JSON request body, enforcing content type and size."""
    media_type = request.headers.get('content-type', '').split(';')[0].strip().lower()
    if media_type != 'application/json' and not media_type.endswith('+json'):
        raise ProblemError(415, "Unsupported Media Type")

    body = await request.body()
    if len(body) > MAX_BODY_BYTES:
        raise ProblemError(413, "Payload Too Large")
    try:
        return json.loads(body)
    except ValueError as e:
        raise validation_problem({'$': [f"The JSON value is malformed: {e}"]}) from e


def check_id(resource_id: int) -> None:
    if resource_id <= 0:
        raise validation_problem({'id': [f"The id must be a positive integer, got {resource_id}."]})


class BookstoreAPI:
    """FastAPI app serving /Books and /Authors from an in-memory store."""

    def __init__(self, api_version: str = DEFAULT_API_VERSION, book_count: int = SEED_BOOK_COUNT):
        self.app = FastAPI(
            title="Bookstore Service",
            description="In-process bookstore service for offline API test runs",
            version="1.0.0"
        )
        self.api_version = api_version
        self.store = BookstoreStore(book_count)
        self._setup_error_handlers()
        self._setup_collection_routes('Books', self.store.books, validate_book)
        self._setup_collection_routes('Authors', self.store.authors, validate_author,
                                      filter_field='idBook')

    def _setup_error_handlers(self):
        @self.app.exception_handler(ProblemError)
        async def handle_problem(request: Request, exc: ProblemError):
            return exc.to_response()

        @self.app.exception_handler(RequestValidationError)
        async def handle_validation_error(request: Request, exc: RequestValidationError):
            errors = {}
            for error in exc.errors():
                location = '.'.join(str(part) for part in error.get('loc', ()))
                errors.setdefault(location, []).append(error.get('msg', 'invalid value'))
            return validation_problem(errors).to_response()

    def _setup_collection_routes(self, name: str, collection: Collection,
                                 validate: Callable[[Any], Dict[str, Any]],
                                 filter_field: Optional[str] = None):
        collection_path = f"{self.api_version}/{name}"
        item_path = f"{collection_path}/{{resource_id}}"

        @self.app.get(collection_path)
        async def list_resources(request: Request):
            records = collection.all()
            if filter_field and filter_field in request.query_params:
                try:
                    wanted = int(request.query_params[filter_field])
                except ValueError as e:
                    raise validation_problem({filter_field: ["The value is not a valid integer."]}) from e
                records = [record for record in records if record[filter_field] == wanted]
            return records

        @self.app.get(item_path)
        async def get_resource(resource_id: int):
            check_id(resource_id)
            record = collection.get(resource_id)
            if record is None:
                raise ProblemError(404, "Not Found")
            return record

        @self.app.post(collection_path)
        async def create_resource(request: Request):
            fields = validate(await read_json(request))
            record = collection.add(fields)
            logger.debug(f"Stored {name} {record['id']}")
            return record

        @self.app.put(item_path)
        async def update_resource(resource_id: int, request: Request):
            check_id(resource_id)
            fields = validate(await read_json(request))
            body_id = fields.pop('id')
            if body_id not in (0, resource_id):
                raise validation_problem({'id': [f"Body id {body_id} does not match path id {resource_id}."]})
            record = collection.replace(resource_id, fields)
            if record is None:
                raise ProblemError(404, "Not Found")
            return record

        @self.app.delete(item_path)
        async def delete_resource(resource_id: int):
            check_id(resource_id)
            if not collection.remove(resource_id):
                raise ProblemError(404, "Not Found")
            return Response(status_code=200)


def create_app(api_version: str = DEFAULT_API_VERSION, book_count: int = SEED_BOOK_COUNT) -> FastAPI:
    """Build a freshly seeded bookstore app."""
    return BookstoreAPI(api_version, book_count).app
