"""
Thread-safe in-memory store backing the in-process bookstore service.

Records are kept as wire-shaped dicts (camelCase keys) so the service can
return them as-is. Ids are assigned by the store and never reused.
"""
import threading
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

SEED_BOOK_COUNT = 200
SEED_EPOCH = datetime(2024, 1, 1, 12, 0, 0)


def seed_books(count: int) -> List[Dict[str, Any]]:
    books = []
    for i in range(1, count + 1):
        published = SEED_EPOCH - timedelta(days=i)
        books.append({
            'id': i,
            'title': f"Book {i}",
            'description': f"Description of book {i}. Lorem ipsum dolor sit amet.",
            'pageCount': i * 100,
            'excerpt': f"Excerpt of book {i}. Lorem ipsum dolor sit amet.",
            'publishDate': published.strftime('%Y-%m-%dT%H:%M:%S.000Z'),
        })
    return books


def seed_authors(book_count: int) -> List[Dict[str, Any]]:
    authors = []
    for book_id in range(1, book_count + 1):
        for _ in range(1 + book_id % 3):
            n = len(authors) + 1
            authors.append({
                'id': n,
                'idBook': book_id,
                'firstName': f"First Name {n}",
                'lastName': f"Last Name {n}",
            })
    return authors


class Collection:
    """One id-keyed collection guarded by a lock."""

    def __init__(self, records: List[Dict[str, Any]]):
        self._lock = threading.Lock()
        self._records = {record['id']: dict(record) for record in records}
        self._next_id = max(self._records, default=0) + 1

    def all(self) -> List[Dict[str, Any]]:
        with self._lock:
            return [dict(record) for record in self._records.values()]

    def get(self, record_id: int) -> Optional[Dict[str, Any]]:
        with self._lock:
            record = self._records.get(record_id)
            return dict(record) if record is not None else None

    def add(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        with self._lock:
            record = {**fields, 'id': self._next_id}
            self._records[self._next_id] = record
            self._next_id += 1
            return dict(record)

    def replace(self, record_id: int, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        with self._lock:
            if record_id not in self._records:
                return None
            record = {**fields, 'id': record_id}
            self._records[record_id] = record
            return dict(record)

    def remove(self, record_id: int) -> bool:
        with self._lock:
            return self._records.pop(record_id, None) is not None


class BookstoreStore:
    """Books and authors, seeded with reference data."""

    def __init__(self, book_count: int = SEED_BOOK_COUNT):
        self.books = Collection(seed_books(book_count))
        self.authors = Collection(seed_authors(book_count))
