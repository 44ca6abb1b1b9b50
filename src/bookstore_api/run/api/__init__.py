"""
In-process bookstore service used for offline runs.
"""

from .base import BookstoreAPI, create_app
