"""
Unit test conftest.py for the bookstore API suite.

Unit tests that touch the shared settings restore them afterwards, so the
configured mode stays in effect for scenarios running in the same worker.
"""

import pytest

from bookstore_api.run.config import settings as settings_module


@pytest.fixture(autouse=True)
def preserve_settings():
    saved = settings_module._settings
    yield
    settings_module._settings = saved
