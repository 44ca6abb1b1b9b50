"""
Test configuration for the bookstore API suite.
"""

from .testing import load_test_config, get_api_defaults, get_group_config, get_group_names
