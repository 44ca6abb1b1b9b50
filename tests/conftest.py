"""
Root pytest configuration for the bookstore API suite.

The bookstore_api plugin (registered through the pytest11 entry point)
initializes settings and markers; this file only makes sure logging is
configured before collection imports any test module and enables
pytester for the plugin's own tests.
"""

from bookstore_api.run.config.logging import bootstrap_logging

pytest_plugins = ['pytester']

bootstrap_logging()
