"""
Runtime configuration: shared API settings and logging bootstrap.
"""

from .settings import ApiSettings, get_settings, initialize, is_initialized, reset_settings
from .logging import bootstrap_logging
