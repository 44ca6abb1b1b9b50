"""
Logging bootstrap for the bookstore API suite.

Entry points (the invoke tasks, the pytest plugin, conftest files) call
bootstrap_logging() so that client exchange logs, service logs and task
output share one INI-driven configuration.
"""

import logging
import logging.config
import os
import sys
import threading
from pathlib import Path
from typing import Optional

VALID_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']

_bootstrapped = False
_bootstrap_lock = threading.Lock()


def _find_logging_config() -> Optional[Path]:
    """Return ./logging.ini or ./config/logging.ini, whichever exists first."""
    for candidate in (Path('logging.ini'), Path('config/logging.ini')):
        if candidate.exists():
            return candidate
    return None


def _normalize_log_level() -> str:
    """Make LOG_LEVEL an upper-case level name, defaulting to INFO."""
    level = os.environ.get('LOG_LEVEL', 'INFO').strip().upper()
    if level not in VALID_LEVELS:
        print(f"Warning: Invalid LOG_LEVEL '{level}', using INFO", file=sys.stderr)
        level = 'INFO'
    os.environ['LOG_LEVEL'] = level
    return level


def _basic_config(level: str):
    logging.basicConfig(
        level=getattr(logging, level),
        format='%(asctime)s %(levelname)s: %(name)s: %(message)s',
        stream=sys.stderr
    )


def bootstrap_logging(name: Optional[str] = None, force: bool = False) -> None:
    """
    Configure logging once per process.

    Loads logging.ini through logging.config.fileConfig() with the
    normalized LOG_LEVEL substituted as %(log_level)s, then applies the
    same level to the root logger and its console handlers. Without an
    INI file, falls back to basicConfig on stderr.

    Repeated calls are no-ops unless force is set.

    Args:
        name: Optional name for the logger announcing the configuration
        force: Reconfigure even if logging was already bootstrapped
    """
    global _bootstrapped

    with _bootstrap_lock:
        if _bootstrapped and not force:
            return

        level = _normalize_log_level()
        config_path = _find_logging_config()

        if config_path is None:
            _basic_config(level)
            _bootstrapped = True
            return

        try:
            logging.config.fileConfig(
                str(config_path),
                defaults={'log_level': level},
                disable_existing_loggers=False
            )
        except (OSError, ValueError, KeyError) as e:
            print(f"Warning: Failed to load logging config from {config_path}: {e}", file=sys.stderr)
            print("Using basic logging configuration", file=sys.stderr)
            _basic_config(level)
        else:
            # fileConfig leaves handler levels as written; LOG_LEVEL wins
            root_logger = logging.getLogger()
            root_logger.setLevel(level)
            for handler in root_logger.handlers:
                if isinstance(handler, logging.StreamHandler) and not isinstance(handler, logging.FileHandler):
                    handler.setLevel(level)
            logging.getLogger(name or __name__).debug(f"Logging configured from {config_path}")

        _bootstrapped = True
