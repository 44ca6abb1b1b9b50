"""
Test configuration loading: scenario groups and API defaults from tests.yaml.
"""
import logging
from pathlib import Path
from typing import Any, Dict, List

import yaml

from bookstore_api.exceptions import ConfigException

logger = logging.getLogger(__name__)

SDK_TESTS_YAML = Path(__file__).parent / 'tests.yaml'


def _read_yaml(path: Path) -> Dict[str, Any]:
    with open(path, 'r', encoding='utf-8') as f:
        return yaml.safe_load(f) or {}


def load_test_config() -> Dict[str, Any]:
    """
    Load test configuration.

    The packaged tests.yaml provides defaults; a tests.yaml in the current
    working directory overrides them section by section.

    Returns:
        Merged configuration dictionary
    """
    config = _read_yaml(SDK_TESTS_YAML) if SDK_TESTS_YAML.exists() else {}

    app_config_path = Path.cwd() / 'tests.yaml'
    if app_config_path.exists():
        try:
            app_config = _read_yaml(app_config_path)
        except yaml.YAMLError as e:
            logger.warning(f"Failed to load {app_config_path}: {e}")
            app_config = {}
        for section, values in app_config.items():
            if isinstance(values, dict) and isinstance(config.get(section), dict):
                config[section] = {**config[section], **values}
            else:
                config[section] = values

    return config


def get_api_defaults() -> Dict[str, Any]:
    """Return the 'api' section (base_url, mode)."""
    return load_test_config().get('api', {})


def get_group_names() -> List[str]:
    return list(load_test_config().get('groups', {}).keys())


def get_group_config(group: str) -> Dict[str, Any]:
    """
    Get test paths and marker expression for a scenario group.

    Args:
        group: Group name (e.g., smoke, regression, security, integration)

    Returns:
        dict with 'tests' (list of paths), 'markers' (str or None) and
        'mode' (API mode override or None)

    Raises:
        ConfigException: If the group is not defined
    """
    groups = load_test_config().get('groups', {})
    if group not in groups:
        raise ConfigException(
            f"Unknown test group '{group}'. Available groups: {', '.join(groups)}",
            setting_name='group',
            value=group
        )
    group_config = groups[group] or {}
    return {
        'tests': list(group_config.get('tests', [])),
        'markers': group_config.get('markers'),
        'mode': group_config.get('mode'),
    }
