"""
Test runner tasks for the bookstore API suite.

This module provides tasks for running scenario groups with the
appropriate pytest configuration.
"""

import logging
import os
import shutil
import subprocess
import sys
from pathlib import Path
from typing import List, Optional

from invoke import task
from invoke.exceptions import Exit

from bookstore_api.build.config.testing import get_group_config, get_group_names
from bookstore_api.exceptions import ConfigException
from bookstore_api.run.config.logging import bootstrap_logging

# Bootstrap logging to respect LOG_LEVEL environment variable
bootstrap_logging()
logger = logging.getLogger(__name__)

DEFAULT_THREADS = 3
CLEAN_TARGETS = ('.pytest_cache', 'reports', 'logs')
REPORTS_DIR = 'reports'


def validate_threads(threads) -> int:
    """Parse the worker count, which must be a positive integer."""
    try:
        count = int(threads)
    except (TypeError, ValueError) as e:
        raise ConfigException(f"Thread count must be an integer, got {threads!r}",
                              setting_name='threads', value=threads) from e
    if count < 1:
        raise ConfigException(f"Thread count must be at least 1, got {count}",
                              setting_name='threads', value=threads)
    return count


def clean_artifacts(root: Optional[Path] = None) -> List[Path]:
    """Remove caches, reports and logs left by earlier runs."""
    root = root or Path.cwd()
    removed = []
    for name in CLEAN_TARGETS:
        target = root / name
        if target.is_dir():
            shutil.rmtree(target)
            removed.append(target)
        elif target.exists():
            target.unlink()
            removed.append(target)
    for target in removed:
        logger.debug(f"Removed {target}")
    return removed


def report_path(group: str) -> Path:
    return Path(REPORTS_DIR) / f"junit-{group}.xml"


def _pytest_executable() -> List[str]:
    # Use the virtual environment's pytest directly when present
    venv_pytest = Path.cwd() / "venv" / "bin" / "pytest"
    if venv_pytest.exists():
        return [str(venv_pytest)]
    return [sys.executable, "-m", "pytest"]


def build_pytest_command(group: str, threads: int = DEFAULT_THREADS, report: bool = False,
                         verbose: bool = False, test_name: Optional[str] = None,
                         mode: Optional[str] = None, base_url: Optional[str] = None,
                         root: Optional[Path] = None) -> List[str]:
    """
    Build the pytest command line for a scenario group.

    Args:
        group: Group name from tests.yaml (all, smoke, regression, ...)
        threads: Number of pytest-xdist workers; 1 runs in-process
        report: Write JUnit XML to reports/junit-<group>.xml
        verbose: Pass -v to pytest
        test_name: Optional -k expression
        mode: Optional API mode (REMOTE or IN_MEMORY); defaults to the group's mode
        base_url: Optional remote base URL
        root: Directory test paths are resolved against (defaults to cwd)

    Returns:
        The command as an argument list

    Raises:
        ConfigException: If the group is unknown, threads is invalid, or
            none of the group's test paths exist
    """
    root = root or Path.cwd()
    threads = validate_threads(threads)
    group_config = get_group_config(group)

    cmd = _pytest_executable()
    cmd.extend([
        "--tb=short",
        "--strict-markers",
    ])

    if group_config['markers']:
        cmd.extend(["-m", group_config['markers']])

    if threads > 1:
        cmd.extend(["-n", str(threads)])

    if report:
        cmd.append(f"--junitxml={report_path(group)}")

    mode = mode or group_config['mode']
    if mode:
        cmd.extend(["--api-mode", mode])

    if base_url:
        cmd.extend(["--base-url", base_url])

    if verbose:
        cmd.append("-v")

    if test_name:
        cmd.extend(["-k", test_name])

    # Add test paths (filter out non-existent ones)
    valid_test_paths = []
    for path in group_config['tests']:
        if (root / path).exists():
            valid_test_paths.append(path)
        else:
            logger.debug(f"Test path not found, skipping: {path}")

    if not valid_test_paths:
        raise ConfigException(f"No test paths found for group '{group}' under {root}",
                              setting_name='group', value=group)

    cmd.extend(valid_test_paths)
    return cmd


def run_pytest(cmd: List[str]) -> int:
    """
    Run pytest as a subprocess so the plugin entry point is loaded.

    Returns:
        pytest's exit code
    """
    logger.debug(f"Running: {' '.join(cmd)}")
    result = subprocess.run(cmd, cwd=Path.cwd(), env=os.environ.copy())

    if result.returncode == 0:
        print("✅ All tests passed!")
    else:
        print(f"❌ Tests failed with exit code {result.returncode}")

    return result.returncode


@task(help={
    'group': 'Scenario group to run (all, smoke, regression, security, integration, books, authors, unit, offline)',
    'clean': 'Remove .pytest_cache, reports/ and logs/ before running',
    'report': 'Write a JUnit XML report to reports/junit-<group>.xml',
    'threads': 'Number of parallel workers (default 3)',
    'mode': "API mode: REMOTE or IN_MEMORY (default: the group's mode, else tests.yaml)",
    'base_url': 'Base URL of the remote bookstore service',
    'verbose': 'Enable verbose output',
    'test_name': 'Filter to specific test method(s) (e.g., "test_create_book" or "test_*author*")',
})
def test(ctx, group='all', clean=False, report=False, threads=DEFAULT_THREADS, mode=None,
         base_url=None, verbose=False, test_name=None):
    """
    Run a scenario group.

    Examples:
        inv test                          # Run everything with 3 workers
        inv test --group smoke            # Run smoke scenarios
        inv test --group security --report --clean
        inv test --group regression --threads 1 --mode IN_MEMORY
        inv test --group offline          # Everything against the in-process service
    """
    try:
        threads = validate_threads(threads)
        cmd = build_pytest_command(group, threads, report, verbose, test_name, mode, base_url)
    except ConfigException as e:
        print(e.guidance, file=sys.stderr)
        raise Exit(code=2)

    if clean:
        for target in clean_artifacts():
            print(f"🧹 Removed {target}")

    if report:
        Path(REPORTS_DIR).mkdir(exist_ok=True)

    print(f"🧪 Running '{group}' scenarios with {threads} worker(s)")
    exit_code = run_pytest(cmd)

    if report:
        print(f"📄 JUnit report: {report_path(group)}")

    if exit_code != 0:
        raise Exit(code=exit_code)


@task
def groups(ctx):
    """List the scenario groups defined in tests.yaml."""
    for name in get_group_names():
        group_config = get_group_config(name)
        markers = group_config['markers'] or '-'
        mode = group_config['mode'] or '-'
        print(f"{name:<14} markers={markers:<14} mode={mode:<10} paths={' '.join(group_config['tests'])}")
