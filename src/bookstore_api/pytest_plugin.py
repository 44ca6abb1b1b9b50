"""
Pytest plugin for the bookstore API suite.

Registers the scenario group markers, initializes the shared API settings
once per session (per worker under pytest-xdist), provides client fixtures,
and reports transport failures separately from assertion failures.
"""

import os
import random

import pytest

from bookstore_api.exceptions import ConfigException, TransportError
from bookstore_api.run.config.logging import bootstrap_logging
from bookstore_api.run.config.settings import get_settings, initialize

SCENARIO_MARKERS = {
    'smoke': 'critical-path scenarios run on every change',
    'regression': 'full behavioural coverage of the Books and Authors endpoints',
    'security': 'injection and hostile-input scenarios',
    'integration': 'cross-entity Books/Authors narratives',
}

SEED_ENV_VAR = 'TEST_SEED'
FAILURE_KIND = 'failure_kind'
TRANSPORT = 'transport'
TRANSPORT_URL = 'transport_url'


def pytest_addoption(parser):
    """Add custom command line options for pytest."""
    group = parser.getgroup('bookstore', 'bookstore API suite')
    group.addoption(
        "--api-mode",
        action="store",
        default=None,
        help="REMOTE to call the bookstore service over HTTP, IN_MEMORY for the in-process service"
    )
    group.addoption(
        "--base-url",
        action="store",
        default=None,
        help="Base URL of the remote bookstore service (overrides TEST_API_URL)"
    )
    group.addoption(
        "--seed",
        action="store",
        type=int,
        default=None,
        help="Seed for fixture generation (default: TEST_SEED or a random seed)"
    )


def pytest_configure(config):
    """Register scenario markers, fix the fixture seed and initialize the API settings."""
    bootstrap_logging()

    for name, description in SCENARIO_MARKERS.items():
        config.addinivalue_line("markers", f"{name}: {description}")

    # Workers inherit the controller's environment, so every process sees one seed
    seed = config.getoption("--seed")
    if seed is not None:
        os.environ[SEED_ENV_VAR] = str(seed)
    elif SEED_ENV_VAR not in os.environ:
        os.environ[SEED_ENV_VAR] = str(random.SystemRandom().randrange(2**32))

    try:
        initialize(
            base_url=config.getoption("--base-url"),
            mode=config.getoption("--api-mode"),
        )
    except ConfigException as e:
        raise pytest.UsageError(e.guidance) from e


def pytest_report_header(config):
    settings = get_settings()
    return [
        f"bookstore api: mode={settings.mode} base_url={settings.base_url}",
        f"fixture seed: {os.environ.get(SEED_ENV_VAR)}",
    ]


def seeded_rng(test_id: str) -> random.Random:
    """A random.Random derived from the run seed and a test identifier."""
    return random.Random(f"{os.environ.get(SEED_ENV_VAR, '0')}:{test_id}")


@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item, call):
    """Tag reports whose failure is a TransportError rather than an assertion."""
    outcome = yield
    report = outcome.get_result()
    if call.excinfo is not None and call.excinfo.errisinstance(TransportError):
        report.user_properties.append((FAILURE_KIND, TRANSPORT))
        report.user_properties.append((TRANSPORT_URL, call.excinfo.value.url))


def _is_transport_failure(report) -> bool:
    return dict(getattr(report, 'user_properties', ())).get(FAILURE_KIND) == TRANSPORT


def pytest_terminal_summary(terminalreporter, exitstatus, config):
    """Add a transport failure summary with guidance to the terminal output."""
    reports = terminalreporter.stats.get('failed', []) + terminalreporter.stats.get('error', [])
    transport_failures = [report for report in reports if _is_transport_failure(report)]
    if not transport_failures:
        return

    terminalreporter.write_sep("=", "TRANSPORT FAILURES")
    terminalreporter.write_line("")
    terminalreporter.write_line(
        f"❌ {len(transport_failures)} tests got no response "
        f"(infrastructure, not assertion failures):"
    )
    for report in transport_failures:
        url = dict(report.user_properties).get(TRANSPORT_URL, 'unknown url')
        terminalreporter.write_line(f"   {report.nodeid} ({report.when}): {url}")
    terminalreporter.write_line("")
    terminalreporter.write_line("💡 Check network access, set TEST_API_URL, or run with --api-mode IN_MEMORY")
    terminalreporter.write_line("")


@pytest.fixture(scope="function")
def api_client():
    """
    API client for the configured mode.

    - IN_MEMORY: InMemoryAPITestClient over a freshly seeded in-process service
    - REMOTE: RemoteAPITestClient against the configured base URL
    """
    from bookstore_api.build.api_client import create_api_client
    return create_api_client()


@pytest.fixture(scope="function")
def book_client(api_client):
    from bookstore_api.build.api_client import BookClient
    return BookClient(api_client)


@pytest.fixture(scope="function")
def author_client(api_client):
    from bookstore_api.build.api_client import AuthorClient
    return AuthorClient(api_client)


@pytest.fixture(scope="function")
def fixture_rng(request):
    """A random.Random seeded from the run seed and the test's node id."""
    return seeded_rng(request.node.nodeid)
