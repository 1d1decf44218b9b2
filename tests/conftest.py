"""
FILE: tests/conftest.py
Shared fixtures for gateway tests.
"""

from pathlib import Path

import pytest

from tests.factories import gateway_config

_GATEWAY_ENV_VARS = (
    "SOLVER_BASE_URL",
    "SOLVER_API_KEY",
    "MOCK_MODE",
    "REQUEST_TIMEOUT_MS",
    "MOCK_OPTIMIZE_FIXTURE_PATH",
    "MOCK_REBALANCE_FIXTURE_PATH",
)


def _has_marker(item: pytest.Item, name: str) -> bool:
    return item.get_closest_marker(name) is not None


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        if (
            _has_marker(item, "unit")
            or _has_marker(item, "integration")
            or _has_marker(item, "e2e")
        ):
            continue

        path = Path(str(item.fspath)).as_posix().lower()
        if "/tests/integration/" in path or "_integration.py" in path:
            item.add_marker(pytest.mark.integration)
            continue
        if "/tests/e2e/" in path or "/tests/api/" in path:
            item.add_marker(pytest.mark.e2e)
            continue
        item.add_marker(pytest.mark.unit)


@pytest.fixture(autouse=True)
def isolated_gateway_env(monkeypatch: pytest.MonkeyPatch):
    """Keep host environment settings from leaking into configuration tests."""

    for name in _GATEWAY_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def live_config():
    return gateway_config()


@pytest.fixture
def mock_config():
    return gateway_config(mock_mode=True)
