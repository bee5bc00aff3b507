"""Global test configuration for azdo_git tests."""

from collections.abc import Generator
from unittest.mock import MagicMock

import pytest
import stamina
import structlog
from azdo_git.azure_devops_api import AzureDevOpsGitApi


@pytest.fixture(autouse=True, scope="session")
def deactivate_retries() -> None:
    """Disable stamina retries globally for all tests.

    Individual retry tests can re-enable with the enable_retry fixture.
    """
    stamina.set_active(False)


@pytest.fixture
def enable_retry() -> Generator[None, None, None]:
    """Enable stamina retry for specific tests.

    Use this fixture in tests that verify retry behavior.
    """
    stamina.set_active(True)
    stamina.set_testing(True, attempts=3, cap=True)
    yield
    stamina.set_testing(False)
    stamina.set_active(False)


@pytest.fixture(autouse=True)
def reset_structlog() -> Generator[None, None, None]:
    """Undo structlog configuration done by a test (e.g. via the CLI)."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def api() -> MagicMock:
    """Mock of the remote Git operations."""
    return MagicMock(spec=AzureDevOpsGitApi)

