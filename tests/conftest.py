"""
Pytest configuration and fixtures for http-service-core tests.
"""

import pytest
import responses as responses_lib

from http_service.core.http_service import HTTPService
from http_service.core.logging import LoggingConfig, clear_correlation_id


@pytest.fixture
def base_url():
    """Service URI for testing."""
    return "https://api.example.com/v1/"


@pytest.fixture
def mock_responses():
    """Mock HTTP responses using responses library."""
    with responses_lib.RequestsMock() as rsps:
        yield rsps


@pytest.fixture
def service(base_url):
    """Sync HTTP service instance for testing."""
    service = HTTPService(base_url)
    yield service
    service.close()


@pytest.fixture
def logging_config():
    """LoggingConfig with console output at DEBUG."""
    return LoggingConfig.create(
        level="DEBUG",
        enable_console=True,
        enable_file=False
    )


@pytest.fixture
def logging_config_with_file(tmp_path):
    """
    LoggingConfig fixture with file logging enabled.

    Uses temporary directory for log files to avoid cleanup issues.
    """
    log_file = tmp_path / "test.log"
    return LoggingConfig.create(
        level="DEBUG",
        format="json",
        enable_console=False,
        enable_file=True,
        file_path=str(log_file)
    )


@pytest.fixture(autouse=True)
def _reset_correlation_id():
    yield
    clear_correlation_id()


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Run in an empty directory without HTTP_SERVICE_* variables."""
    import os
    for key in list(os.environ):
        if key.upper().startswith("HTTP_SERVICE_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path
