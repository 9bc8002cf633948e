"""Shared fixtures for CLI unit tests."""

from unittest.mock import patch

import pytest

CLI_ENV_VARS = (
    "OPSML_TRACKING_URI",
    "OPSML_TIMEOUT",
    "OPSML_MAX_ATTEMPTS",
    "OPSML_RETRY_DELAY",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Isolate tests from the caller's environment and any local .env file."""
    for name in CLI_ENV_VARS:
        monkeypatch.delenv(name, raising=False)

    with patch("opsml_cli.cli.cli.load_dotenv"):
        yield
