"""Shared fixtures for models unit tests."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from opsml_cli.models import FileDownloader, RetryConfig


@pytest.fixture
def retry_config() -> RetryConfig:
    """Retry config with the production attempt budget and no delay."""
    return RetryConfig(max_attempts=3, retry_delay_seconds=0)


@pytest.fixture
def fake_sleep() -> AsyncMock:
    """Async sleep that records delays instead of waiting."""
    return AsyncMock()


@pytest.fixture
def file_downloader(
    mock_client: MagicMock, retry_config: RetryConfig, fake_sleep: AsyncMock
) -> FileDownloader:
    """FileDownloader wired to the mock client."""
    return FileDownloader(mock_client, retry_config, sleep=fake_sleep)
