"""Shared fixtures for client unit tests."""

import httpx
import pytest

from opsml_cli.client import OpsmlClient


@pytest.fixture
def client(client_config):
    """Create client pointing at the fake tracking server."""
    return OpsmlClient(client_config)


@pytest.fixture
def transport_client(client_config):
    """Factory for a client whose requests are answered by a handler function."""

    def _make(handler):
        return OpsmlClient(client_config, transport=httpx.MockTransport(handler))

    return _make
