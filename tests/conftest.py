"""Shared test fixtures."""

from unittest.mock import AsyncMock, MagicMock

import pytest


@pytest.fixture(autouse=True)
def _reset_reconciler():
    """Drop the process-wide reconciler between tests."""
    import src.whatsapp.handler as mod

    mod._reconciler = None
    yield
    mod._reconciler = None


@pytest.fixture()
def fake_client() -> MagicMock:
    """A SessionClient stand-in whose remote calls are AsyncMocks."""
    client = MagicMock()
    client.send_message = AsyncMock(return_value="Hi from the agent")
    client.create_session = AsyncMock(return_value=None)
    client.close = AsyncMock()
    return client
