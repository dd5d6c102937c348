"""Pytest configuration and shared fixtures.

Every test gets its own temporary data directory, a fresh record store
and a fresh chat log.
"""

import os
from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Set testing mode BEFORE importing app so rate limiting starts disabled
os.environ["TESTING"] = "true"

from pairgate.config import settings

settings.testing = True

from pairgate.main import app
from pairgate.services.chat_log import get_chat_log, reset_chat_log
from pairgate.store import get_store, reset_store


@pytest.fixture(autouse=True)
def data_dir(tmp_path, monkeypatch):
    """Point the record store at a per-test directory."""
    monkeypatch.setattr(settings, "data_dir", str(tmp_path))
    reset_store()
    reset_chat_log()
    yield tmp_path
    reset_store()
    reset_chat_log()


@pytest.fixture
def store(data_dir):
    return get_store()


@pytest.fixture
def chat_log():
    return get_chat_log()


@pytest_asyncio.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    """Provide an async HTTP client for testing the API."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
