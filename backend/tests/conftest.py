"""
NoteShelf Backend — Test Configuration (conftest.py)
=====================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── note_store: Real NoteStore on a fresh SQLite file under tmp_path
    ├── mock_store: AsyncMock-backed stand-in for NoteStore (no database)
    ├── test_client: HTTPX AsyncClient talking to an app backed by note_store
    └── mock_client: HTTPX AsyncClient talking to an app backed by mock_store
"""

import os
import tempfile
from contextlib import asynccontextmanager
from typing import AsyncIterator
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# ══════════════════════════════════════════════════════════════════════════
# Environment Setup
# ══════════════════════════════════════════════════════════════════════════

# Set BEFORE any noteshelf import so the settings singleton never points at
# the real backing file next to the application
os.environ["DATABASE_PATH"] = os.path.join(
    tempfile.mkdtemp(prefix="noteshelf_test_"), "notes.db"
)
os.environ["LOG_LEVEL"] = "WARNING"

from noteshelf.database import NoteStore  # noqa: E402
from noteshelf.main import create_app  # noqa: E402


@asynccontextmanager
async def client_for(store) -> AsyncIterator[AsyncClient]:
    """
    HTTPX client routed straight into an app serving `store`.

    ASGITransport does not run the lifespan, so the store must already be
    initialized (or be a mock).
    """
    app = create_app(store=store)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def note_store(tmp_path) -> AsyncIterator[NoteStore]:
    """A fresh, initialized store backed by its own SQLite file."""
    store = NoteStore(f"sqlite+aiosqlite:///{tmp_path / 'notes.db'}")
    await store.initialize()
    yield store
    await store.close()


@pytest.fixture
def mock_store():
    """
    Provides a mock NoteStore.

    Usage:
        mock_store.update.return_value = 0
        with pytest.raises(NotFoundError):
            await NoteService(mock_store).update_note("7", payload)
    """
    store = MagicMock(spec=NoteStore)
    store.list = AsyncMock(return_value=[])
    store.create = AsyncMock()
    store.update = AsyncMock(return_value=1)
    store.delete = AsyncMock(return_value=1)
    return store


@pytest_asyncio.fixture
async def test_client(note_store) -> AsyncIterator[AsyncClient]:
    async with client_for(note_store) as client:
        yield client


@pytest_asyncio.fixture
async def mock_client(mock_store) -> AsyncIterator[AsyncClient]:
    async with client_for(mock_store) as client:
        yield client
