"""
WordLog Backend — Test Configuration (conftest.py)
===================================================

What:  Shared pytest fixtures for the entire test suite.
Why:   Provides reusable test infrastructure (in-memory collection, store,
       API client) so no test needs a running MongoDB.

Fixture Hierarchy (all function-scoped):
    ├── fake_collection: In-memory stand-in for a Motor collection
    ├── clock: Strictly increasing UTC timestamps
    ├── store: WordObservationStore over fake_collection
    ├── test_settings: Settings pointing at a throwaway database
    └── test_client: HTTPX AsyncClient with the store dependency overridden
"""

import copy
import os
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Mapping, Optional

# Override settings for testing BEFORE any app imports
os.environ["MONGODB_URI"] = "mongodb://localhost:27017"
os.environ["MONGODB_DB"] = "wordlog_test"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
import pytest_asyncio
from bson import ObjectId
from httpx import ASGITransport, AsyncClient

from app.config import Settings
from app.services.word_store import WordObservationStore


# ══════════════════════════════════════════════════════════════════════════
# In-memory collection
# ══════════════════════════════════════════════════════════════════════════

class FakeInsertResult:
    def __init__(self, inserted_id: ObjectId):
        self.inserted_id = inserted_id


class FakeCursor:
    """Supports the slice of AsyncIOMotorCursor the store uses: sort + async for."""

    def __init__(self, documents: List[Dict[str, Any]]):
        self._documents = documents

    def sort(self, keys):
        # Stable sorts applied from the least to the most significant key
        for field, direction in reversed(list(keys)):
            self._documents.sort(key=lambda doc: doc[field], reverse=direction < 0)
        return self

    def __aiter__(self):
        self._iter = iter(self._documents)
        return self

    async def __anext__(self):
        try:
            return next(self._iter)
        except StopIteration:
            raise StopAsyncIteration


class FakeCollection:
    """Stores documents in a list; returns copies like a real driver would."""

    def __init__(self):
        self.documents: List[Dict[str, Any]] = []
        self.indexes: List[Any] = []

    async def insert_one(self, document: Dict[str, Any]) -> FakeInsertResult:
        document.setdefault("_id", ObjectId())
        self.documents.append(copy.deepcopy(document))
        return FakeInsertResult(document["_id"])

    def find(self, filter: Optional[Mapping[str, Any]] = None) -> FakeCursor:
        assert not filter, "only full scans are supported"
        return FakeCursor([copy.deepcopy(doc) for doc in self.documents])

    async def create_index(self, keys, **kwargs) -> str:
        self.indexes.append(keys)
        return kwargs.get("name", "index")


# ══════════════════════════════════════════════════════════════════════════
# Function-Scoped Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def fake_collection():
    return FakeCollection()


@pytest.fixture
def clock():
    """
    Returns a callable yielding strictly increasing UTC timestamps
    (one second apart), so createdAt ordering is deterministic.
    """
    start = datetime(2024, 1, 15, 12, 0, 0, tzinfo=timezone.utc)
    ticks = {"n": 0}

    def now() -> datetime:
        value = start + timedelta(seconds=ticks["n"])
        ticks["n"] += 1
        return value

    return now


@pytest.fixture
def store(fake_collection, clock):
    return WordObservationStore(fake_collection, clock=clock)


@pytest.fixture
def test_settings():
    return Settings(
        mongodb_uri="mongodb://localhost:27017",
        mongodb_db="wordlog_test",
        mongodb_collection="users",
    )


@pytest.fixture
def sample_observation():
    """A valid create payload in API (camelCase) field names."""
    return {
        "interviewee": "  Alice  ",
        "interviewTitle": " Morning shift ",
        "word": "  Stress ",
        "count": 3,
        "category": " work ",
        "date": "2024-01-10T09:30:00Z",
    }


@pytest_asyncio.fixture
async def test_client(store):
    """
    HTTPX AsyncClient talking to a fresh app whose record store dependency
    is bound to the in-memory collection.
    """
    from app.main import create_app
    from app.routes.words import get_word_store

    app = create_app()
    app.dependency_overrides[get_word_store] = lambda: store
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
