"""
Global pytest fixtures for the short-link service test suite.

Responsibilities:
    - Provide fresh storage backends (memory, journal) for direct testing
    - Provide a ShortLinkManager wired to the memory backend
    - Provide a FastAPI TestClient via the app factory, parametrized over
      every backend that can run locally

Why an app factory?
    Using `create_app()` with an injected storage handle ensures each test
    gets fresh state, eliminating cross-test flakiness.
"""

import os

import pytest
from fastapi.testclient import TestClient

from shortlink_service.app import create_app
from shortlink_service.config import Settings
from shortlink_service.manager.link_manager import ShortLinkManager
from shortlink_service.storage.journal_storage import JournalStorage
from shortlink_service.storage.storage import MemoryStorage

BASE_URL = "http://localhost:8080/"


@pytest.fixture
def settings() -> Settings:
    return Settings(base_url=BASE_URL)


@pytest.fixture
def memory_storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def journal_path(tmp_path) -> str:
    return str(tmp_path / "short-url-db.json")


@pytest.fixture
def journal_storage(journal_path) -> JournalStorage:
    storage = JournalStorage(journal_path)
    storage.load()
    return storage


def _postgres_storage():
    from shortlink_service.storage.db_storage import DBStorage

    storage = DBStorage(os.environ["DATABASE_DSN"])
    storage.load()
    with storage._conn() as con, con.cursor() as cur:
        cur.execute("TRUNCATE urls")
    return storage


@pytest.fixture(params=["memory", "journal"] + (["postgres"] if os.getenv("DATABASE_DSN") else []))
def any_storage(request, tmp_path):
    """Every backend that can run here; postgres only when DATABASE_DSN is set."""
    if request.param == "memory":
        storage = MemoryStorage()
    elif request.param == "journal":
        storage = JournalStorage(str(tmp_path / "journal.json"))
        storage.load()
    else:
        storage = _postgres_storage()
    yield storage
    storage.close()


@pytest.fixture
def manager(memory_storage: MemoryStorage) -> ShortLinkManager:
    return ShortLinkManager(storage=memory_storage, base_url=BASE_URL)


@pytest.fixture
def client(settings, any_storage) -> TestClient:
    """
    Provide a fresh TestClient around a new app instance for each backend.
    """
    app = create_app(settings=settings, storage=any_storage)
    return TestClient(app)
