import itertools

import pytest

from brados.db.database import build_engine
from brados.db.sql_store import SqlDocumentStore
from brados.utils.config import refresh_settings_cache

_BRADOS_ENV_VARS = ("BRADOS_ENV", "BRADOS_COLLECTION_PREFIX", "BRADOS_MAX_BATCH_WRITES", "LOG_LEVEL")


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch):
    """Every test starts from default settings (dev environment, ``dev_`` prefix)."""
    for name in _BRADOS_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    refresh_settings_cache()
    yield
    refresh_settings_cache()


@pytest.fixture
def store():
    """Fresh SQL document store on a private in-memory SQLite database."""
    engine = build_engine("sqlite+pysqlite:///:memory:")
    yield SqlDocumentStore.from_engine(engine)
    engine.dispose()


@pytest.fixture
def clock():
    """Deterministic clock returning strictly increasing ISO instants."""
    ticks = itertools.count(1)
    return lambda: f"2024-01-01T00:00:{next(ticks):02d}.000Z"


@pytest.fixture
def id_factory():
    counter = itertools.count(1)
    return lambda: f"id-{next(counter)}"
