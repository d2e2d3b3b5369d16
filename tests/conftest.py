# tests/conftest.py
import os
import tempfile
import time
import pytest

# Point the app at a throwaway SQLite file and the local Redis mode before importing it.
_tmpdir = tempfile.mkdtemp(prefix="voice-service-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_tmpdir, 'voices.db')}"
os.environ.pop("UPSTASH_REDIS_REST_URL", None)
os.environ.pop("UPSTASH_REDIS_REST_TOKEN", None)
for _name in ("APP_ENV", "PORT", "VOICES_LIST_TTL_SECONDS"):
    os.environ.pop(_name, None)

from fastapi.testclient import TestClient

from app.main import app  # import after env is set
from app.database import Base, engine  # voices table is registered via app.main imports
from app.services import cache_factory
from app.services.cache import CacheBackend, Empty, Failure, Hit
from app.services.cache_service import CacheService


class MemoryBackend(CacheBackend):
    """
    In-memory stand-in for Redis with the same string-in/string-out contract.
    Set `fail = True` to simulate a cache outage.
    """

    name = "memory"
    persistent = True

    def __init__(self):
        self.data: dict[str, tuple[str, float]] = {}
        self.ttls: dict[str, int] = {}
        self.fail = False
        self.calls: list[tuple[str, str]] = []

    def _outage(self, op: str, key: str = ""):
        self.calls.append((op, key))
        return Failure("connection refused") if self.fail else None

    async def connect(self):
        return self._outage("connect") or Empty()

    async def disconnect(self):
        return self._outage("disconnect") or Empty()

    async def get(self, key):
        failed = self._outage("get", key)
        if failed:
            return failed
        item = self.data.get(key)
        if item is None or item[1] <= time.monotonic():
            self.data.pop(key, None)
            return Empty()
        return Hit(item[0])

    async def set(self, key, raw, ttl_seconds):
        failed = self._outage("set", key)
        if failed:
            return failed
        self.data[key] = (raw, time.monotonic() + ttl_seconds)
        self.ttls[key] = ttl_seconds
        return Empty()

    async def delete(self, key):
        failed = self._outage("delete", key)
        if failed:
            return failed
        self.data.pop(key, None)
        return Empty()

    async def flush_all(self):
        failed = self._outage("flush_all")
        if failed:
            return failed
        self.data.clear()
        return Empty()


@pytest.fixture
def memory_backend():
    return MemoryBackend()


@pytest.fixture
def cache(memory_backend, monkeypatch):
    """A CacheService over the in-memory backend, installed as the process-wide instance."""
    service = CacheService(memory_backend)
    monkeypatch.setattr(cache_factory, "_cache_service", service)
    return service


@pytest.fixture(autouse=True)
def _fresh_schema():
    """Recreate tables for every test so API tests do not see each other's rows."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def client(cache):
    """A FastAPI TestClient for calling API endpoints (lifespan runs against the in-memory cache)."""
    with TestClient(app) as c:
        yield c
