from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class Hit:
    """Backend returned a stored (still serialized) value."""
    value: str


@dataclass(frozen=True)
class Empty:
    """Backend call succeeded without a value: a miss, or an acknowledged write."""


@dataclass(frozen=True)
class Failure:
    """Backend call failed; reason is only ever logged."""
    reason: str


CacheResult = Union[Hit, Empty, Failure]


class CacheBackend(ABC):
    """
    Minimal async backend interface so the cache service can run against
    Redis or the Upstash REST API without changing callers.

    Implementations must not raise for backend errors; they report them as Failure.
    """

    name: str = "unknown"
    # True when the backend holds a connection that must be opened and closed
    persistent: bool = False

    @abstractmethod
    async def connect(self) -> CacheResult:
        ...

    @abstractmethod
    async def disconnect(self) -> CacheResult:
        ...

    @abstractmethod
    async def get(self, key: str) -> CacheResult:
        ...

    @abstractmethod
    async def set(self, key: str, raw: str, ttl_seconds: int) -> CacheResult:
        ...

    @abstractmethod
    async def delete(self, key: str) -> CacheResult:
        ...

    @abstractmethod
    async def flush_all(self) -> CacheResult:
        ...
