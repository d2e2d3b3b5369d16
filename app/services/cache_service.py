import json
import logging
from typing import Any, Dict, Mapping, Optional

from .cache import CacheBackend, Failure, Hit

logger = logging.getLogger(__name__)

DEFAULT_TTL = 3600  # 1 hour in seconds
KEY_SEPARATOR = ":"


def generate_key(prefix: str, params: Optional[Mapping[str, Any]] = None) -> str:
    """
    Build a deterministic cache key from a prefix and optional parameters.

    None values are dropped, the rest keep the caller's order and are appended
    as compact JSON: generate_key("voices", {"limit": 20}) -> 'voices:{"limit":20}'.
    Without remaining params the prefix is returned unchanged.
    """
    filtered: Dict[str, Any] = {k: v for k, v in (params or {}).items() if v is not None}
    if not filtered:
        return prefix
    encoded = json.dumps(filtered, separators=(",", ":"), ensure_ascii=False, default=str)
    return f"{prefix}{KEY_SEPARATOR}{encoded}"


class CacheService:
    """
    Best-effort JSON cache in front of a single backend chosen at startup.

    No method raises: backend failures are logged and degrade to a miss
    (get) or a no-op (set/delete/flush_all), so callers can always fall back
    to computing the value themselves.
    """

    def __init__(self, backend: CacheBackend, default_ttl: int = DEFAULT_TTL):
        self._backend = backend
        self.default_ttl = default_ttl
        # REST backends keep no connection and are always ready
        self._state = "unconnected" if backend.persistent else "ready"

    @property
    def backend_name(self) -> str:
        return self._backend.name

    @property
    def state(self) -> str:
        return self._state

    async def connect(self) -> None:
        # "disconnected" may reconnect, e.g. a second application lifespan in one process
        if self._state == "connected":
            return
        result = await self._backend.connect()
        if isinstance(result, Failure):
            logger.error("Failed to connect to Redis: %s", result.reason)
            return
        if self._backend.persistent:
            self._state = "connected"
            logger.info("Connected to Redis")

    async def disconnect(self) -> None:
        if self._state == "disconnected":
            return
        result = await self._backend.disconnect()
        if isinstance(result, Failure):
            logger.error("Error disconnecting from %s: %s", self.backend_name, result.reason)
        elif self._backend.persistent:
            logger.info("Disconnected from Redis")
        if self._backend.persistent:
            self._state = "disconnected"

    async def get(self, key: str) -> Optional[Any]:
        result = await self._backend.get(key)
        if isinstance(result, Failure):
            logger.error("Error getting key %s: %s", key, result.reason)
            return None
        if not isinstance(result, Hit):
            logger.debug("Cache miss for key: %s", key)
            return None
        try:
            value = json.loads(result.value)
        except ValueError as ex:
            logger.error("Error parsing cached value for key %s: %s", key, ex)
            return None
        logger.debug("Cache hit for key: %s", key)
        return value

    async def set(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        ttl = self.default_ttl if ttl is None else ttl
        try:
            raw = json.dumps(value, default=str)
        except (TypeError, ValueError) as ex:
            logger.error("Error setting key %s: value is not JSON serializable: %s", key, ex)
            return
        result = await self._backend.set(key, raw, ttl)
        if isinstance(result, Failure):
            logger.error("Error setting key %s: %s", key, result.reason)
            return
        logger.info("Cached: %s (TTL: %ss)", key, ttl)

    async def delete(self, key: str) -> None:
        result = await self._backend.delete(key)
        if isinstance(result, Failure):
            logger.error("Error deleting key %s: %s", key, result.reason)
            return
        logger.debug("Deleted: %s", key)

    async def flush_all(self) -> None:
        result = await self._backend.flush_all()
        if isinstance(result, Failure):
            logger.error("Error clearing cache: %s", result.reason)
            return
        logger.warning("Cache cleared")

    generate_key = staticmethod(generate_key)
