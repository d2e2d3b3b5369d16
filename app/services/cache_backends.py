import json
import logging
from typing import Any, Callable, Optional
from urllib.parse import quote

import httpx
from redis import asyncio as aioredis

from .cache import CacheBackend, CacheResult, Empty, Failure, Hit

logger = logging.getLogger(__name__)


class RedisCacheBackend(CacheBackend):
    """Connection-oriented backend talking to a Redis server."""

    name = "redis"
    persistent = True

    def __init__(self, url: str, client: Optional[aioredis.Redis] = None):
        self._url = url
        self._client = client or aioredis.Redis.from_url(url, decode_responses=True)
        self._closed = False

    async def connect(self) -> CacheResult:
        try:
            await self._client.ping()
        except Exception as ex:
            return Failure(f"cannot connect to {self._url}: {ex}")
        # redis-py reopens pooled connections after aclose(), so a reconnect is just another PING
        self._closed = False
        return Empty()

    async def disconnect(self) -> CacheResult:
        if self._closed:
            return Empty()
        try:
            await self._client.aclose()
            return Empty()
        except Exception as ex:
            return Failure(str(ex))
        finally:
            self._closed = True

    async def get(self, key: str) -> CacheResult:
        try:
            data = await self._client.get(key)
        except Exception as ex:
            return Failure(str(ex))
        return Hit(data) if data else Empty()

    async def set(self, key: str, raw: str, ttl_seconds: int) -> CacheResult:
        try:
            await self._client.set(key, raw, ex=ttl_seconds)
            return Empty()
        except Exception as ex:
            return Failure(str(ex))

    async def delete(self, key: str) -> CacheResult:
        try:
            await self._client.delete(key)
            return Empty()
        except Exception as ex:
            return Failure(str(ex))

    async def flush_all(self) -> CacheResult:
        try:
            await self._client.flushall()
            return Empty()
        except Exception as ex:
            return Failure(str(ex))


class UpstashRestCacheBackend(CacheBackend):
    """
    Stateless backend for the Upstash Redis REST API.

    Every command is one HTTP request authenticated with a bearer token:
      GET    {url}/get/{key}           -> {"result": "<stored string>" | null}
      POST   {url}/set/{key}?ex={ttl}  body = stored string -> {"result": "OK"}
      DELETE {url}/del/{key}
      POST   {url}/flushall
    """

    name = "upstash"

    def __init__(self, url: Optional[str], token: Optional[str],
                 client_factory: Callable[[], httpx.AsyncClient] = httpx.AsyncClient):
        self._url = url.rstrip("/") if url else None
        self._token = token
        self._client_factory = client_factory
        self._client: Optional[httpx.AsyncClient] = None

    def _http(self) -> httpx.AsyncClient:
        # A client closed by disconnect() is replaced on next use, so the backend stays ready
        if self._client is None or self._client.is_closed:
            self._client = self._client_factory()
        return self._client

    async def connect(self) -> CacheResult:
        # No persistent connection to open; requests are authenticated one by one.
        self._http()
        logger.info("Configured for Upstash Redis REST API")
        return Empty()

    async def disconnect(self) -> CacheResult:
        if self._client is None:
            return Empty()
        try:
            await self._client.aclose()
            return Empty()
        except Exception as ex:
            return Failure(str(ex))

    async def _request(self, method: str, endpoint: str, content: Optional[str] = None,
                       params: Optional[dict] = None) -> Any:
        """Send one REST command and return the decoded JSON body; raises on any failure."""
        if not self._url or not self._token:
            raise RuntimeError("Upstash Redis not configured")

        response = await self._http().request(
            method,
            f"{self._url}/{endpoint}",
            params=params,
            content=content,
            headers={
                "Authorization": f"Bearer {self._token}",
                "Content-Type": "application/json",
            },
        )
        if not response.is_success:
            raise RuntimeError(f"HTTP error! status: {response.status_code}")
        body = response.json()
        logger.debug("Upstash Redis %s %s: %s", method, endpoint, body)
        return body

    async def get(self, key: str) -> CacheResult:
        try:
            body = await self._request("GET", f"get/{quote(key, safe='')}")
        except Exception as ex:
            return Failure(f"Upstash Redis request failed: {ex}")
        result = body.get("result") if isinstance(body, dict) else None
        if not result or result == "null":
            return Empty()
        if not isinstance(result, str):
            # Upstash answers strings for GET; anything else is re-encoded for the caller
            return Hit(json.dumps(result))
        return Hit(result)

    async def set(self, key: str, raw: str, ttl_seconds: int) -> CacheResult:
        try:
            body = await self._request("POST", f"set/{quote(key, safe='')}", content=raw,
                                       params={"ex": ttl_seconds})
        except Exception as ex:
            return Failure(f"Upstash Redis request failed: {ex}")
        if isinstance(body, dict) and body.get("result") == "OK":
            return Empty()
        return Failure(f"unexpected acknowledgement: {body}")

    async def delete(self, key: str) -> CacheResult:
        try:
            await self._request("DELETE", f"del/{quote(key, safe='')}")
            return Empty()
        except Exception as ex:
            return Failure(f"Upstash Redis request failed: {ex}")

    async def flush_all(self) -> CacheResult:
        try:
            await self._request("POST", "flushall")
            return Empty()
        except Exception as ex:
            return Failure(f"Upstash Redis request failed: {ex}")
