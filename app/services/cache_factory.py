import logging
from typing import Optional

from .cache import CacheBackend
from .cache_backends import RedisCacheBackend, UpstashRestCacheBackend
from .cache_service import CacheService
from app.config import CacheConfig, load_cache_config

logger = logging.getLogger(__name__)

_cache_service: Optional[CacheService] = None


def build_cache_backend(config: CacheConfig) -> CacheBackend:
    """
    Pick the backend once from configuration:
      - Upstash URL and token both present -> REST backend (no local connection)
      - otherwise                          -> Redis at REDIS_HOST:REDIS_PORT
    """
    if config.use_rest:
        logger.info("Using Upstash Redis REST API")
        return UpstashRestCacheBackend(config.rest_url, config.rest_token)
    logger.info("Using traditional Redis connection (%s)", config.redis_url)
    return RedisCacheBackend(config.redis_url)


def get_cache_service() -> CacheService:
    """Process-wide cache service; also used as a FastAPI dependency."""
    global _cache_service
    if _cache_service is None:
        _cache_service = CacheService(build_cache_backend(load_cache_config()))
    return _cache_service
