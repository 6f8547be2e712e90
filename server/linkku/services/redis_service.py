# server/linkku/services/redis_service.py

import json
import logging
from typing import Optional

import redis
from flask import current_app

logger = logging.getLogger(__name__)

KEY_PREFIX = "linkku"


class RedisService:
    _client: Optional[redis.Redis] = None
    _initialized: bool = False

    def __init__(self):
        if not RedisService._initialized:
            self._connect()
        self.client = RedisService._client

    def _connect(self) -> None:
        RedisService._initialized = True

        redis_url = current_app.config.get("REDIS_URL")

        if not redis_url:
            logger.info("Redis not configured, caching disabled")
            return

        try:
            if "upstash.io" in redis_url and redis_url.startswith("redis://"):
                redis_url = redis_url.replace("redis://", "rediss://", 1)

            RedisService._client = redis.from_url(
                redis_url,
                decode_responses=True,
                socket_timeout=5,
                socket_connect_timeout=5,
                retry_on_timeout=True,
                health_check_interval=30
            )

            RedisService._client.ping()
            logger.info("Redis connected")

        except redis.RedisError as e:
            logger.warning(f"Redis connection failed: {e}")
            RedisService._client = None

    @classmethod
    def reset(cls) -> None:
        cls._client = None
        cls._initialized = False

    def _available(self) -> bool:
        if self.client is None:
            return False
        try:
            self.client.ping()
            return True
        except redis.RedisError:
            return False

    def _key(self, *parts) -> str:
        return f"{KEY_PREFIX}:{':'.join(str(p) for p in parts)}"

    def ping(self) -> bool:
        return self._available()

    # Public linktree payloads
    def cache_linktree(self, slug: str, data: dict, ttl: int = None) -> bool:
        if not self._available():
            return False

        try:
            ttl = ttl or current_app.config.get("CACHE_TTL_LINKTREE", 300)
            self.client.setex(self._key("linktree", slug), ttl, json.dumps(data))
            return True
        except redis.RedisError as e:
            logger.debug(f"Cache write failed: {e}")
            return False

    def get_cached_linktree(self, slug: str) -> Optional[dict]:
        if not self._available():
            return None

        try:
            data = self.client.get(self._key("linktree", slug))
            return json.loads(data) if data else None
        except (redis.RedisError, ValueError):
            return None

    def invalidate_linktree_cache(self, slug: str) -> bool:
        if not self._available():
            return False

        try:
            self.client.delete(self._key("linktree", slug))
            return True
        except redis.RedisError:
            return False

    # Token blacklisting
    def blacklist_token(self, jti: str, ttl: int = None) -> bool:
        if not self._available():
            return False

        try:
            ttl = ttl or current_app.config.get("CACHE_TTL_BLACKLIST", 86400 * 2)
            self.client.setex(self._key("blacklist", jti), ttl, "1")
            return True
        except redis.RedisError:
            return False

    def is_token_blacklisted(self, jti: str) -> bool:
        if not self._available():
            return False

        try:
            return self.client.exists(self._key("blacklist", jti)) > 0
        except redis.RedisError:
            return False
