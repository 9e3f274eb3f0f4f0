# src/pagetrans/infrastructure/redis/cache.py
"""
使用 Redis 实现 `CacheHandler` 接口。
"""

from __future__ import annotations

import json
from typing import Any

import redis.asyncio as aioredis
import structlog

from pagetrans.core.interfaces import CacheHandler


class RedisCacheHandler(CacheHandler):
    """基于 Redis 的共享缓存实现。值以 JSON 存储，所有键带统一前缀。"""

    def __init__(self, client: aioredis.Redis, key_prefix: str = "pagetrans:"):
        self._client = client
        self._prefix = key_prefix
        self._logger = structlog.get_logger(__name__)

    async def get(self, key: str) -> Any | None:
        """读取并反序列化；连接错误与脏数据一律按未命中处理。"""
        raw_value = None
        try:
            raw_value = await self._client.get(self._prefix + key)
            if raw_value is None:
                return None
            return json.loads(raw_value)
        except json.JSONDecodeError as e:
            self._logger.warning(
                "缓存值反序列化失败", key=key, raw_value=raw_value, error=str(e)
            )
            return None
        except aioredis.RedisError as e:
            self._logger.error("Redis 操作失败", operation="get", key=key, error=str(e))
            return None

    async def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        serialized_value = json.dumps(value, ensure_ascii=False)
        try:
            await self._client.set(self._prefix + key, serialized_value, ex=ttl)
        except aioredis.RedisError as e:
            self._logger.error(
                "Redis 写入操作失败", operation="set", key=key, ttl=ttl, error=str(e)
            )
            raise

    async def add(self, key: str, value: Any, ttl: int | None = None) -> bool:
        """SET NX EX：仅当键不存在时写入。"""
        serialized_value = json.dumps(value, ensure_ascii=False)
        try:
            created = await self._client.set(
                self._prefix + key, serialized_value, ex=ttl, nx=True
            )
        except aioredis.RedisError as e:
            self._logger.error(
                "Redis 写入操作失败", operation="add", key=key, ttl=ttl, error=str(e)
            )
            raise
        return bool(created)

    async def delete(self, key: str) -> None:
        await self._client.delete(self._prefix + key)
