# src/pagetrans/application/dedup.py
"""
队列去重标记：防止同一 (文档, 页码, 目标语言) 在短时间内被重复投递。

标记是协作式的：`is_queued` 与 `mark_queued` 之间存在竞争窗口，
需要原子语义时使用 `try_mark_queued`。
"""

from __future__ import annotations

import structlog

from pagetrans.core.interfaces import CacheHandler
from pagetrans.core.types import TranslationRequestKey
from pagetrans.domain.keys import build_dedup_key

logger = structlog.get_logger(__name__)


class QueueDuplicationChecker:
    def __init__(self, cache: CacheHandler, ttl_seconds: int = 300):
        self._cache = cache
        self._ttl = ttl_seconds

    async def is_queued(self, key: TranslationRequestKey) -> bool:
        return await self._cache.get(build_dedup_key(key)) is not None

    async def mark_queued(self, key: TranslationRequestKey) -> None:
        """写入（或刷新 TTL）去重标记；重复调用是幂等的。"""
        await self._cache.set(build_dedup_key(key), True, ttl=self._ttl)
        logger.debug("已写入去重标记", key=key, ttl=self._ttl)

    async def try_mark_queued(self, key: TranslationRequestKey) -> bool:
        """原子地写入标记；标记已存在时返回 False。"""
        claimed = await self._cache.add(build_dedup_key(key), True, ttl=self._ttl)
        logger.debug("尝试原子写入去重标记", key=key, claimed=claimed)
        return claimed

    async def mark_processed(self, key: TranslationRequestKey) -> None:
        """删除去重标记；标记不存在时为空操作。"""
        await self._cache.delete(build_dedup_key(key))
        logger.debug("已清除去重标记", key=key)
