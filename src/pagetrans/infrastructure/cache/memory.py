# src/pagetrans/infrastructure/cache/memory.py
"""
内存缓存实现，用于测试与单进程开发环境。每个键可以有独立的 TTL。
"""

from __future__ import annotations

import math
import time
from typing import Any, Callable

from cachetools import TLRUCache

from pagetrans.core.interfaces import CacheHandler


def _time_to_use(key: str, entry: tuple[Any, int | None], now: float) -> float:
    _, ttl = entry
    return math.inf if ttl is None else now + ttl


class MemoryCacheHandler(CacheHandler):
    """基于 cachetools.TLRUCache 的内存缓存。"""

    def __init__(
        self,
        key_prefix: str = "pagetrans:",
        maxsize: int = 10_000,
        timer: Callable[[], float] = time.monotonic,
    ):
        self._cache: TLRUCache[str, tuple[Any, int | None]] = TLRUCache(
            maxsize=maxsize, ttu=_time_to_use, timer=timer
        )
        self._prefix = key_prefix

    def _make_key(self, key: str) -> str:
        return f"{self._prefix}{key}"

    async def get(self, key: str) -> Any | None:
        entry = self._cache.get(self._make_key(key))
        return None if entry is None else entry[0]

    async def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        self._cache[self._make_key(key)] = (value, ttl)

    async def add(self, key: str, value: Any, ttl: int | None = None) -> bool:
        full_key = self._make_key(key)
        if full_key in self._cache:
            return False
        self._cache[full_key] = (value, ttl)
        return True

    async def delete(self, key: str) -> None:
        self._cache.pop(self._make_key(key), None)

    def clear(self) -> None:
        self._cache.clear()
