# src/pagetrans/infrastructure/db/engine.py
"""
异步引擎工厂。

- PostgreSQL：映射连接池参数（QueuePool）
- SQLite：NullPool，忽略不适用的池参数
"""

from __future__ import annotations

from typing import Any

from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import NullPool

from pagetrans.config import DatabaseSettings


def _is_sqlite(url: str) -> bool:
    return url.startswith("sqlite")


def create_async_db_engine(settings: DatabaseSettings) -> AsyncEngine:
    url = settings.url
    kwargs: dict[str, Any] = {
        "echo": settings.echo,
        "pool_pre_ping": settings.pool_pre_ping,
    }
    if _is_sqlite(url):
        # 多进程 Worker 下避免共享 SQLite 句柄
        kwargs["poolclass"] = NullPool
    else:
        if settings.pool_size is not None:
            kwargs["pool_size"] = settings.pool_size
        if settings.max_overflow is not None:
            kwargs["max_overflow"] = settings.max_overflow
        kwargs["pool_timeout"] = settings.pool_timeout
    return create_async_engine(url, **kwargs)
