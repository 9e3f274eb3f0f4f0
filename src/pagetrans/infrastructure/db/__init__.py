# src/pagetrans/infrastructure/db/__init__.py
"""
数据库公共 API。上层只从本包导入，不直接引用内部模块路径。
"""

from __future__ import annotations

import structlog
from sqlalchemy.ext.asyncio import AsyncEngine

from . import _schema  # noqa: F401  注册 ORM 表到 metadata
from .base import metadata
from .engine import create_async_db_engine
from .session import create_async_sessionmaker

logger = structlog.get_logger(__name__)


async def create_schema(engine: AsyncEngine) -> None:
    """按 ORM 定义建表（已存在的表保持不变）。"""
    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all)
    logger.info("数据库表结构已就绪", tables=sorted(metadata.tables))


async def dispose_engine(engine: AsyncEngine) -> None:
    """释放底层连接池资源。"""
    await engine.dispose()


__all__ = [
    "create_async_db_engine",
    "create_async_sessionmaker",
    "create_schema",
    "dispose_engine",
    "metadata",
]
