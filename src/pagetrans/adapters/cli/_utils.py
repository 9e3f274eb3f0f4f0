# src/pagetrans/adapters/cli/_utils.py
"""
CLI 内部共享的辅助工具。
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator

import structlog

from pagetrans.di.container import AppContainer
from pagetrans.infrastructure.db import dispose_engine

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def container_scope(container: AppContainer) -> AsyncIterator[AppContainer]:
    """在命令结束时关闭异步 Resource（Redis、翻译引擎）并释放连接池。"""
    try:
        yield container
    finally:
        shutdown = container.shutdown_resources()
        if shutdown is not None:
            await shutdown
        await dispose_engine(container.db_engine())
        logger.debug("CLI 资源已释放")
