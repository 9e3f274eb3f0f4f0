# src/pagetrans/infrastructure/redis/_client.py
"""
集中管理 Redis 客户端的创建和生命周期。

客户端以 DI 容器的 Resource 形式提供：`init_redis_client` 是一个异步生成器，
在容器 `shutdown_resources()` 时关闭连接。核心代码中不保留进程级单例。
"""

from __future__ import annotations

from typing import AsyncIterator

import redis.asyncio as aioredis
import structlog

from pagetrans.core.exceptions import ConfigurationError

logger = structlog.get_logger(__name__)


async def create_redis_client(url: str | None) -> aioredis.Redis:
    """创建 Redis 异步客户端并验证连通性。"""
    if not url:
        raise ConfigurationError("Redis URL 未配置（请设置 PAGETRANS_REDIS__URL）")
    client = aioredis.from_url(url, decode_responses=True)
    try:
        await client.ping()
    except aioredis.RedisError as e:
        await client.aclose()
        raise ConfigurationError(f"无法连接到 Redis 服务器 {url}: {e}") from e
    logger.debug("Redis 客户端已连接", url=url.split("@")[-1])
    return client


async def init_redis_client(url: str | None) -> AsyncIterator[aioredis.Redis]:
    client = await create_redis_client(url)
    try:
        yield client
    finally:
        await client.aclose()
        logger.debug("Redis 客户端已关闭")
