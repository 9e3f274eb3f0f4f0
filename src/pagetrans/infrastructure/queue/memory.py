# src/pagetrans/infrastructure/queue/memory.py
"""
进程内工作队列，用于测试与单进程开发环境；重试语义与 Redis Streams 实现一致。
"""

from __future__ import annotations

import asyncio
from collections import deque
from dataclasses import dataclass

import structlog

from pagetrans.core.interfaces import WorkQueue, WorkQueueConsumer
from pagetrans.core.types import WorkItem

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class MemoryDelivery:
    item: WorkItem
    attempt: int = 1


class InMemoryWorkQueue(WorkQueue, WorkQueueConsumer):
    def __init__(self, max_attempts: int = 3, dead_letter_limit: int = 1000):
        self._queue: asyncio.Queue[MemoryDelivery] = asyncio.Queue()
        self._max_attempts = max_attempts
        self.dead_letters: deque[tuple[MemoryDelivery, str]] = deque(
            maxlen=dead_letter_limit
        )
        self.acked_count = 0

    def qsize(self) -> int:
        return self._queue.qsize()

    async def enqueue(self, item: WorkItem) -> None:
        await self._queue.put(MemoryDelivery(item=item))

    async def receive(self, timeout: float) -> MemoryDelivery | None:
        try:
            return await asyncio.wait_for(self._queue.get(), timeout=timeout)
        except asyncio.TimeoutError:
            return None

    async def ack(self, delivery: MemoryDelivery) -> None:
        self.acked_count += 1

    async def nack(self, delivery: MemoryDelivery, error: BaseException) -> None:
        if delivery.attempt < self._max_attempts:
            await self._queue.put(
                MemoryDelivery(item=delivery.item, attempt=delivery.attempt + 1)
            )
            logger.warning(
                "工作项将被重试", attempt=delivery.attempt, error=str(error)
            )
        else:
            self.dead_letters.append((delivery, str(error)))
            logger.error("工作项超过最大尝试次数，已转入死信", error=str(error))
