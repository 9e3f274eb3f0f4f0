# src/pagetrans/infrastructure/redis/queue.py
"""
使用 Redis Streams 实现任务队列的生产者与消费者两侧。

- 生产者：`XADD`，消息字段为 `{"payload": <WorkItem JSON>, "attempt": "<n>"}`。
- 消费者：消费组 `XREADGROUP` 读取，成功后 `XACK`；读取新消息前先用
  `XAUTOCLAIM` 接管持有者已崩溃、长时间未确认的消息（至少一次投递）。
- 失败：确认原消息后按 `attempt + 1` 重新投递；超过最大尝试次数则写入 `{stream}:dlq`。
"""

from __future__ import annotations

import json
from dataclasses import dataclass

import redis.asyncio as aioredis
import structlog
from pydantic import ValidationError as PydanticValidationError

from pagetrans.core.interfaces import WorkQueue, WorkQueueConsumer
from pagetrans.core.types import WorkItem

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class RedisDelivery:
    message_id: str
    item: WorkItem
    attempt: int


class RedisStreamWorkQueue(WorkQueue, WorkQueueConsumer):
    """
    基于 Redis Streams 的工作队列。

    Args:
        client: 已配置 `decode_responses=True` 的 Redis 异步客户端。
        stream_name: Stream 键名。
        consumer_group: 消费组名称；首次消费时自动创建。
        consumer_name: 本消费者在组内的名称（通常为 Worker 标识）。
        max_attempts: 单条消息的最大尝试次数。
        claim_idle_seconds: 待确认消息空闲超过该时长后可被其他消费者接管；0 表示不接管。
    """

    def __init__(
        self,
        client: aioredis.Redis,
        stream_name: str,
        consumer_group: str,
        consumer_name: str,
        max_attempts: int = 3,
        claim_idle_seconds: float = 300.0,
    ):
        self._client = client
        self._stream = stream_name
        self._group = consumer_group
        self._consumer = consumer_name
        self._max_attempts = max_attempts
        self._claim_idle_ms = int(claim_idle_seconds * 1000)
        self._group_ready = False

    @property
    def dead_letter_stream(self) -> str:
        return f"{self._stream}:dlq"

    async def enqueue(self, item: WorkItem, attempt: int = 1) -> None:
        fields = {"payload": item.model_dump_json(), "attempt": str(attempt)}
        try:
            await self._client.xadd(self._stream, fields)
        except aioredis.RedisError:
            logger.error("工作项投递失败", stream=self._stream, exc_info=True)
            raise
        logger.debug(
            "工作项已投递",
            stream=self._stream,
            document_id=item.document_id,
            page=item.page,
            attempt=attempt,
        )

    async def ensure_group(self) -> None:
        if self._group_ready:
            return
        try:
            await self._client.xgroup_create(
                self._stream, self._group, id="0", mkstream=True
            )
        except aioredis.ResponseError as e:
            if "BUSYGROUP" not in str(e):
                raise
        self._group_ready = True

    async def receive(self, timeout: float) -> RedisDelivery | None:
        await self.ensure_group()
        reclaimed = await self._reclaim_idle()
        if reclaimed is not None:
            return reclaimed

        response = await self._client.xreadgroup(
            self._group,
            self._consumer,
            {self._stream: ">"},
            count=1,
            block=max(int(timeout * 1000), 1),
        )
        if not response:
            return None
        _, messages = response[0]
        if not messages:
            return None
        message_id, fields = messages[0]
        return await self._to_delivery(message_id, fields)

    async def _reclaim_idle(self) -> RedisDelivery | None:
        """接管组内其他消费者长时间未确认的消息（持有者崩溃时）。"""
        if self._claim_idle_ms <= 0:
            return None
        _, messages, *_ = await self._client.xautoclaim(
            self._stream,
            self._group,
            self._consumer,
            min_idle_time=self._claim_idle_ms,
            start_id="0-0",
            count=1,
        )
        for message_id, fields in messages:
            # 已被 XDEL 的条目没有字段
            if not fields:
                await self._client.xack(self._stream, self._group, message_id)
                continue
            logger.warning(
                "接管了超时未确认的消息",
                message_id=message_id,
                consumer=self._consumer,
                min_idle_ms=self._claim_idle_ms,
            )
            return await self._to_delivery(message_id, fields)
        return None

    async def _to_delivery(
        self, message_id: str, fields: dict[str, str]
    ) -> RedisDelivery | None:
        try:
            item = WorkItem.model_validate_json(fields["payload"])
            attempt = int(fields.get("attempt", 1))
        except (KeyError, ValueError, PydanticValidationError) as e:
            # 无法解析的消息直接进入死信，不再重试
            logger.error("无法解析的队列消息", message_id=message_id, error=str(e))
            await self._client.xadd(
                self.dead_letter_stream,
                {"raw": json.dumps(fields, ensure_ascii=False), "error": str(e)},
            )
            await self._client.xack(self._stream, self._group, message_id)
            return None
        return RedisDelivery(message_id=message_id, item=item, attempt=attempt)

    async def ack(self, delivery: RedisDelivery) -> None:
        await self._client.xack(self._stream, self._group, delivery.message_id)

    async def nack(self, delivery: RedisDelivery, error: BaseException) -> None:
        if delivery.attempt < self._max_attempts:
            await self.enqueue(delivery.item, attempt=delivery.attempt + 1)
            logger.warning(
                "工作项将被重试",
                message_id=delivery.message_id,
                attempt=delivery.attempt,
                max_attempts=self._max_attempts,
                error=str(error),
            )
        else:
            await self._client.xadd(
                self.dead_letter_stream,
                {
                    "payload": delivery.item.model_dump_json(),
                    "attempt": str(delivery.attempt),
                    "error": str(error),
                },
            )
            logger.error(
                "工作项超过最大尝试次数，已转入死信队列",
                message_id=delivery.message_id,
                dlq=self.dead_letter_stream,
                error=str(error),
            )
        await self._client.xack(self._stream, self._group, delivery.message_id)
