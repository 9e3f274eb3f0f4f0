# src/pagetrans/workers/_translation_worker.py
import asyncio
import os
import signal
from typing import Any, Optional

import structlog

from pagetrans.application.dedup import QueueDuplicationChecker
from pagetrans.application.resolvers import TranslationResolver
from pagetrans.core.interfaces import WorkQueueConsumer
from pagetrans.core.types import JobStatus, WorkItem
from pagetrans.domain.jobs import Job
from pagetrans.infrastructure.uow import UowFactory

logger = structlog.get_logger(__name__)


class TranslationWorker:
    """
    消费队列中的工作项，执行完整的翻译解析并维护 Job 状态。
    所有依赖项通过构造函数注入。
    """

    def __init__(
        self,
        resolver: TranslationResolver,
        dedup: QueueDuplicationChecker,
        uow_factory: UowFactory,
        consumer: WorkQueueConsumer,
        worker_id: Optional[int] = None,
        poll_interval: float = 2.0,
        initial_backoff: float = 0.0,
        max_backoff: float = 0.0,
    ):
        self._resolver = resolver
        self._dedup = dedup
        self._uow_factory = uow_factory
        self._consumer = consumer
        self.worker_id = worker_id if worker_id is not None else os.getpid()
        self._poll_interval = poll_interval
        self._initial_backoff = initial_backoff
        self._max_backoff = max_backoff

    async def handle(self, item: WorkItem) -> Job:
        """
        处理一个工作项。

        失败时把错误记录到 Job 上并重新抛出；无论成败都会清除去重标记。
        """
        key = item.key
        log = logger.bind(
            document_id=item.document_id,
            page=item.page,
            target_language=item.target_language,
            worker_id=self.worker_id,
        )
        try:
            async with self._uow_factory() as uow:
                job = await uow.jobs.find_active(
                    item.document_id, item.page, item.target_language
                )
                if job is None:
                    job = await uow.jobs.save(Job.for_key(key))
                if job.status is JobStatus.PROCESSING:
                    log.warning(
                        "接管仍在处理中的任务",
                        job_id=job.id,
                        previous_worker=job.worker_id,
                    )
                    job.take_over(self.worker_id)
                else:
                    job.mark_processing(self.worker_id)
                await uow.jobs.save(job)
            log.info("开始处理翻译任务", job_id=job.id)

            try:
                resolution = await self._resolver.resolve(
                    item.document_id, item.page, item.original_text, item.target_language
                )
            except Exception as e:
                job.mark_failed(str(e))
                async with self._uow_factory() as uow:
                    await uow.jobs.save(job)
                log.error("翻译任务失败", job_id=job.id, error=str(e))
                raise

            job.mark_completed()
            async with self._uow_factory() as uow:
                await uow.jobs.save(job)
            log.info(
                "翻译任务完成",
                job_id=job.id,
                origin=resolution.origin.value,
                was_cached=resolution.was_cached,
                duration_seconds=job.duration_seconds(),
            )
            return job
        finally:
            await self._dedup.mark_processed(key)

    async def run_once(self) -> bool:
        """
        接收并处理至多一条消息；返回本轮是否处理了消息。
        """
        delivery = await self._consumer.receive(timeout=self._poll_interval)
        if delivery is None:
            return False
        try:
            await self.handle(delivery.item)
        except Exception as e:
            # 错误已记录在 Job 上，重试或死信由传输层决定
            delay = self.backoff_for(delivery.attempt)
            if delay > 0:
                await asyncio.sleep(delay)
            await self._consumer.nack(delivery, e)
        else:
            await self._consumer.ack(delivery)
        return True

    def backoff_for(self, attempt: int) -> float:
        """第 n 次失败后的退避秒数：指数增长，不超过 max_backoff。"""
        if self._initial_backoff <= 0:
            return 0.0
        return min(self._initial_backoff * 2 ** (attempt - 1), self._max_backoff)

    async def run_loop(self, shutdown_event: asyncio.Event) -> None:
        """Worker 的主循环。"""

        def _signal_handler(*args: Any) -> None:
            logger.warning("收到停机信号，正在准备优雅关闭 (TranslationWorker)...")
            shutdown_event.set()

        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(sig, _signal_handler)

        logger.info("翻译 Worker 已启动，正在等待任务...", worker_id=self.worker_id)
        try:
            while not shutdown_event.is_set():
                processed = await self.run_once()
                if processed:
                    continue
                try:
                    await asyncio.wait_for(shutdown_event.wait(), timeout=0.1)
                except asyncio.TimeoutError:
                    pass
        except asyncio.CancelledError:
            logger.info("翻译 Worker 循环被取消。")
        finally:
            for sig in (signal.SIGINT, signal.SIGTERM):
                loop.remove_signal_handler(sig)
            logger.info("翻译 Worker 已安全关闭。", worker_id=self.worker_id)
