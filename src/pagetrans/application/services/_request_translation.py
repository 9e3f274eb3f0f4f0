# src/pagetrans/application/services/_request_translation.py
"""处理页面翻译请求提交的应用服务。"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from pagetrans.core.exceptions import ClientRequestError
from pagetrans.core.types import (
    RequestOutcome,
    TranslationPayload,
    TranslationRequestKey,
    WorkItem,
)
from pagetrans.domain.jobs import Job

if TYPE_CHECKING:
    from pagetrans.application.dedup import QueueDuplicationChecker
    from pagetrans.application.resolvers import TranslationResolver
    from pagetrans.application.validation import TranslationRequestValidator
    from pagetrans.core.interfaces import WorkQueue
    from pagetrans.infrastructure.uow import UowFactory

logger = structlog.get_logger(__name__)


class RequestTranslationService:
    """
    同步路径只做查找；未命中时创建 Job 并投递到队列，由 Worker 异步调用 AI。
    """

    def __init__(
        self,
        validator: TranslationRequestValidator,
        resolver: TranslationResolver,
        dedup: QueueDuplicationChecker,
        uow_factory: UowFactory,
        queue: WorkQueue,
        atomic_claim: bool = False,
    ):
        self._validator = validator
        self._resolver = resolver
        self._dedup = dedup
        self._uow_factory = uow_factory
        self._queue = queue
        self._atomic_claim = atomic_claim

    async def execute(
        self,
        *,
        document_id: str | None,
        page: int | str | None,
        target_language: str | None,
    ) -> RequestOutcome:
        try:
            prepared = self._validator.prepare(document_id, page, target_language)
        except ClientRequestError as e:
            logger.info("翻译请求被拒绝", error_code=e.error_code, reason=str(e))
            return RequestOutcome(
                status="error",
                status_code=e.status_code,
                error_code=e.error_code,
                message=str(e),
            )

        key = prepared.key
        resolution = await self._resolver.lookup_only(
            key.document_id, key.page, prepared.original_text, key.target_language
        )
        if resolution is not None:
            return RequestOutcome(
                status="success",
                data=TranslationPayload.from_resolution(
                    prepared.original_text, key.target_language, resolution
                ),
            )

        if await self._already_queued(key):
            logger.info("相同的翻译任务已在队列中", key=key)
            return RequestOutcome(
                status="queued",
                status_code=202,
                message="Translation already in progress",
                already_queued=True,
            )

        job = await self._submit(key, prepared.original_text)
        return RequestOutcome(
            status="queued",
            status_code=202,
            message="Translation queued",
            already_queued=False,
            job_id=job.id,
        )

    async def _already_queued(self, key: TranslationRequestKey) -> bool:
        if self._atomic_claim:
            return not await self._dedup.try_mark_queued(key)
        return await self._dedup.is_queued(key)

    async def _submit(self, key: TranslationRequestKey, original_text: str) -> Job:
        try:
            async with self._uow_factory() as uow:
                job = await uow.jobs.save(Job.for_key(key))
            await self._enqueue(job, key, original_text)
        except Exception:
            # 原子模式下标记已先于 Job 写入，失败时必须释放，否则在 TTL 内拦截所有请求
            if self._atomic_claim:
                await self._dedup.mark_processed(key)
            raise

        if not self._atomic_claim:
            await self._dedup.mark_queued(key)
        logger.info("翻译任务已入队", job_id=job.id, key=key)
        return job

    async def _enqueue(
        self, job: Job, key: TranslationRequestKey, original_text: str
    ) -> None:
        item = WorkItem(
            document_id=key.document_id,
            page=key.page,
            target_language=key.target_language,
            original_text=original_text,
        )
        try:
            await self._queue.enqueue(item)
        except Exception as e:
            # 投递失败时 Job 不会被任何 Worker 认领，立即收尾
            logger.error("工作项投递失败", job_id=job.id, error=str(e))
            job.mark_failed(f"enqueue failed: {e}")
            async with self._uow_factory() as uow:
                await uow.jobs.save(job)
            raise
