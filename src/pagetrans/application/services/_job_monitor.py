# src/pagetrans/application/services/_job_monitor.py
"""任务监控与维护（供 CLI 使用）。"""

from __future__ import annotations

from collections import Counter
from typing import TYPE_CHECKING

import structlog

from pagetrans.core.types import JobStatus
from pagetrans.domain.jobs import Job

if TYPE_CHECKING:
    from pagetrans.infrastructure.uow import UowFactory

logger = structlog.get_logger(__name__)


class JobMonitorService:
    def __init__(self, uow_factory: UowFactory):
        self._uow_factory = uow_factory

    async def list_jobs(self, *, include_finished: bool = False, limit: int = 50) -> list[Job]:
        """默认只列出活跃任务（最早的在前）；include_finished 时列出最近 limit 条。"""
        async with self._uow_factory() as uow:
            if include_finished:
                return await uow.jobs.list_recent(limit)
            return await uow.jobs.list_active()

    @staticmethod
    def summarize(jobs: list[Job]) -> dict[str, int]:
        counts = Counter(job.status for job in jobs)
        summary = {status.value: counts.get(status, 0) for status in JobStatus}
        summary["total"] = len(jobs)
        return summary

    async def cleanup(self, older_than_hours: int = 24) -> int:
        async with self._uow_factory() as uow:
            deleted = await uow.jobs.cleanup_finished(older_than_hours)
        logger.info("历史任务清理完成", deleted=deleted, older_than_hours=older_than_hours)
        return deleted
