# src/pagetrans/infrastructure/persistence/repositories/_job_repo.py
"""翻译任务仓库的 SQLAlchemy 实现。"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from sqlalchemy import delete, select

from pagetrans.core.types import ACTIVE_JOB_STATUSES, TERMINAL_JOB_STATUSES, JobStatus
from pagetrans.core.uow import IJobRepository
from pagetrans.domain.jobs import Job
from pagetrans.infrastructure.db._schema import TranslationJob

from ._base_repo import BaseRepository

_ACTIVE = [s.value for s in ACTIVE_JOB_STATUSES]
_TERMINAL = [s.value for s in TERMINAL_JOB_STATUSES]


def _as_utc(value: datetime | None) -> datetime | None:
    # SQLite 读回的时间不带时区
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _to_domain(row: TranslationJob) -> Job:
    return Job(
        id=row.id,
        document_id=row.document_id,
        page=row.page,
        target_language=row.target_language,
        status=JobStatus(row.status),
        created_at=_as_utc(row.created_at),
        started_at=_as_utc(row.started_at),
        completed_at=_as_utc(row.completed_at),
        error_message=row.error_message,
        worker_id=row.worker_id,
    )


def _apply(row: TranslationJob, job: Job) -> None:
    row.status = job.status.value
    row.started_at = job.started_at
    row.completed_at = job.completed_at
    row.error_message = job.error_message
    row.worker_id = job.worker_id


class SqlAlchemyJobRepository(BaseRepository, IJobRepository):
    """任务仓库实现。领域对象与 ORM 行之间显式映射。"""

    async def find_active(
        self, document_id: str, page: int, target_language: str
    ) -> Job | None:
        stmt = (
            select(TranslationJob)
            .where(
                TranslationJob.document_id == document_id,
                TranslationJob.page == page,
                TranslationJob.target_language == target_language,
                TranslationJob.status.in_(_ACTIVE),
            )
            .order_by(TranslationJob.created_at.asc(), TranslationJob.id.asc())
            .limit(1)
        )
        with self._translate_errors("查询活跃任务"):
            row = (await self._session.execute(stmt)).scalars().first()
        return _to_domain(row) if row else None

    async def save(self, job: Job) -> Job:
        """插入新任务或更新已有任务的状态字段；返回带 id 的任务。"""
        with self._translate_errors("保存任务"):
            if job.id is None:
                row = TranslationJob(
                    document_id=job.document_id,
                    page=job.page,
                    target_language=job.target_language,
                    status=job.status.value,
                    created_at=job.created_at,
                )
                _apply(row, job)
                self._session.add(row)
                await self._session.flush()
                job.id = row.id
                return job

            row = await self._session.get(TranslationJob, job.id)
            if row is None:
                raise LookupError(f"任务 {job.id} 不存在")
            _apply(row, job)
            await self._session.flush()
        return job

    async def get(self, job_id: int) -> Job | None:
        with self._translate_errors("读取任务"):
            row = await self._session.get(TranslationJob, job_id)
        return _to_domain(row) if row else None

    async def list_active(self) -> list[Job]:
        stmt = (
            select(TranslationJob)
            .where(TranslationJob.status.in_(_ACTIVE))
            .order_by(TranslationJob.created_at.asc(), TranslationJob.id.asc())
        )
        with self._translate_errors("列出活跃任务"):
            rows = (await self._session.execute(stmt)).scalars().all()
        return [_to_domain(r) for r in rows]

    async def list_recent(self, limit: int = 50) -> list[Job]:
        stmt = (
            select(TranslationJob)
            .order_by(TranslationJob.created_at.desc(), TranslationJob.id.desc())
            .limit(limit)
        )
        with self._translate_errors("列出最近任务"):
            rows = (await self._session.execute(stmt)).scalars().all()
        return [_to_domain(r) for r in rows]

    async def cleanup_finished(self, older_than_hours: int = 24) -> int:
        """删除 completed_at 早于截止时间的终态任务，返回删除行数。"""
        cutoff = datetime.now(timezone.utc) - timedelta(hours=older_than_hours)
        stmt = delete(TranslationJob).where(
            TranslationJob.status.in_(_TERMINAL),
            TranslationJob.completed_at < cutoff,
        )
        with self._translate_errors("清理历史任务"):
            result = await self._session.execute(stmt)
        return int(result.rowcount or 0)
