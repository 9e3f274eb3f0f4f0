# src/pagetrans/domain/jobs.py
"""
翻译任务 (Job) 实体及其状态机。

状态迁移：`queued → processing → {completed, failed}`，终态不可再迁移。
实体本身只是一个普通数据类；迁移方法只修改内存中的值，
持久化总是由调用方显式执行 `uow.jobs.save(job)`。
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

from pagetrans.core.exceptions import InvalidJobTransitionError
from pagetrans.core.types import (
    ACTIVE_JOB_STATUSES,
    TERMINAL_JOB_STATUSES,
    JobStatus,
    TranslationRequestKey,
)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Job:
    document_id: str
    page: int
    target_language: str
    status: JobStatus = JobStatus.QUEUED
    id: int | None = None
    created_at: datetime = field(default_factory=_utcnow)
    started_at: datetime | None = None
    completed_at: datetime | None = None
    error_message: str | None = None
    worker_id: int | None = None

    @classmethod
    def for_key(cls, key: TranslationRequestKey) -> "Job":
        return cls(
            document_id=key.document_id,
            page=key.page,
            target_language=key.target_language,
        )

    @property
    def key(self) -> TranslationRequestKey:
        return TranslationRequestKey(self.document_id, self.page, self.target_language)

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_JOB_STATUSES

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_JOB_STATUSES

    def mark_processing(self, worker_id: int) -> None:
        """queued → processing，并记录开始时间与 Worker 标识。"""
        if self.status is not JobStatus.QUEUED:
            raise InvalidJobTransitionError(
                f"Job {self.id} 无法从 '{self.status.value}' 迁移到 'processing'"
            )
        self.status = JobStatus.PROCESSING
        self.started_at = _utcnow()
        self.worker_id = worker_id

    def take_over(self, worker_id: int) -> None:
        """由另一个 Worker 接管仍处于 processing 的任务（消息被重复投递时）。"""
        if self.status is not JobStatus.PROCESSING:
            raise InvalidJobTransitionError(
                f"Job {self.id} 处于 '{self.status.value}'，无法被接管"
            )
        self.worker_id = worker_id

    def mark_completed(self) -> None:
        self._finish(JobStatus.COMPLETED)

    def mark_failed(self, message: str) -> None:
        self._finish(JobStatus.FAILED)
        self.error_message = message

    def _finish(self, status: JobStatus) -> None:
        if self.is_terminal:
            raise InvalidJobTransitionError(
                f"Job {self.id} 已处于终态 '{self.status.value}'"
            )
        now = _utcnow()
        # 未经过 processing 直接结束时补齐开始时间，保持 started_at 的不变式
        if self.started_at is None:
            self.started_at = now
        self.status = status
        self.completed_at = now

    def duration_seconds(self, now: datetime | None = None) -> int | None:
        """从开始到结束（或当前时刻）经过的秒数；尚未开始时为 None。"""
        if self.started_at is None:
            return None
        end = self.completed_at or now or _utcnow()
        return int((end - self.started_at).total_seconds())
