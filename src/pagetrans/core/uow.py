# src/pagetrans/core/uow.py
"""
定义了单元工作 (Unit of Work) 及其所辖仓库的抽象接口。
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from pagetrans.domain.jobs import Job

    from .types import TranslationRecord


class ITranslationRepository(Protocol):
    """持久化翻译结果（永久缓存层）。"""

    async def find_one(
        self, document_id: str, page: int, target_language: str
    ) -> TranslationRecord | None: ...

    async def upsert(self, record: TranslationRecord) -> TranslationRecord: ...

    async def count_for(
        self, document_id: str, page: int, target_language: str
    ) -> int: ...


class IJobRepository(Protocol):
    """翻译任务的跟踪记录。"""

    async def find_active(
        self, document_id: str, page: int, target_language: str
    ) -> Job | None: ...

    async def save(self, job: Job) -> Job: ...

    async def get(self, job_id: int) -> Job | None: ...

    async def list_active(self) -> list[Job]: ...

    async def list_recent(self, limit: int = 50) -> list[Job]: ...

    async def cleanup_finished(self, older_than_hours: int = 24) -> int: ...


class IUnitOfWork(Protocol):
    translations: ITranslationRepository
    jobs: IJobRepository

    async def __aenter__(self) -> "IUnitOfWork": ...

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None: ...

    async def commit(self) -> None: ...

    async def rollback(self) -> None: ...
