# tests/helpers/tools/fakes.py
"""
提供测试替身 (Test Doubles)：假翻译器、假语言识别器、假文档库，
以及与 SQLAlchemy 实现语义一致的内存 UoW。
"""

from __future__ import annotations

import dataclasses
from datetime import datetime, timedelta, timezone
from pathlib import Path

from pagetrans.core.exceptions import TransientTranslationError
from pagetrans.core.types import (
    ACTIVE_JOB_STATUSES,
    TERMINAL_JOB_STATUSES,
    LanguageGuess,
    TranslationRecord,
)
from pagetrans.domain.jobs import Job


class FakeTranslator:
    """可预测的假翻译器，记录每一次调用。"""

    def __init__(self, fail: bool = False, fail_with: Exception | None = None):
        self.calls: list[tuple[str, str]] = []
        self.fail = fail
        self.fail_with = fail_with

    async def translate(self, text: str, target_language: str) -> str:
        self.calls.append((text, target_language))
        if self.fail:
            raise self.fail_with or TransientTranslationError("AI unreachable")
        return f"[{target_language}] {text}"


class FakeLanguageIdentifier:
    def __init__(self, language: str = "en", confidence: float = 0.99):
        self.language = language
        self.confidence = confidence
        self.samples: list[str] = []

    def detect(self, text: str) -> LanguageGuess:
        self.samples.append(text)
        return LanguageGuess(language=self.language, confidence=self.confidence)


class FakeDocumentStore:
    """同时充当 DocumentLocator 与 TextExtractor：{文档标识: {页码: 文本}}。"""

    def __init__(self, documents: dict[str, dict[int, str]] | None = None):
        self.documents = documents or {}

    def locate(self, document_id: str) -> Path | None:
        return Path("/docs") / document_id if document_id in self.documents else None

    def extract_page_text(self, document_path: Path, page: int) -> str:
        return self.documents.get(document_path.name, {}).get(page, "")


class _State:
    def __init__(self) -> None:
        self.translations: dict[tuple[str, int, str, str], TranslationRecord] = {}
        self.jobs: dict[int, Job] = {}
        self.next_translation_id = 1
        self.next_job_id = 1


class InMemoryTranslationRepository:
    def __init__(self, state: _State):
        self._state = state

    async def find_one(self, document_id, page, target_language):
        matches = [
            r
            for (d, p, _, t), r in self._state.translations.items()
            if (d, p, t) == (document_id, page, target_language)
        ]
        if not matches:
            return None
        return dataclasses.replace(max(matches, key=lambda r: r.updated_at))

    async def upsert(self, record):
        unique = (
            record.document_id,
            record.page,
            record.source_language,
            record.target_language,
        )
        existing = self._state.translations.get(unique)
        if existing is not None:
            existing.updated_at = datetime.now(timezone.utc)
        else:
            existing = dataclasses.replace(record, id=self._state.next_translation_id)
            self._state.next_translation_id += 1
            self._state.translations[unique] = existing
        return dataclasses.replace(existing)

    async def count_for(self, document_id, page, target_language):
        return sum(
            1
            for (d, p, _, t) in self._state.translations
            if (d, p, t) == (document_id, page, target_language)
        )


class InMemoryJobRepository:
    """保存的是副本：未经 save 的修改对其他 UoW 不可见。"""

    def __init__(self, state: _State):
        self._state = state

    async def find_active(self, document_id, page, target_language):
        for job in sorted(self._state.jobs.values(), key=lambda j: j.id):
            if job.status in ACTIVE_JOB_STATUSES and (
                job.document_id,
                job.page,
                job.target_language,
            ) == (document_id, page, target_language):
                return dataclasses.replace(job)
        return None

    async def save(self, job):
        if job.id is None:
            job.id = self._state.next_job_id
            self._state.next_job_id += 1
        self._state.jobs[job.id] = dataclasses.replace(job)
        return job

    async def get(self, job_id):
        job = self._state.jobs.get(job_id)
        return dataclasses.replace(job) if job else None

    async def list_active(self):
        jobs = [j for j in self._state.jobs.values() if j.status in ACTIVE_JOB_STATUSES]
        return [dataclasses.replace(j) for j in sorted(jobs, key=lambda j: j.created_at)]

    async def list_recent(self, limit=50):
        jobs = sorted(self._state.jobs.values(), key=lambda j: j.created_at, reverse=True)
        return [dataclasses.replace(j) for j in jobs[:limit]]

    async def cleanup_finished(self, older_than_hours=24):
        cutoff = datetime.now(timezone.utc) - timedelta(hours=older_than_hours)
        doomed = [
            job_id
            for job_id, j in self._state.jobs.items()
            if j.status in TERMINAL_JOB_STATUSES and j.completed_at and j.completed_at < cutoff
        ]
        for job_id in doomed:
            del self._state.jobs[job_id]
        return len(doomed)


class InMemoryUnitOfWork:
    def __init__(self, state: _State):
        self.translations = InMemoryTranslationRepository(state)
        self.jobs = InMemoryJobRepository(state)
        self.committed = False

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None:
            await self.commit()

    async def commit(self):
        self.committed = True

    async def rollback(self):
        self.committed = False


class InMemoryUowFactory:
    """可调用的 UoW 工厂，所有 UoW 共享同一份内存状态。"""

    def __init__(self) -> None:
        self.state = _State()

    def __call__(self) -> InMemoryUnitOfWork:
        return InMemoryUnitOfWork(self.state)

    @property
    def jobs(self) -> list[Job]:
        return [dataclasses.replace(j) for j in self.state.jobs.values()]

    @property
    def translations(self) -> list[TranslationRecord]:
        return list(self.state.translations.values())
