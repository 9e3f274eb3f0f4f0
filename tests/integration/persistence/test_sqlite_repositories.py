# tests/integration/persistence/test_sqlite_repositories.py
"""使用真实 SQLite 文件库验证仓库与工作单元。"""

from datetime import datetime, timedelta, timezone

import pytest

from pagetrans.core.types import JobStatus, TranslationRecord
from pagetrans.domain.jobs import Job

pytestmark = [pytest.mark.db, pytest.mark.integration]


def _record(translated: str, source: str = "en") -> TranslationRecord:
    return TranslationRecord(
        document_id="report.pdf",
        page=3,
        source_language=source,
        target_language="es",
        original_text="Revenue grew.",
        translated_text=translated,
    )


@pytest.mark.asyncio
async def test_upsert_is_idempotent_per_unique_key(uow_factory) -> None:
    async with uow_factory() as uow:
        first = await uow.translations.upsert(_record("Los ingresos crecieron."))
    async with uow_factory() as uow:
        second = await uow.translations.upsert(_record("Los ingresos aumentaron."))
        count = await uow.translations.count_for("report.pdf", 3, "es")

    assert count == 1
    assert second.id == first.id
    assert second.translated_text == "Los ingresos crecieron."

    async with uow_factory() as uow:
        stored = await uow.translations.find_one("report.pdf", 3, "es")
    assert stored.translated_text == "Los ingresos crecieron."
    assert stored.created_at.tzinfo is not None
    assert stored.updated_at.tzinfo is not None


@pytest.mark.asyncio
async def test_find_one_returns_stored_translation(uow_factory) -> None:
    async with uow_factory() as uow:
        assert await uow.translations.find_one("report.pdf", 3, "es") is None
        await uow.translations.upsert(_record("Los ingresos crecieron."))

    async with uow_factory() as uow:
        found = await uow.translations.find_one("report.pdf", 3, "es")
    assert found is not None
    assert found.source_language == "en"
    assert found.translated_text == "Los ingresos crecieron."


@pytest.mark.asyncio
async def test_rollback_on_error(uow_factory) -> None:
    with pytest.raises(RuntimeError):
        async with uow_factory() as uow:
            await uow.translations.upsert(_record("x"))
            raise RuntimeError("boom")

    async with uow_factory() as uow:
        assert await uow.translations.count_for("report.pdf", 3, "es") == 0


@pytest.mark.asyncio
async def test_job_lifecycle_roundtrip(uow_factory) -> None:
    async with uow_factory() as uow:
        job = await uow.jobs.save(Job("report.pdf", 3, "es"))
    assert job.id is not None

    async with uow_factory() as uow:
        active = await uow.jobs.find_active("report.pdf", 3, "es")
        assert active is not None and active.id == job.id
        active.mark_processing(worker_id=99)
        await uow.jobs.save(active)

    async with uow_factory() as uow:
        stored = await uow.jobs.get(job.id)
        assert stored.status is JobStatus.PROCESSING
        assert stored.worker_id == 99
        assert stored.started_at.tzinfo is not None
        stored.mark_failed("AI unreachable")
        await uow.jobs.save(stored)

    async with uow_factory() as uow:
        assert await uow.jobs.find_active("report.pdf", 3, "es") is None
        assert await uow.jobs.list_active() == []
        recent = await uow.jobs.list_recent()
    assert [j.error_message for j in recent] == ["AI unreachable"]


@pytest.mark.asyncio
async def test_cleanup_removes_only_old_finished_jobs(uow_factory, monitor) -> None:
    old = Job("a.pdf", 1, "es")
    old.mark_completed()
    old.completed_at = datetime.now(timezone.utc) - timedelta(hours=48)
    recent = Job("b.pdf", 1, "es")
    recent.mark_completed()
    active = Job("c.pdf", 1, "es")

    async with uow_factory() as uow:
        for job in (old, recent, active):
            await uow.jobs.save(job)

    assert await monitor.cleanup(older_than_hours=24) == 1

    remaining = await monitor.list_jobs(include_finished=True)
    assert sorted(j.document_id for j in remaining) == ["b.pdf", "c.pdf"]
    assert [j.document_id for j in await monitor.list_jobs()] == ["c.pdf"]
