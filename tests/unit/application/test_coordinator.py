# tests/unit/application/test_coordinator.py
import pytest

from pagetrans.application.coordinator import Coordinator
from pagetrans.application.services import JobMonitorService
from pagetrans.core.types import JobStatus

pytestmark = pytest.mark.unit


@pytest.fixture
def coordinator(pipeline, memory_uow_factory) -> Coordinator:
    return Coordinator(
        request_service=pipeline.request_service,
        status_service=pipeline.status_service,
        monitor_service=JobMonitorService(memory_uow_factory),
    )


@pytest.mark.asyncio
async def test_facade_round_trip(coordinator, pipeline) -> None:
    queued = await coordinator.request_translation("report.pdf", 3)
    assert queued.status == "queued"

    jobs = await coordinator.list_jobs()
    assert [(j.document_id, j.target_language, j.status) for j in jobs] == [
        ("report.pdf", "es", JobStatus.QUEUED)
    ]

    await pipeline.worker.run_once()

    status = await coordinator.check_status("report.pdf", 3, "es")
    assert status.ready is True
    assert await coordinator.list_jobs() == []
    assert await coordinator.cleanup_jobs(older_than_hours=1) == 0


@pytest.mark.asyncio
async def test_facade_reports_client_errors(coordinator) -> None:
    outcome = await coordinator.request_translation("missing.pdf", 1, "fr")
    assert outcome.status == "error"
    assert outcome.status_code == 404
    assert outcome.to_payload() == {"status": "error", "message": "Document not found"}
