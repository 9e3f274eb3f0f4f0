# src/pagetrans/application/coordinator.py
"""
应用服务总协调器：高级门面，将调用委托给具体的应用服务。
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pagetrans.core.types import RequestOutcome, StatusOutcome
    from pagetrans.domain.jobs import Job

    from .services import (
        JobMonitorService,
        RequestTranslationService,
        TranslationStatusService,
    )


class Coordinator:
    def __init__(
        self,
        request_service: RequestTranslationService,
        status_service: TranslationStatusService,
        monitor_service: JobMonitorService,
    ):
        self.request_service = request_service
        self.status_service = status_service
        self.monitor_service = monitor_service

    async def request_translation(
        self,
        document_id: str | None,
        page: int | str | None,
        target_language: str | None = None,
    ) -> RequestOutcome:
        """返回已有译文，或为该页面排队一个翻译任务。"""
        return await self.request_service.execute(
            document_id=document_id, page=page, target_language=target_language
        )

    async def check_status(
        self,
        document_id: str | None,
        page: int | str | None,
        target_language: str | None = None,
    ) -> StatusOutcome:
        """只查询译文是否就绪，不创建任务。"""
        return await self.status_service.execute(
            document_id=document_id, page=page, target_language=target_language
        )

    async def list_jobs(self, *, include_finished: bool = False) -> list[Job]:
        return await self.monitor_service.list_jobs(include_finished=include_finished)

    async def cleanup_jobs(self, older_than_hours: int = 24) -> int:
        return await self.monitor_service.cleanup(older_than_hours)
