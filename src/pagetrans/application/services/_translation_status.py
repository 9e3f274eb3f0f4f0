# src/pagetrans/application/services/_translation_status.py
"""只读的翻译状态查询服务，从不创建任务。"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from pagetrans.core.exceptions import ClientRequestError
from pagetrans.core.types import StatusOutcome, TranslationPayload

if TYPE_CHECKING:
    from pagetrans.application.resolvers import TranslationResolver
    from pagetrans.application.validation import TranslationRequestValidator

logger = structlog.get_logger(__name__)


class TranslationStatusService:
    def __init__(
        self, validator: TranslationRequestValidator, resolver: TranslationResolver
    ):
        self._validator = validator
        self._resolver = resolver

    async def execute(
        self,
        *,
        document_id: str | None,
        page: int | str | None,
        target_language: str | None,
    ) -> StatusOutcome:
        try:
            prepared = self._validator.prepare(document_id, page, target_language)
        except ClientRequestError as e:
            return StatusOutcome(
                status="error",
                status_code=e.status_code,
                error_code=e.error_code,
                message=str(e),
            )

        key = prepared.key
        resolution = await self._resolver.lookup_only(
            key.document_id, key.page, prepared.original_text, key.target_language
        )
        if resolution is None:
            return StatusOutcome(
                status="processing", ready=False, message="Translation in progress"
            )
        return StatusOutcome(
            status="success",
            ready=True,
            data=TranslationPayload.from_resolution(
                prepared.original_text, key.target_language, resolution
            ),
        )
