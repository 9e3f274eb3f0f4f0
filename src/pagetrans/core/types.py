# src/pagetrans/core/types.py
"""
本模块定义了 PageTrans 系统的核心数据类型。
这些类型是系统各层之间数据交换的契约。
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Origin(str, Enum):
    """表示解析请求由哪一层满足。"""

    ORIGINAL = "original"
    CACHE = "cache"
    STORE = "store"
    GENERATED = "generated"


class JobStatus(str, Enum):
    """表示翻译任务在其生命周期中的不同状态。"""

    QUEUED = "queued"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


ACTIVE_JOB_STATUSES = (JobStatus.QUEUED, JobStatus.PROCESSING)
TERMINAL_JOB_STATUSES = (JobStatus.COMPLETED, JobStatus.FAILED)


@dataclass(frozen=True)
class TranslationRequestKey:
    """一个翻译工作单元的标识：(文档, 页码, 目标语言)。三元组相等即为“同一份工作”。"""

    document_id: str
    page: int
    target_language: str


class LanguageGuess(BaseModel):
    """语言识别的最佳猜测结果。"""

    language: str
    confidence: float = 0.0


class Resolution(BaseModel):
    """翻译解析器返回的结果。"""

    text: str
    source_language: str
    origin: Origin
    was_cached: bool = False


@dataclass
class TranslationRecord:
    """持久化的页面翻译结果，在 (document_id, page, source_language, target_language) 上唯一。"""

    document_id: str
    page: int
    source_language: str
    target_language: str
    original_text: str
    translated_text: str
    id: int | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class WorkItem(BaseModel):
    """投递到队列的工作项，携带翻译所需的原文。"""

    model_config = ConfigDict(frozen=True)

    document_id: str
    page: int = Field(gt=0)
    target_language: str
    original_text: str

    @property
    def key(self) -> TranslationRequestKey:
        return TranslationRequestKey(self.document_id, self.page, self.target_language)


class TranslationPayload(BaseModel):
    """成功响应中携带的翻译数据。"""

    original_text: str
    translated_text: str
    source_language: str
    target_language: str
    cached: bool
    origin: Origin

    @classmethod
    def from_resolution(
        cls, original_text: str, target_language: str, resolution: Resolution
    ) -> "TranslationPayload":
        return cls(
            original_text=original_text,
            translated_text=resolution.text,
            source_language=resolution.source_language,
            target_language=target_language,
            cached=resolution.was_cached,
            origin=resolution.origin,
        )


class RequestOutcome(BaseModel):
    """`request_translation` 的结果。"""

    status: Literal["success", "queued", "error"]
    status_code: int = 200
    message: str | None = None
    error_code: str | None = None
    already_queued: bool = False
    data: TranslationPayload | None = None
    job_id: int | None = None

    @model_validator(mode="after")
    def check_consistency(self) -> "RequestOutcome":
        if self.status == "success" and self.data is None:
            raise ValueError("success 状态的结果必须包含 data。")
        if self.status == "error" and self.error_code is None:
            raise ValueError("error 状态的结果必须包含 error_code。")
        return self

    def to_payload(self) -> dict[str, Any]:
        """转换为供 HTTP 层直接序列化的字典。"""
        payload: dict[str, Any] = {"status": self.status}
        if self.message:
            payload["message"] = self.message
        if self.status == "queued":
            payload["already_queued"] = self.already_queued
        if self.data is not None:
            payload["data"] = self.data.model_dump(mode="json")
        return payload


class StatusOutcome(BaseModel):
    """`check_status` 的结果。"""

    status: Literal["success", "processing", "error"]
    ready: bool = False
    status_code: int = 200
    message: str | None = None
    error_code: str | None = None
    data: TranslationPayload | None = None

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"status": self.status, "ready": self.ready}
        if self.message:
            payload["message"] = self.message
        if self.data is not None:
            payload["data"] = self.data.model_dump(mode="json")
        return payload
