# src/pagetrans/infrastructure/db/_schema.py
"""
PageTrans 的 ORM 表定义：页面翻译结果与翻译任务。
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from .base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PageTranslation(Base):
    __tablename__ = "page_translations"

    document_id: Mapped[str] = mapped_column(String(255), nullable=False)
    page: Mapped[int] = mapped_column(Integer, nullable=False)
    source_language: Mapped[str] = mapped_column(String(16), nullable=False)
    target_language: Mapped[str] = mapped_column(String(16), nullable=False)
    original_text: Mapped[str] = mapped_column(Text, nullable=False)
    translated_text: Mapped[str] = mapped_column(Text, nullable=False)
    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True, init=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        default_factory=_utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        default_factory=_utcnow,
    )

    __table_args__ = (
        UniqueConstraint(
            "document_id",
            "page",
            "source_language",
            "target_language",
            name="uq_page_translation",
        ),
        Index("ix_page_translation_lookup", "document_id", "page", "target_language"),
    )


class TranslationJob(Base):
    __tablename__ = "translation_jobs"

    document_id: Mapped[str] = mapped_column(String(255), nullable=False)
    page: Mapped[int] = mapped_column(Integer, nullable=False)
    target_language: Mapped[str] = mapped_column(String(16), nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )
    started_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), default=None
    )
    completed_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), default=None
    )
    error_message: Mapped[Optional[str]] = mapped_column(Text, default=None)
    worker_id: Mapped[Optional[int]] = mapped_column(Integer, default=None)
    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True, init=False
    )

    __table_args__ = (
        Index("ix_translation_jobs_status", "status"),
        Index("ix_translation_jobs_lookup", "document_id", "page", "target_language"),
        Index("ix_translation_jobs_created_at", "created_at"),
    )
