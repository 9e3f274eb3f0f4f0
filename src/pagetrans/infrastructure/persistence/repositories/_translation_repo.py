# src/pagetrans/infrastructure/persistence/repositories/_translation_repo.py
"""页面翻译结果仓库的 SQLAlchemy 实现。"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import func, select

from pagetrans.core.types import TranslationRecord
from pagetrans.core.uow import ITranslationRepository
from pagetrans.infrastructure.db._schema import PageTranslation

from ._base_repo import BaseRepository

_UNIQUE_COLUMNS = ["document_id", "page", "source_language", "target_language"]


def _as_utc(value: datetime) -> datetime:
    # SQLite 读回的时间不带时区
    return value.replace(tzinfo=timezone.utc) if value.tzinfo is None else value


def _to_record(row: PageTranslation) -> TranslationRecord:
    return TranslationRecord(
        id=row.id,
        document_id=row.document_id,
        page=row.page,
        source_language=row.source_language,
        target_language=row.target_language,
        original_text=row.original_text,
        translated_text=row.translated_text,
        created_at=_as_utc(row.created_at),
        updated_at=_as_utc(row.updated_at),
    )


class SqlAlchemyTranslationRepository(BaseRepository, ITranslationRepository):
    """翻译结果仓库实现。"""

    async def find_one(
        self, document_id: str, page: int, target_language: str
    ) -> TranslationRecord | None:
        # 不同源语言可能各有一行，取最近更新的那一行
        stmt = (
            select(PageTranslation)
            .where(
                PageTranslation.document_id == document_id,
                PageTranslation.page == page,
                PageTranslation.target_language == target_language,
            )
            .order_by(PageTranslation.updated_at.desc(), PageTranslation.id.desc())
            .limit(1)
        )
        with self._translate_errors("查询翻译结果"):
            row = (await self._session.execute(stmt)).scalars().first()
        return _to_record(row) if row else None

    async def upsert(self, record: TranslationRecord) -> TranslationRecord:
        """按唯一键写入；已存在时保留原有译文，只刷新 updated_at，并返回存储中的行。"""
        values = {
            "document_id": record.document_id,
            "page": record.page,
            "source_language": record.source_language,
            "target_language": record.target_language,
            "original_text": record.original_text,
            "translated_text": record.translated_text,
            "created_at": record.created_at,
            "updated_at": record.updated_at,
        }
        insert_stmt = self._insert(PageTranslation).values(**values)
        stmt = insert_stmt.on_conflict_do_update(
            index_elements=_UNIQUE_COLUMNS,
            set_={"updated_at": func.now()},
        )
        select_stmt = select(PageTranslation).where(
            PageTranslation.document_id == record.document_id,
            PageTranslation.page == record.page,
            PageTranslation.source_language == record.source_language,
            PageTranslation.target_language == record.target_language,
        )
        with self._translate_errors("写入翻译结果"):
            await self._session.execute(stmt)
            # 旁路 ORM 的写入后需要刷新身份映射中的旧值
            row = (
                await self._session.execute(
                    select_stmt.execution_options(populate_existing=True)
                )
            ).scalar_one()
        return _to_record(row)

    async def count_for(self, document_id: str, page: int, target_language: str) -> int:
        stmt = select(func.count(PageTranslation.id)).where(
            PageTranslation.document_id == document_id,
            PageTranslation.page == page,
            PageTranslation.target_language == target_language,
        )
        with self._translate_errors("统计翻译结果"):
            return int((await self._session.execute(stmt)).scalar_one())
