# src/pagetrans/application/resolvers.py
"""
翻译解析：临时缓存 → 持久存储 → AI 翻译 的分层查找。
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog

from pagetrans.core.types import (
    Origin,
    Resolution,
    TranslationRecord,
    TranslationRequestKey,
)
from pagetrans.domain.keys import build_translation_cache_key

if TYPE_CHECKING:
    from pagetrans.core.interfaces import AiTranslator, CacheHandler, LanguageIdentifier
    from pagetrans.infrastructure.uow import UowFactory

logger = structlog.get_logger(__name__)


def _cache_entry(record: TranslationRecord) -> dict[str, Any]:
    return {
        "translated_text": record.translated_text,
        "source_language": record.source_language,
    }


class TranslationResolver:
    """
    负责执行翻译解析的核心业务逻辑。

    - `resolve`：完整级联，未命中时调用 AI 并写回存储与缓存；
    - `lookup_only`：只查找，不调用 AI，完全未命中时返回 None。
    """

    def __init__(
        self,
        uow_factory: "UowFactory",
        cache: "CacheHandler",
        translator: "AiTranslator",
        language_identifier: "LanguageIdentifier",
        cache_ttl: int = 604800,
    ):
        self._uow_factory = uow_factory
        self._cache = cache
        self._translator = translator
        self._identifier = language_identifier
        self._cache_ttl = cache_ttl

    async def resolve(
        self, document_id: str, page: int, original_text: str, target_language: str
    ) -> Resolution:
        key = TranslationRequestKey(document_id, page, target_language)
        source_language, found = await self._lookup(key, original_text)
        if found is not None:
            return found

        logger.info(
            "缓存与存储均未命中，调用 AI 翻译",
            document_id=document_id,
            page=page,
            source_language=source_language,
            target_language=target_language,
        )
        translated = await self._translator.translate(original_text, target_language)

        record = TranslationRecord(
            document_id=document_id,
            page=page,
            source_language=source_language,
            target_language=target_language,
            original_text=original_text,
            translated_text=translated,
        )
        async with self._uow_factory() as uow:
            record = await uow.translations.upsert(record)
        await self._cache.set(
            build_translation_cache_key(key), _cache_entry(record), ttl=self._cache_ttl
        )
        # 并发的重复任务会落到同一行，以存储中先写入的译文为准
        return Resolution(
            text=record.translated_text,
            source_language=record.source_language,
            origin=Origin.GENERATED,
        )

    async def lookup_only(
        self, document_id: str, page: int, original_text: str, target_language: str
    ) -> Resolution | None:
        key = TranslationRequestKey(document_id, page, target_language)
        _, found = await self._lookup(key, original_text)
        return found

    async def _lookup(
        self, key: TranslationRequestKey, original_text: str
    ) -> tuple[str, Resolution | None]:
        source_language = self._identifier.detect(original_text).language

        if source_language == key.target_language:
            logger.debug("源语言与目标语言相同，直接返回原文", key=key)
            return source_language, Resolution(
                text=original_text,
                source_language=source_language,
                origin=Origin.ORIGINAL,
            )

        cache_key = build_translation_cache_key(key)
        cached = await self._cache.get(cache_key)
        if isinstance(cached, dict) and cached.get("translated_text"):
            logger.debug("翻译缓存命中", key=key)
            return source_language, Resolution(
                text=cached["translated_text"],
                source_language=cached.get("source_language") or source_language,
                origin=Origin.CACHE,
                was_cached=True,
            )

        async with self._uow_factory() as uow:
            record = await uow.translations.find_one(
                key.document_id, key.page, key.target_language
            )
        if record is not None:
            logger.debug("持久存储命中，回填缓存", key=key)
            await self._cache.set(cache_key, _cache_entry(record), ttl=self._cache_ttl)
            return source_language, Resolution(
                text=record.translated_text,
                source_language=record.source_language,
                origin=Origin.STORE,
            )

        return source_language, None
