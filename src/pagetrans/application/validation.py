# src/pagetrans/application/validation.py
"""
翻译请求的输入校验与页面文本准备。

所有失败都以 `ClientRequestError` 的子类抛出，由请求编排层转换为结构化响应。
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

import structlog

from pagetrans.core.exceptions import (
    DocumentNotFoundError,
    EmptyContentError,
    ValidationError,
)
from pagetrans.core.interfaces import DocumentLocator, TextExtractor
from pagetrans.core.types import TranslationRequestKey

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class PreparedRequest:
    key: TranslationRequestKey
    document_path: Path
    original_text: str


def _coerce_page(page: int | str | None) -> int:
    if page is None or (isinstance(page, str) and not page.strip()):
        raise ValidationError("Missing page number")
    if isinstance(page, bool):
        raise ValidationError("Invalid page number")
    if isinstance(page, str):
        if not page.strip().isdigit():
            raise ValidationError("Invalid page number")
        page = int(page)
    if not isinstance(page, int) or page < 1:
        raise ValidationError("Invalid page number")
    return page


class TranslationRequestValidator:
    def __init__(
        self,
        locator: DocumentLocator,
        extractor: TextExtractor,
        supported_languages: Iterable[str],
        default_target_language: str | None = None,
    ):
        self._locator = locator
        self._extractor = extractor
        self._supported = frozenset(supported_languages)
        self._default_target = default_target_language

    def validate(
        self,
        document_id: str | None,
        page: int | str | None,
        target_language: str | None,
    ) -> tuple[TranslationRequestKey, Path]:
        """校验三元组并定位文档。目标语言缺省时使用配置的默认值。"""
        if not document_id or not document_id.strip():
            raise ValidationError("Missing document id")
        page_number = _coerce_page(page)

        language = (target_language or self._default_target or "").strip().lower()
        if language not in self._supported:
            raise ValidationError("Unsupported target language")

        path = self._locator.locate(document_id)
        if path is None:
            raise DocumentNotFoundError("Document not found")
        return TranslationRequestKey(document_id, page_number, language), path

    def prepare(
        self,
        document_id: str | None,
        page: int | str | None,
        target_language: str | None,
    ) -> PreparedRequest:
        """校验并提取页面文本；页面无文本时抛出 EmptyContentError。"""
        key, path = self.validate(document_id, page, target_language)
        text = self._extractor.extract_page_text(path, key.page)
        if not text.strip():
            logger.info("页面没有可提取的文本", document_id=key.document_id, page=key.page)
            raise EmptyContentError("No text found on this page")
        return PreparedRequest(key=key, document_path=path, original_text=text)
