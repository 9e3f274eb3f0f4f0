# src/pagetrans/adapters/language/langdetect_identifier.py
"""
基于 langdetect 的语言识别器，结果限定在受支持的语言集合内。
"""

from __future__ import annotations

from collections.abc import Iterable

import structlog
from langdetect import DetectorFactory, LangDetectException, detect_langs

from pagetrans.core.types import LanguageGuess
from pagetrans.domain.languages import DEFAULT_SUPPORTED_LANGUAGES, UNKNOWN_LANGUAGE

logger = structlog.get_logger(__name__)

# 固定种子，保证同一文本的识别结果可复现
DetectorFactory.seed = 0


class LangDetectIdentifier:
    def __init__(
        self,
        supported: Iterable[str] = DEFAULT_SUPPORTED_LANGUAGES,
        sample_chars: int = 1000,
    ):
        self._supported = frozenset(supported)
        self._sample_chars = sample_chars

    def detect(self, text: str) -> LanguageGuess:
        sample = text[: self._sample_chars].strip()
        if not sample:
            return LanguageGuess(language=UNKNOWN_LANGUAGE)
        try:
            candidates = detect_langs(sample)
        except LangDetectException as e:
            logger.debug("语言识别失败", error=str(e))
            return LanguageGuess(language=UNKNOWN_LANGUAGE)

        # candidates 按概率降序排列
        for candidate in candidates:
            if candidate.lang in self._supported:
                return LanguageGuess(language=candidate.lang, confidence=candidate.prob)
        return LanguageGuess(language=UNKNOWN_LANGUAGE)
