# src/pagetrans/domain/languages.py
"""
语言代码映射：受支持的语言集合、展示标签以及提供给 AI 提示词使用的英文全称。
"""

from __future__ import annotations

from typing import NamedTuple

UNKNOWN_LANGUAGE = "unknown"


class LanguageInfo(NamedTuple):
    label: str
    full_name: str


LANGUAGES: dict[str, LanguageInfo] = {
    "es": LanguageInfo("ES", "Spanish"),
    "en": LanguageInfo("EN", "English"),
    "fr": LanguageInfo("FR", "French"),
    "pt": LanguageInfo("PT", "Portuguese"),
    "de": LanguageInfo("DE", "German"),
    "it": LanguageInfo("IT", "Italian"),
    "nl": LanguageInfo("NL", "Dutch"),
    "pl": LanguageInfo("PL", "Polish"),
    "ru": LanguageInfo("RU", "Russian"),
}

DEFAULT_SUPPORTED_LANGUAGES: tuple[str, ...] = tuple(LANGUAGES)


def full_name(code: str) -> str:
    """英文全称（AI 对全称的理解优于代码）；未知代码原样返回。"""
    info = LANGUAGES.get(code)
    return info.full_name if info else code


def label(code: str) -> str:
    info = LANGUAGES.get(code)
    return info.label if info else code.upper()


def is_supported(code: str, supported: tuple[str, ...] | list[str] | None = None) -> bool:
    return code in (supported if supported is not None else LANGUAGES)
