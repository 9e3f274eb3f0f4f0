# tests/unit/domain/test_keys.py
import pytest

from pagetrans.core.types import TranslationRequestKey
from pagetrans.domain.keys import (
    DEDUP_KEY_PREFIX,
    TRANSLATION_KEY_PREFIX,
    build_dedup_key,
    build_fingerprint,
    build_translation_cache_key,
)

pytestmark = pytest.mark.unit


def test_fingerprint_is_deterministic_sha256_hex():
    key = TranslationRequestKey("report.pdf", 3, "es")
    fp = build_fingerprint(key)
    assert fp == build_fingerprint(TranslationRequestKey("report.pdf", 3, "es"))
    assert len(fp) == 64
    int(fp, 16)


def test_fingerprint_distinguishes_each_component():
    base = build_fingerprint(TranslationRequestKey("report.pdf", 3, "es"))
    assert base != build_fingerprint(TranslationRequestKey("report2.pdf", 3, "es"))
    assert base != build_fingerprint(TranslationRequestKey("report.pdf", 4, "es"))
    assert base != build_fingerprint(TranslationRequestKey("report.pdf", 3, "fr"))


def test_separator_in_document_id_cannot_collide():
    a = TranslationRequestKey("a|1", 2, "es")
    b = TranslationRequestKey("a", 1, "2|es")
    assert build_fingerprint(a) != build_fingerprint(b)


def test_key_prefixes():
    key = TranslationRequestKey("report.pdf", 3, "es")
    assert build_dedup_key(key).startswith(DEDUP_KEY_PREFIX)
    cache_key = build_translation_cache_key(key)
    assert cache_key.startswith(TRANSLATION_KEY_PREFIX)
    assert cache_key.endswith(":3:es")
    assert "report.pdf" not in cache_key
