# src/pagetrans/domain/keys.py
"""
包含由翻译请求三元组派生缓存键与去重指纹的纯函数。
"""

from __future__ import annotations

import hashlib

from pagetrans.core.types import TranslationRequestKey

DEDUP_KEY_PREFIX = "queue_dedup:"
TRANSLATION_KEY_PREFIX = "page_translation:"


def build_fingerprint(key: TranslationRequestKey) -> str:
    """
    计算请求三元组的指纹。

    指纹为 `SHA256(document_id + '|' + page + '|' + target_language)` 的十六进制摘要。
    文档标识中出现的 '|' 会被转义，以保证不同三元组不会拼接成同一个输入。
    """
    doc = key.document_id.replace("\\", "\\\\").replace("|", "\\|")
    blob = f"{doc}|{key.page}|{key.target_language}".encode("utf-8")
    return hashlib.sha256(blob).hexdigest()


def build_dedup_key(key: TranslationRequestKey) -> str:
    return f"{DEDUP_KEY_PREFIX}{build_fingerprint(key)}"


def build_translation_cache_key(key: TranslationRequestKey) -> str:
    """翻译缓存键：文档标识取哈希，避免非法字符与过长键名。"""
    doc_hash = hashlib.sha256(key.document_id.encode("utf-8")).hexdigest()
    return f"{TRANSLATION_KEY_PREFIX}{doc_hash}:{key.page}:{key.target_language}"
