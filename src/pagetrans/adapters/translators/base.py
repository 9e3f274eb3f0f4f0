# src/pagetrans/adapters/translators/base.py
"""
定义了所有 AI 翻译引擎的抽象基类。
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

from pydantic import BaseModel

from pagetrans.core.exceptions import TransientTranslationError

_ConfigType = TypeVar("_ConfigType", bound=BaseModel)


class BaseTranslationEngine(ABC, Generic[_ConfigType]):
    """翻译引擎的纯异步抽象基类，结构上满足 AiTranslator 协议。"""

    CONFIG_MODEL: type[_ConfigType]
    VERSION: str = "1.0.0"

    def __init__(self, config: _ConfigType):
        self.config = config
        self.initialized = False

    @classmethod
    def name(cls) -> str:
        """从类名自动推断引擎的名称。"""
        return cls.__name__.removesuffix("Engine").lower()

    async def initialize(self) -> None:
        """异步初始化钩子，用于建立 HTTP 连接池等。"""
        self.initialized = True

    async def close(self) -> None:
        """异步关闭钩子，用于释放资源。"""
        self.initialized = False

    @abstractmethod
    async def _translate(self, text: str, target_language: str) -> str:
        """[子类实现] 真正执行翻译的逻辑。"""
        raise NotImplementedError

    async def translate(self, text: str, target_language: str) -> str:
        """[公共 API] 翻译一段文本；空结果视为失败。"""
        if not self.initialized:
            await self.initialize()
        translated = (await self._translate(text, target_language)).strip()
        if not translated:
            raise TransientTranslationError(f"引擎 '{self.name()}' 返回了空译文")
        return translated
