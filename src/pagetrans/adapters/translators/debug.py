# src/pagetrans/adapters/translators/debug.py
"""
提供一个用于开发和测试的调试翻译引擎。
"""

import asyncio

from pagetrans.config import DebugEngineSettings
from pagetrans.core.exceptions import TransientTranslationError

from .base import BaseTranslationEngine


class DebugEngine(BaseTranslationEngine[DebugEngineSettings]):
    """不访问网络的确定性引擎。"""

    CONFIG_MODEL = DebugEngineSettings

    async def _translate(self, text: str, target_language: str) -> str:
        # 保持一次真实的事件循环切换，行为与网络引擎一致
        await asyncio.sleep(0)
        if self.config.mode == "FAIL" or text == self.config.fail_on_text:
            raise TransientTranslationError("Debug engine forced to fail")
        return f"Translated({text}) to {target_language}"
