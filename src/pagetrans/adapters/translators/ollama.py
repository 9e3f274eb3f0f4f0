# src/pagetrans/adapters/translators/ollama.py
"""
基于本地 Ollama 服务 (`POST /api/generate`) 的翻译引擎。
"""

from __future__ import annotations

import httpx
import structlog

from pagetrans.config import OllamaSettings
from pagetrans.core.exceptions import TransientTranslationError
from pagetrans.domain.languages import full_name

from .base import BaseTranslationEngine

logger = structlog.get_logger(__name__)

PROMPT_TEMPLATE = (
    "Translate the following text to {language}. "
    "Respond ONLY with the translation, no explanations:\n\n{text}"
)


class OllamaEngine(BaseTranslationEngine[OllamaSettings]):
    CONFIG_MODEL = OllamaSettings

    def __init__(self, config: OllamaSettings, client: httpx.AsyncClient | None = None):
        super().__init__(config)
        self._client = client
        self._owns_client = client is None

    async def initialize(self) -> None:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.config.host.rstrip("/"),
                timeout=httpx.Timeout(
                    self.config.timeout, connect=self.config.connect_timeout
                ),
            )
        await super().initialize()

    async def close(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
        await super().close()

    def build_prompt(self, text: str, target_language: str) -> str:
        # 模型对语言全称的理解优于代码
        return PROMPT_TEMPLATE.format(language=full_name(target_language), text=text)

    async def _translate(self, text: str, target_language: str) -> str:
        assert self._client is not None
        body = {
            "model": self.config.model,
            "prompt": self.build_prompt(text, target_language),
            "stream": False,
            "options": {"temperature": self.config.temperature},
        }
        try:
            response = await self._client.post("/api/generate", json=body)
            response.raise_for_status()
            data = response.json()
        except httpx.TimeoutException as e:
            logger.warning("Ollama 请求超时", model=self.config.model, error=str(e))
            raise TransientTranslationError(f"Ollama 请求超时: {e}") from e
        except httpx.HTTPError as e:
            logger.warning("Ollama 请求失败", model=self.config.model, error=str(e))
            raise TransientTranslationError(f"Ollama 请求失败: {e}") from e
        except ValueError as e:
            raise TransientTranslationError(f"Ollama 返回了非法 JSON: {e}") from e

        if not isinstance(data, dict) or not isinstance(data.get("response"), str):
            raise TransientTranslationError("Ollama 响应中缺少 'response' 字段")
        return data["response"].strip()
