# src/pagetrans/adapters/translators/factory.py
"""
翻译引擎工厂：根据应用配置发现、加载并实例化具体的翻译引擎。
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, AsyncIterator

import structlog
from pydantic import ValidationError as PydanticValidationError

from pagetrans.core.exceptions import ConfigurationError, EngineNotFoundError

from . import ENGINE_REGISTRY, discover_engines

if TYPE_CHECKING:
    from pagetrans.config import PageTransConfig

    from .base import BaseTranslationEngine

logger = structlog.get_logger(__name__)


def create_engine_instance(
    config: "PageTransConfig", engine_name: str
) -> "BaseTranslationEngine[Any]":
    """
    根据引擎名称创建一个翻译引擎实例。

    Raises:
        EngineNotFoundError: 请求的引擎未注册。
        ConfigurationError: 引擎所需的配置缺失或无效。
    """
    discover_engines()

    engine_class = ENGINE_REGISTRY.get(engine_name)
    if not engine_class:
        raise EngineNotFoundError(
            f"引擎 '{engine_name}' 未找到。已注册的引擎: {sorted(ENGINE_REGISTRY)}"
        )

    # 'debug' 的配置位于 debug_engine，其余与引擎同名
    config_attr_name = f"{engine_name}_engine" if engine_name == "debug" else engine_name
    engine_config_data = getattr(config, config_attr_name, None)
    if engine_config_data is None:
        raise ConfigurationError(
            f"引擎 '{engine_name}' 的配置部分 (属性: {config_attr_name}) 在主配置中不存在。"
        )

    try:
        engine_config = engine_class.CONFIG_MODEL.model_validate(
            engine_config_data.model_dump()
        )
    except PydanticValidationError as e:
        raise ConfigurationError(
            f"创建引擎 '{engine_name}' 实例时配置验证失败: {e}"
        ) from e
    logger.info("翻译引擎已成功创建", engine=engine_name)
    return engine_class(config=engine_config)


async def init_translation_engine(
    config: "PageTransConfig", engine_name: str
) -> AsyncIterator["BaseTranslationEngine[Any]"]:
    """DI Resource：创建并初始化引擎，容器关闭时释放。"""
    engine = create_engine_instance(config, engine_name)
    await engine.initialize()
    try:
        yield engine
    finally:
        await engine.close()
