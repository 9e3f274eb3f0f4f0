# src/pagetrans/bootstrap.py
"""
应用引导程序：加载配置并创建 DI 容器。
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Literal

import structlog
from dependency_injector import providers
from dotenv import dotenv_values

from pagetrans.config import PageTransConfig
from pagetrans.di.container import AppContainer

EnvMode = Literal["prod", "dev", "test"]

logger = structlog.get_logger("pagetrans.bootstrap")


def dotenv_files(env_mode: EnvMode, base_dir: Path | None = None) -> list[Path]:
    """按环境模式确定要加载的 .env 文件，后出现的文件优先级更高。"""
    root = base_dir or Path.cwd()
    candidates = [root / ".env"]
    if env_mode in ("dev", "test"):
        candidates.append(root / ".env.dev")
    if env_mode == "test":
        candidates.append(root / ".env.test")
    return [p for p in candidates if p.is_file()]


def load_dotenv_files(env_mode: EnvMode, base_dir: Path | None = None) -> list[Path]:
    """
    加载 .env 文件到进程环境。

    后出现的文件覆盖先出现的文件，但已存在的真实环境变量始终优先。
    """
    files = dotenv_files(env_mode, base_dir)
    logger.debug("确定要加载的 dotenv 文件", files=[str(p) for p in files])
    merged: dict[str, str] = {}
    for path in files:
        merged.update(
            {k: v for k, v in dotenv_values(path, encoding="utf-8").items() if v is not None}
        )
    for key, value in merged.items():
        os.environ.setdefault(key, value)
    return files


def create_app_config(env_mode: EnvMode, base_dir: Path | None = None) -> PageTransConfig:
    """加载、验证并返回应用配置对象。"""
    load_dotenv_files(env_mode, base_dir)
    return PageTransConfig()


def create_container(config: PageTransConfig) -> AppContainer:
    """创建 DI 容器，并以给定的配置对象作为唯一事实来源。"""
    container = AppContainer()
    container.config.override(providers.Object(config))
    return container


def bootstrap_app(env_mode: EnvMode = "dev") -> AppContainer:
    return create_container(create_app_config(env_mode))
