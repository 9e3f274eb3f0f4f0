# src/pagetrans/config.py
"""
PageTrans 配置（Pydantic v2）

- 顶层 `PageTransConfig` 由环境变量加载（前缀 `PAGETRANS_`，嵌套分隔符 `__`），
  例如 `PAGETRANS_REDIS__URL=redis://localhost:6379/0`。
- 各领域子配置为普通 `BaseModel`，使用 `default_factory` 组装。
- `.env` 文件的加载由引导程序 (bootstrap.py) 负责。
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal, Optional

import langcodes
from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine.url import make_url

from pagetrans.domain.languages import DEFAULT_SUPPORTED_LANGUAGES

# ===================== 子模型 =====================


class DatabaseSettings(BaseModel):
    """主库（运行期异步驱动）"""

    url: str = Field(
        default="sqlite+aiosqlite:///pagetrans.db",
        description="异步 DSN（sqlite+aiosqlite / postgresql+asyncpg）",
    )
    echo: bool = Field(default=False, description="SQLAlchemy echo（调试）")
    pool_size: Optional[int] = None
    max_overflow: Optional[int] = None
    pool_timeout: int = 30
    pool_pre_ping: bool = True

    @field_validator("url")
    @classmethod
    def _validate_async_driver(cls, v: str) -> str:
        allowed = {"sqlite+aiosqlite", "postgresql+asyncpg"}
        try:
            drv = make_url(v).drivername.lower()
        except Exception as e:
            raise ValueError(f"非法数据库 URL：{v!r}（{e}）") from e
        if drv not in allowed:
            raise ValueError(
                f"不支持的运行期数据库驱动：{drv!r}，仅允许 {', '.join(sorted(allowed))}"
            )
        return v


class RedisSettings(BaseModel):
    url: Optional[str] = Field(default=None)
    key_prefix: str = Field(default="pagetrans:")


class CacheSettings(BaseModel):
    kind: Literal["redis", "memory"] = Field(default="memory")
    translation_ttl_seconds: int = Field(default=604800, ge=1, description="7 天")


class DedupSettings(BaseModel):
    ttl_seconds: int = Field(default=300, ge=1)
    atomic_claim: bool = Field(
        default=False,
        description="为 True 时用单次 set-if-absent 代替 is_queued → mark_queued 两步操作",
    )


class QueueSettings(BaseModel):
    kind: Literal["redis", "memory"] = Field(default="memory")
    stream_name: str = Field(default="pagetrans:translate_page")
    consumer_group: str = Field(default="pagetrans-workers")
    claim_idle_seconds: float = Field(
        default=300.0,
        ge=0,
        description="待确认消息空闲多久后可被其他 Worker 接管；应大于单次翻译的最长耗时，0 表示不接管",
    )


class RetryPolicySettings(BaseModel):
    max_attempts: int = Field(default=3, ge=1)
    initial_backoff: float = Field(default=1.0, gt=0)
    max_backoff: float = Field(default=60.0, gt=0)

    @model_validator(mode="after")
    def check_backoff_consistency(self) -> "RetryPolicySettings":
        if self.max_backoff < self.initial_backoff:
            raise ValueError("max_backoff 必须大于或等于 initial_backoff")
        return self


class WorkerSettings(BaseModel):
    poll_interval: float = Field(default=2.0, gt=0)
    worker_id: Optional[int] = Field(default=None, description="默认使用进程 PID")


class DocumentSettings(BaseModel):
    directory: Path = Field(default=Path("var/pdfs"))


class LanguageSettings(BaseModel):
    supported: list[str] = Field(default_factory=lambda: list(DEFAULT_SUPPORTED_LANGUAGES))
    detection_sample_chars: int = Field(default=1000, gt=0)
    default_target: str = Field(default="es")

    @field_validator("supported")
    @classmethod
    def _validate_codes(cls, v: list[str]) -> list[str]:
        for code in v:
            if not langcodes.tag_is_valid(code):
                raise ValueError(f"非法语言代码: {code}")
        return v

    @model_validator(mode="after")
    def _default_is_supported(self) -> "LanguageSettings":
        if self.default_target not in self.supported:
            raise ValueError(f"默认目标语言 {self.default_target!r} 不在支持列表中")
        return self


class OllamaSettings(BaseModel):
    host: str = Field(default="http://ollama:11434")
    model: str = Field(default="llama3.2:1b")
    temperature: float = Field(default=0.3, ge=0)
    timeout: float = Field(default=60.0, gt=0)
    connect_timeout: float = Field(default=5.0, gt=0)


class DebugEngineSettings(BaseModel):
    mode: Literal["SUCCESS", "FAIL"] = Field(default="SUCCESS")
    fail_on_text: Optional[str] = Field(default=None)


class LoggingSettings(BaseModel):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(default="INFO")
    format: Literal["console", "json"] = Field(default="console")


# ===================== 顶层配置 =====================
class PageTransConfig(BaseSettings):
    """
    PageTrans 核心配置模型。
    """

    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    redis: RedisSettings = Field(default_factory=RedisSettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)
    dedup: DedupSettings = Field(default_factory=DedupSettings)
    queue: QueueSettings = Field(default_factory=QueueSettings)
    retry_policy: RetryPolicySettings = Field(default_factory=RetryPolicySettings)
    worker: WorkerSettings = Field(default_factory=WorkerSettings)
    documents: DocumentSettings = Field(default_factory=DocumentSettings)
    language: LanguageSettings = Field(default_factory=LanguageSettings)
    ollama: OllamaSettings = Field(default_factory=OllamaSettings)
    debug_engine: DebugEngineSettings = Field(default_factory=DebugEngineSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    active_engine: Literal["debug", "ollama"] = "ollama"

    @model_validator(mode="after")
    def _redis_required(self) -> "PageTransConfig":
        if "redis" in (self.cache.kind, self.queue.kind) and not self.redis.url:
            raise ValueError("cache/queue 使用 redis 时必须配置 PAGETRANS_REDIS__URL")
        return self

    model_config = SettingsConfigDict(
        env_nested_delimiter="__",
        env_prefix="PAGETRANS_",
        case_sensitive=False,
        extra="ignore",
        env_file_encoding="utf-8",
    )
