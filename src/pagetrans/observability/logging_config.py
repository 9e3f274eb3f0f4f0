# src/pagetrans/observability/logging_config.py
"""
集中配置日志系统：structlog ⇄ 标准 logging，并与 Rich 集成。

- console：面板式输出，本地时间，适合开发与 `jobs monitor` 旁路观察。
- json   ：结构化输出，ISO-8601 + UTC，适合 Worker 在生产环境运行。
"""

from __future__ import annotations

import logging
from collections.abc import MutableMapping
from typing import TYPE_CHECKING, Any, Literal

import structlog
from rich.console import Console, Group, RenderableType
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from structlog.typing import Processor

if TYPE_CHECKING:
    from pagetrans.config import PageTransConfig

APP_LOGGER_NAME = "pagetrans"

_NOISY_LOGGERS = (
    "urllib3",
    "httpcore",
    "httpx",
    "asyncio",
    "sqlalchemy.engine.Engine",
    "pdfminer",
)


class HybridPanelRenderer:
    """
    structlog 处理器：把一条事件渲染为 Rich 面板。

    标题为等宽级别标签，附加字段以“键 : 值”两列表格展示，长值折行。
    """

    _LEVEL_STYLES: dict[str, tuple[str, str]] = {
        "debug": ("cyan", "DEBUG   "),
        "info": ("green", "INFO    "),
        "warning": ("yellow", "WARNING "),
        "error": ("bold red", "ERROR   "),
        "critical": ("magenta", "CRITICAL"),
    }

    def __init__(
        self,
        *,
        kv_truncate_at: int = 256,
        show_timestamp: bool = True,
        show_logger_name: bool = True,
        kv_key_width: int = 15,
        console: Console | None = None,
    ) -> None:
        self._console = console or Console()
        self._kv_truncate_at = kv_truncate_at
        self._show_timestamp = show_timestamp
        self._show_logger_name = show_logger_name
        self._kv_key_width = kv_key_width
        self._is_first_render = True

    def __call__(
        self, logger: Any, name: str, event_dict: MutableMapping[str, Any]
    ) -> str:
        event_msg = str(event_dict.pop("event", "")).strip()
        if not event_msg:
            return ""

        timestamp = event_dict.pop("timestamp", "")
        level = str(event_dict.pop("level", "info")).lower()
        logger_name = event_dict.pop("logger", "unknown")
        event_dict.pop("_record", None)
        event_dict.pop("_from_structlog", None)

        border_style, level_text = self._LEVEL_STYLES.get(
            level, ("dim", level.upper())
        )

        title_parts = [f"[{border_style}]{level_text}[/]"]
        if self._show_logger_name:
            title_parts.append(f"[cyan dim]({logger_name})[/]")

        renderables: list[RenderableType] = [Text(event_msg, justify="left")]
        if event_dict:
            renderables.append(self._kv_table(event_dict))

        subtitle = (
            Text(str(timestamp), style="dim")
            if (self._show_timestamp and timestamp)
            else None
        )

        with self._console.capture() as capture:
            self._console.print(
                Panel(
                    Group(*renderables),
                    title=Text.from_markup(" ".join(title_parts)),
                    title_align="left",
                    subtitle=subtitle,
                    subtitle_align="right",
                    border_style=border_style,
                    expand=False,
                    padding=(0, 1),
                )
            )
        rendered = capture.get().rstrip()

        if self._is_first_render:
            self._is_first_render = False
            return f"\n{rendered}"
        return rendered

    def _kv_table(self, kv: MutableMapping[str, Any]) -> Table:
        table = Table(show_header=False, show_edge=False, box=None, padding=(0, 1))
        table.add_column(style="dim", justify="right", width=self._kv_key_width)
        table.add_column(style="bright_white", overflow="fold")
        for key, value in sorted(kv.items()):
            value_repr = repr(value)
            # 长字符串去掉外层引号，便于折行
            if len(value_repr) > self._kv_truncate_at or "\n" in value_repr:
                if value_repr[:1] in ("'", '"') and value_repr[-1:] == value_repr[:1]:
                    value_repr = value_repr[1:-1]
            table.add_row(f"{key} :", Text(value_repr))
        return table


def setup_logging(
    *,
    log_level: str = "INFO",
    log_format: Literal["json", "console"] = "console",
    show_timestamp: bool = True,
    show_logger_name: bool = True,
    root_level: str | None = None,
    service: str | None = None,
    silence_noisy_libs: bool = True,
) -> None:
    """
    配置全局 structlog 日志系统。

    Args:
        log_level: 应用 logger (`pagetrans`) 的最低级别。
        log_format: 'console' 或 'json'。
        root_level: 根 logger 级别，默认 WARNING 以压低第三方噪声。
        service: 通过 contextvars 绑定到每条日志的服务名。
        silence_noisy_libs: 是否下调 httpx/sqlalchemy 等 logger 的级别。
    """
    pre_chain: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
    ]

    if log_format == "json":
        timestamper = structlog.processors.TimeStamper(fmt="iso", utc=True)
    else:
        timestamper = structlog.processors.TimeStamper(
            fmt="%Y-%m-%d %H:%M:%S", utc=False
        )

    structlog.configure(
        processors=[
            *pre_chain,
            timestamper,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    final_renderer: Processor
    if log_format == "console":
        final_renderer = HybridPanelRenderer(
            show_timestamp=show_timestamp,
            show_logger_name=show_logger_name,
        )
    else:
        final_renderer = structlog.processors.JSONRenderer()

    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            final_renderer,
        ],
        foreign_pre_chain=[*pre_chain, timestamper],
    )

    handler = logging.StreamHandler()
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    if root_logger.hasHandlers():
        root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel((root_level or "WARNING").upper())

    app_logger = logging.getLogger(APP_LOGGER_NAME)
    app_logger.setLevel(log_level.upper())
    app_logger.propagate = True

    structlog.contextvars.clear_contextvars()
    if service:
        structlog.contextvars.bind_contextvars(service=service)

    if silence_noisy_libs:
        for noisy in _NOISY_LOGGERS:
            logging.getLogger(noisy).setLevel(logging.WARNING)

    structlog.get_logger(f"{APP_LOGGER_NAME}.logging_config").debug(
        "日志系统已配置完成。",
        log_format=log_format,
        app_log_level=log_level.upper(),
        root_log_level=(root_level or "WARNING").upper(),
        service=service,
    )


def setup_logging_from_config(
    cfg: "PageTransConfig", *, service: str = "pagetrans"
) -> None:
    """根据 PageTransConfig 一键初始化日志系统。"""
    setup_logging(
        log_level=cfg.logging.level,
        log_format=cfg.logging.format,
        service=service,
    )
