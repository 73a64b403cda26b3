# packages/server/src/lingohub/observability/logging_config.py
"""
日志系统配置：structlog 通过 ProcessorFormatter 桥接到标准 logging。

- console：本地开发使用，Rich 面板输出，本地时间。
- json   ：生产环境使用，每条日志一行 JSON，时间为 ISO-8601 UTC。
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
    from lingohub.config import LingoHubConfig

APP_LOGGER_NAME = "lingohub"

_LEVEL_STYLES: dict[str, tuple[str, str]] = {
    "debug": ("cyan", "DEBUG   "),
    "info": ("green", "INFO    "),
    "warning": ("yellow", "WARNING "),
    "error": ("bold red", "ERROR   "),
    "critical": ("magenta", "CRITICAL"),
}

_NOISY_LOGGERS = ("asyncio", "aiosqlite", "sqlalchemy.engine.Engine")


def _unquote_long(value: Any, limit: int) -> str:
    text = repr(value)
    if (len(text) > limit or "\n" in text) and text[:1] == text[-1:] and text[:1] in "'\"":
        return text[1:-1]
    return text


class HybridPanelRenderer:
    """
    structlog 最终渲染器：一条日志渲染为一个 Rich 面板。

    标题为等宽级别标签加 logger 名称，正文为消息和按键排序的键值表，
    时间戳放在右下角。
    """

    def __init__(
        self,
        *,
        kv_truncate_at: int = 256,
        kv_key_width: int = 15,
        show_timestamp: bool = True,
        show_logger_name: bool = True,
        console: Console | None = None,
    ) -> None:
        self._console = console or Console()
        self._kv_truncate_at = kv_truncate_at
        self._kv_key_width = kv_key_width
        self._show_timestamp = show_timestamp
        self._show_logger_name = show_logger_name
        self._first = True

    def __call__(
        self, logger: Any, name: str, event_dict: MutableMapping[str, Any]
    ) -> str:
        event = str(event_dict.pop("event", "")).strip()
        if not event:
            return ""

        timestamp = event_dict.pop("timestamp", "")
        level = str(event_dict.pop("level", "info")).lower()
        logger_name = event_dict.pop("logger", "unknown")
        event_dict.pop("_record", None)
        event_dict.pop("_from_structlog", None)

        style, label = _LEVEL_STYLES.get(level, ("dim", level.upper()))
        title = f"[{style}]{label}[/]"
        if self._show_logger_name:
            title += f" [cyan dim]({logger_name})[/]"

        body: list[RenderableType] = [Text(event)]
        if event_dict:
            body.append(self._kv_table(event_dict))

        panel = Panel(
            Group(*body),
            title=Text.from_markup(title),
            title_align="left",
            subtitle=Text(str(timestamp), style="dim")
            if self._show_timestamp and timestamp
            else None,
            subtitle_align="right",
            border_style=style,
            expand=False,
            padding=(1, 2),
        )
        with self._console.capture() as capture:
            self._console.print(panel)
        rendered = capture.get().rstrip()

        # 首条日志前空一行，避免与命令行输出粘连
        if self._first and rendered:
            self._first = False
            return f"\n{rendered}"
        return rendered

    def _kv_table(self, kv: MutableMapping[str, Any]) -> Table:
        table = Table(show_header=False, show_edge=False, box=None, padding=(0, 1))
        table.add_column(style="dim", justify="right", width=self._kv_key_width)
        table.add_column(style="bright_white", overflow="fold")
        for key, value in sorted(kv.items()):
            table.add_row(f"{key} :", Text(_unquote_long(value, self._kv_truncate_at)))
        return table


def setup_logging(
    *,
    log_level: str = "INFO",
    log_format: Literal["json", "console"] = "console",
    root_level: str | None = None,
    service: str | None = None,
    silence_noisy_libs: bool = True,
) -> None:
    """
    配置全局日志。

    Args:
        log_level: `lingohub` logger 的级别。
        log_format: 'console' 或 'json'。
        root_level: 根 logger 级别，默认 WARNING。
        service: 绑定到所有日志上的服务名。
        silence_noisy_libs: 是否把常见第三方 logger 压到 WARNING。
    """
    timestamper = (
        structlog.processors.TimeStamper(fmt="iso", utc=True)
        if log_format == "json"
        else structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S", utc=False)
    )
    shared: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        timestamper,
    ]

    structlog.configure(
        processors=[
            *shared,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    renderer: Processor = (
        structlog.processors.JSONRenderer(ensure_ascii=False)
        if log_format == "json"
        else HybridPanelRenderer()
    )
    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
        foreign_pre_chain=shared,
    )

    handler = logging.StreamHandler()
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
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
        service=service,
    )


def setup_logging_from_config(
    cfg: LingoHubConfig, *, service: str = "lingohub"
) -> None:
    """根据配置对象初始化日志系统。"""
    setup_logging(
        log_level=cfg.logging.level,
        log_format=cfg.logging.format,
        service=service,
    )
